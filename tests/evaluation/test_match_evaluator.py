"""Integration tests for match evaluation against SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from betleague.database.schema import Match, UserMatchBet
from betleague.evaluation import evaluator_for
from betleague.evaluation.types import BadRequestError, NotFoundError
from betleague.shared.enums import BetCategory

KICKOFF = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)


async def _league_with_match(seed, **match_fields):
    league = await seed.league()
    home = await seed.team(league, "Home")
    away = await seed.team(league, "Away")
    match = await seed.match(league, home, away, scheduled_at=KICKOFF, **match_fields)
    return league, match


class TestMatchEvaluation:
    """End-to-end scoring of one match."""

    @pytest.mark.asyncio
    async def test_scores_every_live_prediction(self, dbm, seed):
        league, match = await _league_with_match(seed, home_regular_score=2, away_regular_score=1)
        await seed.evaluator(league, "exact_score", 5)
        await seed.evaluator(league, "winner", 2)
        await seed.evaluator(league, "draw", 1)
        alice, alice_lu = await seed.member(league, "alice")
        bob, bob_lu = await seed.member(league, "bob")
        carol, carol_lu = await seed.member(league, "carol")
        alice_bet = await seed.match_bet(match, alice_lu, 2, 1)
        await seed.match_bet(match, bob_lu, 1, 0)
        await seed.match_bet(match, carol_lu, 0, 0)

        summary = await evaluator_for(dbm, BetCategory.MATCH).evaluate(match)

        assert [(r.user_id, r.total_points) for r in summary.results] == [(alice, 7), (bob, 2), (carol, 0)]
        assert [(e.evaluator_name, e.awarded, e.points) for e in summary.results[0].evaluator_results] == [
            ("draw", False, 0),
            ("exact_score", True, 5),
            ("winner", True, 2),
        ]
        assert summary.marked_evaluated is True
        assert summary.total_points == 9

        row = await seed.get(UserMatchBet, alice_bet)
        assert row.total_points == 7
        assert row.evaluated_at is not None
        assert (await seed.get(Match, match)).is_evaluated is True

    @pytest.mark.asyncio
    async def test_rerun_overwrites(self, dbm, seed):
        """A second run yields identical totals and never adds rows."""
        league, match = await _league_with_match(seed, home_regular_score=1, away_regular_score=1)
        await seed.evaluator(league, "draw", 3)
        _, lu = await seed.member(league, "alice")
        bet = await seed.match_bet(match, lu, 0, 0)

        evaluator = evaluator_for(dbm, BetCategory.MATCH)
        first = await evaluator.evaluate(match)
        second = await evaluator.evaluate(match)

        assert first.to_response() == second.to_response()
        assert (await seed.get(UserMatchBet, bet)).total_points == 3
        count = await dbm.read(select(func.count().label("n")).select_from(UserMatchBet))
        assert count[0]["n"] == 1

    @pytest.mark.asyncio
    async def test_missing_result_rejected_without_writes(self, dbm, seed):
        league, match = await _league_with_match(seed)
        await seed.evaluator(league, "exact_score", 5)
        _, lu = await seed.member(league, "alice")
        bet = await seed.match_bet(match, lu, 1, 0)

        with pytest.raises(BadRequestError) as exc_info:
            await evaluator_for(dbm, BetCategory.MATCH).evaluate(match)

        assert "without a recorded result" in exc_info.value.message
        row = await seed.get(UserMatchBet, bet)
        assert row.evaluated_at is None
        assert row.total_points == 0
        assert (await seed.get(Match, match)).is_evaluated is False

    @pytest.mark.asyncio
    async def test_unknown_or_deleted_match(self, dbm, seed):
        _, match = await _league_with_match(seed, home_regular_score=0, away_regular_score=0)
        evaluator = evaluator_for(dbm, BetCategory.MATCH)
        with pytest.raises(NotFoundError):
            await evaluator.evaluate(match + 100)

        await seed.soft_delete(Match, match)
        with pytest.raises(NotFoundError):
            await evaluator.evaluate(match)

    @pytest.mark.asyncio
    async def test_deleted_predictions_skipped(self, dbm, seed):
        league, match = await _league_with_match(seed, home_regular_score=3, away_regular_score=0)
        await seed.evaluator(league, "winner", 2)
        alice, alice_lu = await seed.member(league, "alice")
        _, bob_lu = await seed.member(league, "bob")
        await seed.match_bet(match, alice_lu, 1, 0)
        dropped = await seed.match_bet(match, bob_lu, 2, 0)
        await seed.soft_delete(UserMatchBet, dropped)

        summary = await evaluator_for(dbm, BetCategory.MATCH).evaluate(match)

        assert [r.user_id for r in summary.results] == [alice]
        assert (await seed.get(UserMatchBet, dropped)).evaluated_at is None
        assert summary.marked_evaluated is True

    @pytest.mark.asyncio
    async def test_no_evaluators_scores_zero(self, dbm, seed):
        league, match = await _league_with_match(seed, home_regular_score=1, away_regular_score=0)
        _, lu = await seed.member(league, "alice")
        await seed.match_bet(match, lu, 1, 0)

        summary = await evaluator_for(dbm, BetCategory.MATCH).evaluate(match)

        assert summary.results[0].total_points == 0
        assert summary.results[0].evaluator_results == ()
        assert summary.marked_evaluated is True

    @pytest.mark.asyncio
    async def test_doubled_match(self, dbm, seed):
        """is_doubled doubles the total but not the per-evaluator breakdown."""
        league, match = await _league_with_match(
            seed, home_regular_score=2, away_regular_score=0, is_doubled=True
        )
        await seed.evaluator(league, "exact_score", 5)
        await seed.evaluator(league, "winner", 2)
        _, lu = await seed.member(league, "alice")
        bet = await seed.match_bet(match, lu, 2, 0)

        summary = await evaluator_for(dbm, BetCategory.MATCH).evaluate(match)

        assert summary.results[0].total_points == 14
        assert [e.points for e in summary.results[0].evaluator_results] == [5, 2]
        assert (await seed.get(UserMatchBet, bet)).total_points == 14


class TestUserScopedEvaluation:
    """Evaluating a single user's prediction."""

    @pytest.mark.asyncio
    async def test_marks_only_when_everyone_scored(self, dbm, seed):
        league, match = await _league_with_match(seed, home_regular_score=1, away_regular_score=0)
        await seed.evaluator(league, "winner", 2)
        alice, alice_lu = await seed.member(league, "alice")
        bob, bob_lu = await seed.member(league, "bob")
        await seed.match_bet(match, alice_lu, 1, 0)
        bob_bet = await seed.match_bet(match, bob_lu, 0, 1)
        evaluator = evaluator_for(dbm, BetCategory.MATCH)

        first = await evaluator.evaluate(match, user_id=alice)
        assert [(r.user_id, r.total_points) for r in first.results] == [(alice, 2)]
        assert first.marked_evaluated is False
        assert (await seed.get(Match, match)).is_evaluated is False
        assert (await seed.get(UserMatchBet, bob_bet)).evaluated_at is None

        second = await evaluator.evaluate(match, user_id=bob)
        assert [(r.user_id, r.total_points) for r in second.results] == [(bob, 0)]
        assert second.marked_evaluated is True
        assert (await seed.get(Match, match)).is_evaluated is True

    @pytest.mark.asyncio
    async def test_user_without_prediction(self, dbm, seed):
        league, match = await _league_with_match(seed, home_regular_score=1, away_regular_score=0)
        await seed.evaluator(league, "winner", 2)
        _, alice_lu = await seed.member(league, "alice")
        bob, _ = await seed.member(league, "bob")
        await seed.match_bet(match, alice_lu, 1, 0)

        summary = await evaluator_for(dbm, BetCategory.MATCH).evaluate(match, user_id=bob)

        assert summary.results == ()
        assert summary.to_response() == {"success": True, "results": [], "totalUsersEvaluated": 0}
        assert summary.marked_evaluated is False


class TestRankedScorerEvaluation:
    """Scorer tiers are taken as of the match's scheduled time."""

    @pytest.mark.asyncio
    async def test_tier_at_kickoff(self, dbm, seed):
        league, match = await _league_with_match(seed, home_regular_score=1, away_regular_score=0)
        await seed.evaluator(
            league,
            "scorer",
            0,
            {"rankedPoints": {"1": 10, "2": 6}, "unrankedPoints": 2},
        )
        striker = await seed.player(league, "Striker", position="F")
        winger = await seed.player(league, "Winger", position="F")
        await seed.match_scorer(match, striker)
        await seed.match_scorer(match, winger)
        # promoted to tier 1 one microsecond after kickoff: too late for this match
        await seed.ranking(league, striker, 2, KICKOFF - timedelta(days=30), KICKOFF + timedelta(microseconds=1))
        await seed.ranking(league, striker, 1, KICKOFF + timedelta(microseconds=1))
        await seed.ranking(league, winger, 1, KICKOFF)

        alice, alice_lu = await seed.member(league, "alice")
        bob, bob_lu = await seed.member(league, "bob")
        carol, carol_lu = await seed.member(league, "carol")
        await seed.match_bet(match, alice_lu, 1, 0, scorer_id=striker)
        await seed.match_bet(match, bob_lu, 1, 0, scorer_id=winger)
        await seed.match_bet(match, carol_lu, 0, 0, no_scorer=True)

        summary = await evaluator_for(dbm, BetCategory.MATCH).evaluate(match)

        assert [(r.user_id, r.total_points) for r in summary.results] == [(alice, 6), (bob, 10), (carol, 0)]

    @pytest.mark.asyncio
    async def test_position_filter_excludes_goalkeeper(self, dbm, seed):
        league, match = await _league_with_match(seed, home_regular_score=1, away_regular_score=0)
        await seed.evaluator(
            league,
            "scorer",
            0,
            {"rankedPoints": {"1": 10}, "unrankedPoints": 2, "positions": ["F", "D"]},
        )
        keeper = await seed.player(league, "Keeper", position="G")
        await seed.match_scorer(match, keeper)
        _, lu = await seed.member(league, "alice")
        await seed.match_bet(match, lu, 1, 0, scorer_id=keeper)

        summary = await evaluator_for(dbm, BetCategory.MATCH).evaluate(match)

        assert summary.results[0].total_points == 0

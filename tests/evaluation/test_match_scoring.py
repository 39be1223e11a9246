"""Tests for evaluation/scoring/match.py."""

import pytest

from betleague.evaluation.configs import ScorerConfig
from betleague.evaluation.contexts import MatchOutcome, MatchPrediction, Rule, ScoringContext
from betleague.evaluation.scoring import (
    score_draw,
    score_exact_score,
    score_one_team_score,
    score_scorer,
    score_score_difference,
    score_soccer_playoff_advance,
    score_winner,
)

EMPTY = ScoringContext()


def _rule(kind: str, points: int, config=None) -> Rule:
    return Rule(evaluator_id=1, kind=kind, points=points, config=config)


def _pred(home: int, away: int, **kwargs) -> MatchPrediction:
    return MatchPrediction(home_score=home, away_score=away, **kwargs)


def _outcome(home: int, away: int, **kwargs) -> MatchOutcome:
    return MatchOutcome(home_regular_score=home, away_regular_score=away, **kwargs)


class TestExactScore:
    """Tests for exact_score."""

    def test_exact_match_awarded(self):
        assert score_exact_score(_pred(2, 1), _outcome(2, 1), _rule("exact_score", 5), EMPTY) == 5

    def test_uses_regulation_score(self):
        """Overtime goals do not count toward the exact score."""
        outcome = _outcome(1, 1, home_final_score=2, away_final_score=1)
        assert score_exact_score(_pred(2, 1), outcome, _rule("exact_score", 5), EMPTY) == 0

    def test_no_result_scores_zero(self):
        outcome = MatchOutcome(home_regular_score=None, away_regular_score=None)
        assert score_exact_score(_pred(0, 0), outcome, _rule("exact_score", 5), EMPTY) == 0


class TestScoreDifference:
    """Tests for score_difference."""

    def test_same_margin_awarded(self):
        assert score_score_difference(_pred(3, 2), _outcome(2, 1), _rule("score_difference", 3), EMPTY) == 3

    def test_blocked_by_exact_score(self):
        """An exact score is never also paid as a difference."""
        assert score_score_difference(_pred(2, 1), _outcome(2, 1), _rule("score_difference", 3), EMPTY) == 0

    def test_draw_margins_match(self):
        assert score_score_difference(_pred(0, 0), _outcome(2, 2), _rule("score_difference", 3), EMPTY) == 3


class TestOneTeamScore:
    """Tests for one_team_score."""

    def test_one_side_matches(self):
        assert score_one_team_score(_pred(2, 0), _outcome(2, 1), _rule("one_team_score", 1), EMPTY) == 1

    def test_blocked_by_difference(self):
        assert score_one_team_score(_pred(3, 1), _outcome(3, 1), _rule("one_team_score", 1), EMPTY) == 0
        assert score_one_team_score(_pred(4, 2), _outcome(3, 1), _rule("one_team_score", 1), EMPTY) == 0

    def test_neither_side_matches(self):
        assert score_one_team_score(_pred(0, 3), _outcome(2, 1), _rule("one_team_score", 1), EMPTY) == 0


class TestWinner:
    """Tests for winner."""

    def test_final_score_decides(self):
        """Overtime winner counts even when regulation was drawn."""
        outcome = _outcome(1, 1, home_final_score=2, away_final_score=1, is_overtime=True)
        assert score_winner(_pred(3, 1), outcome, _rule("winner", 2), EMPTY) == 2

    def test_predicted_draw_loses_to_overtime_winner(self):
        outcome = _outcome(1, 1, home_final_score=2, away_final_score=1)
        assert score_winner(_pred(1, 1), outcome, _rule("winner", 2), EMPTY) == 0

    def test_falls_back_to_regulation(self):
        assert score_winner(_pred(0, 1), _outcome(0, 2), _rule("winner", 2), EMPTY) == 2

    def test_wrong_side(self):
        assert score_winner(_pred(2, 0), _outcome(0, 2), _rule("winner", 2), EMPTY) == 0


class TestDraw:
    """Tests for draw."""

    def test_predicted_draw_awarded(self):
        assert score_draw(_pred(1, 1), _outcome(2, 2), _rule("draw", 2), EMPTY) == 2

    def test_blocked_by_exact_score(self):
        assert score_draw(_pred(1, 1), _outcome(1, 1), _rule("draw", 2), EMPTY) == 0

    def test_no_draw(self):
        assert score_draw(_pred(1, 1), _outcome(2, 1), _rule("draw", 2), EMPTY) == 0


class TestSoccerPlayoffAdvance:
    """Tests for soccer_playoff_advance."""

    def test_regular_season_game_ignored(self):
        outcome = _outcome(1, 1, home_advanced=True)
        pred = _pred(1, 1, home_advanced=True)
        assert score_soccer_playoff_advance(pred, outcome, _rule("soccer_playoff_advance", 3), EMPTY) == 0

    def test_correct_side_advances(self):
        outcome = _outcome(1, 1, is_playoff_game=True, home_advanced=False)
        pred = _pred(0, 0, home_advanced=False)
        assert score_soccer_playoff_advance(pred, outcome, _rule("soccer_playoff_advance", 3), EMPTY) == 3

    def test_unpicked_scores_zero(self):
        outcome = _outcome(1, 1, is_playoff_game=True, home_advanced=True)
        assert score_soccer_playoff_advance(_pred(1, 1), outcome, _rule("soccer_playoff_advance", 3), EMPTY) == 0


class TestFlatScorer:
    """Tests for scorer without a ranking config."""

    def test_correct_scorer(self):
        outcome = _outcome(1, 0, scorer_ids=frozenset({10}))
        assert score_scorer(_pred(1, 0, scorer_id=10), outcome, _rule("scorer", 4), EMPTY) == 4

    def test_wrong_scorer(self):
        outcome = _outcome(1, 0, scorer_ids=frozenset({10}))
        assert score_scorer(_pred(1, 0, scorer_id=11), outcome, _rule("scorer", 4), EMPTY) == 0

    def test_no_scorer_correct(self):
        assert score_scorer(_pred(0, 0, no_scorer=True), _outcome(0, 0), _rule("scorer", 4), EMPTY) == 4

    def test_no_scorer_wrong(self):
        outcome = _outcome(1, 0, scorer_ids=frozenset({10}))
        assert score_scorer(_pred(0, 0, no_scorer=True), outcome, _rule("scorer", 4), EMPTY) == 0

    def test_no_pick(self):
        outcome = _outcome(1, 0, scorer_ids=frozenset({10}))
        assert score_scorer(_pred(1, 0), outcome, _rule("scorer", 4), EMPTY) == 0


class TestRankedScorer:
    """Tests for scorer with rankedPoints / unrankedPoints."""

    CONFIG = ScorerConfig.model_validate({"rankedPoints": {"1": 10, "2": 6}, "unrankedPoints": 2})

    @pytest.mark.parametrize(
        "rankings, expected",
        [
            ({10: 1}, 10),
            ({10: 2}, 6),
            ({10: 3}, 2),
            ({}, 2),
        ],
    )
    def test_points_follow_tier(self, rankings, expected):
        """Tier 1 and 2 use the map; missing tiers and unranked use unrankedPoints."""
        outcome = _outcome(2, 0, scorer_ids=frozenset({10}))
        context = ScoringContext(rankings=rankings)
        points = score_scorer(_pred(2, 0, scorer_id=10), outcome, _rule("scorer", 99, self.CONFIG), context)
        assert points == expected

    def test_no_scorer_earns_unranked_points(self):
        points = score_scorer(_pred(0, 0, no_scorer=True), _outcome(0, 0), _rule("scorer", 99, self.CONFIG), EMPTY)
        assert points == 2

    def test_wrong_scorer_scores_zero_even_if_ranked(self):
        outcome = _outcome(2, 0, scorer_ids=frozenset({10}))
        context = ScoringContext(rankings={11: 1})
        assert score_scorer(_pred(2, 0, scorer_id=11), outcome, _rule("scorer", 99, self.CONFIG), context) == 0

    def test_position_filter(self):
        """A goalkeeper pick scores zero when only forwards are allowed."""
        config = ScorerConfig.model_validate(
            {"rankedPoints": {"1": 10}, "unrankedPoints": 2, "positions": ["F"]}
        )
        outcome = _outcome(1, 0, scorer_ids=frozenset({10, 20}))
        context = ScoringContext(rankings={10: 1, 20: 1}, player_positions={10: "G", 20: "F"})
        rule = _rule("scorer", 99, config)
        assert score_scorer(_pred(1, 0, scorer_id=10), outcome, rule, context) == 0
        assert score_scorer(_pred(1, 0, scorer_id=20), outcome, rule, context) == 10

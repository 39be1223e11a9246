from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betleague.database.schema import Match, MatchScorer, UserMatchBet
from betleague.shared.enums import AuditEventType, BetCategory

from ..contexts import MatchOutcome, MatchPrediction
from .base import BetAdapter


class MatchAdapter(BetAdapter):
    category = BetCategory.MATCH
    label = "match"
    audit_event = AuditEventType.MATCH_EVALUATED
    cache_tag = "matches"
    instance_model = Match
    user_bet_model = UserMatchBet

    @property
    def bet_fk(self):
        return UserMatchBet.match_id

    async def load_outcome(self, session: AsyncSession, instance: Match) -> MatchOutcome:
        scorer_ids = (
            await session.execute(
                select(MatchScorer.player_id).where(MatchScorer.match_id == instance.match_id)
            )
        ).scalars().all()
        return MatchOutcome(
            home_regular_score=instance.home_regular_score,
            away_regular_score=instance.away_regular_score,
            home_final_score=instance.home_final_score,
            away_final_score=instance.away_final_score,
            scorer_ids=frozenset(scorer_ids),
            is_overtime=instance.is_overtime,
            is_shootout=instance.is_shootout,
            is_playoff_game=bool(instance.is_playoff_game),
            home_advanced=instance.home_advanced,
        )

    def prediction_of(self, user_bet: UserMatchBet) -> MatchPrediction:
        return MatchPrediction(
            home_score=user_bet.home_score,
            away_score=user_bet.away_score,
            scorer_id=user_bet.scorer_id,
            no_scorer=user_bet.no_scorer,
            overtime=bool(user_bet.overtime),
            home_advanced=user_bet.home_advanced,
        )

    def player_ids(self, user_bet: UserMatchBet) -> Iterable[int]:
        return (user_bet.scorer_id,) if user_bet.scorer_id is not None else ()

    def multiplier(self, instance: Match) -> int:
        return 2 if instance.is_doubled else 1

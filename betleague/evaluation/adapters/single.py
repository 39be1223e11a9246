from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betleague.database.schema import SingleBet, SingleBetAdvancedTeam, UserSingleBet
from betleague.shared.enums import AuditEventType, BetCategory

from ..catalog import resolve_bound_evaluator
from ..contexts import Rule, SingleOutcome, SinglePrediction
from .base import BetAdapter


class SingleBetAdapter(BetAdapter):
    category = BetCategory.SINGLE_BET
    label = "single_bet"
    audit_event = AuditEventType.SINGLE_BET_EVALUATED
    cache_tag = "single-bets"
    instance_model = SingleBet
    user_bet_model = UserSingleBet

    @property
    def bet_fk(self):
        return UserSingleBet.single_bet_id

    async def load_outcome(self, session: AsyncSession, instance: SingleBet) -> SingleOutcome:
        advanced = (
            await session.execute(
                select(SingleBetAdvancedTeam.team_id).where(
                    SingleBetAdvancedTeam.single_bet_id == instance.single_bet_id,
                    SingleBetAdvancedTeam.deleted_at.is_(None),
                )
            )
        ).scalars().all()
        return SingleOutcome(
            team_id=instance.team_result_id,
            player_id=instance.player_result_id,
            value=instance.value_result,
            advanced_team_ids=frozenset(advanced),
        )

    async def resolve_rules(self, session: AsyncSession, instance: SingleBet) -> List[Rule]:
        if instance.evaluator_id is not None:
            return await resolve_bound_evaluator(
                session, instance.evaluator_id, instance.league_id, self.category
            )
        return await super().resolve_rules(session, instance)

    def prediction_of(self, user_bet: UserSingleBet) -> SinglePrediction:
        return SinglePrediction(
            team_id=user_bet.team_id,
            player_id=user_bet.player_id,
            value=user_bet.value,
        )

    def player_ids(self, user_bet: UserSingleBet) -> Iterable[int]:
        return (user_bet.player_id,) if user_bet.player_id is not None else ()

    def value_column(self):
        return UserSingleBet.value

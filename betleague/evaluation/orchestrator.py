"""Atomic evaluator: one generic skeleton shared by every bet category.

load instance -> require outcome -> resolve evaluators -> load predictions ->
prefetch batch context -> score -> write totals, all inside one transaction at
the configured isolation level. Re-running overwrites ``total_points``; rows
are never created or appended.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from time import monotonic
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from betleague.database.dbm import DBM
from betleague.database.schema import LeagueUser, Player

from .adapters.base import BetAdapter
from .catalog import EVALUATOR_KINDS, needs_all_values, needs_positions, needs_rankings
from .contexts import Rule, ScoringContext
from .rankings import rankings_at
from .types import (
    BadRequestError,
    EvaluationSummary,
    EvaluatorResult,
    NotFoundError,
    UserEvaluation,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AtomicEvaluator:
    def __init__(self, dbm: DBM, adapter: BetAdapter):
        self.dbm = dbm
        self.adapter = adapter

    async def evaluate(self, bet_id: int, user_id: Optional[int] = None) -> EvaluationSummary:
        """Score every live prediction on ``bet_id`` (or only ``user_id``'s).

        Raises:
            NotFoundError: the bet instance does not exist or is deleted.
            BadRequestError: no outcome recorded, or a malformed evaluator config.
        """
        async with self.dbm.transaction() as session:
            return await self.evaluate_in_session(session, bet_id, user_id)

    async def evaluate_in_session(
        self,
        session: AsyncSession,
        bet_id: int,
        user_id: Optional[int] = None,
    ) -> EvaluationSummary:
        adapter = self.adapter
        started = monotonic()

        instance = await adapter.load_instance(session, bet_id)
        if instance is None or instance.deleted_at is not None:
            raise NotFoundError(f"{adapter.label} {bet_id} not found")

        outcome = await adapter.load_outcome(session, instance)
        if not outcome.has_result:
            raise BadRequestError(f"Cannot evaluate {adapter.label} without a recorded result")

        rules = await adapter.resolve_rules(session, instance)
        targets = await self._load_user_bets(session, bet_id, user_id)
        context = await self._build_context(
            session, bet_id, instance, rules, [b for b, _ in targets]
        )

        now = _utcnow()
        multiplier = adapter.multiplier(instance)
        results: List[UserEvaluation] = []
        for user_bet, owner_id in targets:
            total, breakdown = self._score(user_bet, outcome, rules, context)
            total *= multiplier
            user_bet.total_points = total
            user_bet.evaluated_at = now
            user_bet.updated_at = now
            results.append(UserEvaluation(owner_id, total, breakdown))
        await session.flush()

        marked = False
        if user_id is None or await self._count_unevaluated(session, bet_id) == 0:
            instance.is_evaluated = True
            instance.updated_at = now
            marked = True
            await session.flush()

        logger.info(
            {
                "evaluation": {
                    "event": "batch_scored",
                    "category": adapter.category.value,
                    "bet_id": bet_id,
                    "user_id": user_id,
                    "n_rules": len(rules),
                    "n_users": len(results),
                    "marked_evaluated": marked,
                    "elapsed_ms": int((monotonic() - started) * 1000),
                }
            }
        )
        return EvaluationSummary(
            bet_id=bet_id,
            league_id=instance.league_id,
            results=tuple(results),
            marked_evaluated=marked,
        )

    def _score(
        self,
        user_bet: Any,
        outcome: Any,
        rules: List[Rule],
        context: ScoringContext,
    ) -> Tuple[int, Tuple[EvaluatorResult, ...]]:
        prediction = self.adapter.prediction_of(user_bet)
        total = 0
        breakdown: List[EvaluatorResult] = []
        for rule in rules:
            points = EVALUATOR_KINDS[rule.kind].score(prediction, outcome, rule, context)
            breakdown.append(EvaluatorResult(rule.kind, points > 0, points))
            total += points
        return total, tuple(breakdown)

    async def _load_user_bets(
        self,
        session: AsyncSession,
        bet_id: int,
        user_id: Optional[int],
    ) -> List[Tuple[Any, int]]:
        model = self.adapter.user_bet_model
        stmt = (
            select(model, LeagueUser.user_id)
            .join(LeagueUser, model.league_user_id == LeagueUser.league_user_id)
            .where(self.adapter.bet_fk == bet_id, model.deleted_at.is_(None))
            .order_by(self.adapter.user_bet_pk)
        )
        if user_id is not None:
            stmt = stmt.where(LeagueUser.user_id == user_id)
        return [(row[0], row[1]) for row in (await session.execute(stmt)).all()]

    async def _build_context(
        self,
        session: AsyncSession,
        bet_id: int,
        instance: Any,
        rules: List[Rule],
        user_bets: List[Any],
    ) -> ScoringContext:
        rankings: Dict[int, int] = {}
        positions: Dict[int, Optional[str]] = {}
        values: Tuple[int, ...] = ()

        if not user_bets or not rules:
            return ScoringContext()

        if needs_rankings(rules):
            rankings = await rankings_at(
                session, instance.league_id, self.adapter.ranking_time(instance)
            )

        if needs_positions(rules):
            player_ids = {pid for bet in user_bets for pid in self.adapter.player_ids(bet)}
            if player_ids:
                rows = await session.execute(
                    select(Player.player_id, Player.position).where(
                        Player.player_id.in_(player_ids)
                    )
                )
                positions = {pid: pos for pid, pos in rows.all()}

        value_column = self.adapter.value_column()
        if value_column is not None and needs_all_values(rules):
            model = self.adapter.user_bet_model
            # whole field, not just the targets, so single-user runs rank consistently
            rows = await session.execute(
                select(value_column).where(
                    self.adapter.bet_fk == bet_id,
                    model.deleted_at.is_(None),
                    value_column.is_not(None),
                )
            )
            values = tuple(rows.scalars().all())

        return ScoringContext(rankings=rankings, player_positions=positions, values=values)

    async def _count_unevaluated(self, session: AsyncSession, bet_id: int) -> int:
        model = self.adapter.user_bet_model
        stmt = select(func.count()).select_from(model).where(
            self.adapter.bet_fk == bet_id,
            model.deleted_at.is_(None),
            model.evaluated_at.is_(None),
        )
        return int((await session.execute(stmt)).scalar_one())


__all__ = ["AtomicEvaluator"]

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betleague.shared.enums import AuditEventType, BetCategory

from ..catalog import resolve_evaluators
from ..contexts import Rule


class BetAdapter(ABC):
    """Per-category glue between the generic evaluator and the schema.

    Subclasses name their ORM models and translate rows into the frozen
    prediction/outcome snapshots the scoring functions consume.
    """

    category: BetCategory
    label: str
    audit_event: AuditEventType
    cache_tag: str
    instance_model: Any
    user_bet_model: Any

    @property
    def instance_pk(self):
        return self.instance_model.__mapper__.primary_key[0]

    @property
    @abstractmethod
    def bet_fk(self):
        """Column on the user-bet model pointing at the bet instance."""

    @property
    def user_bet_pk(self):
        return self.user_bet_model.__mapper__.primary_key[0]

    async def load_instance(self, session: AsyncSession, bet_id: int) -> Any:
        stmt = select(self.instance_model).where(self.instance_pk == bet_id)
        return (await session.execute(stmt)).scalar_one_or_none()

    @abstractmethod
    async def load_outcome(self, session: AsyncSession, instance: Any) -> Any:
        """Snapshot of the recorded result; ``has_result`` is False until recorded."""

    async def resolve_rules(self, session: AsyncSession, instance: Any) -> List[Rule]:
        return await resolve_evaluators(session, instance.league_id, self.category)

    @abstractmethod
    def prediction_of(self, user_bet: Any) -> Any:
        ...

    def player_ids(self, user_bet: Any) -> Iterable[int]:
        return ()

    def value_column(self) -> Optional[Any]:
        return None

    def ranking_time(self, instance: Any) -> datetime:
        return instance.scheduled_at

    def multiplier(self, instance: Any) -> int:
        return 1


__all__ = ["BetAdapter"]

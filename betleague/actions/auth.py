from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select

from betleague.database.dbm import DBM
from betleague.database.schema import AppUser
from betleague.evaluation.types import ForbiddenError, UnauthorizedError


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, as handed over by the session layer."""

    user_id: int
    is_admin: bool = False


def require_admin(principal: Optional[Principal]) -> Principal:
    if principal is None:
        raise UnauthorizedError("Authentication required")
    if not principal.is_admin:
        raise ForbiddenError("Administrator privileges required")
    return principal


async def load_principal(dbm: DBM, user_id: int) -> Optional[Principal]:
    """Build a principal from ``app_user`` for trusted local callers (CLI, jobs)."""
    async with dbm.session() as session:
        row = (
            await session.execute(select(AppUser.user_id, AppUser.is_admin).where(AppUser.user_id == user_id))
        ).first()
    if row is None:
        return None
    return Principal(user_id=row.user_id, is_admin=bool(row.is_admin))


__all__ = ["Principal", "require_admin", "load_principal"]

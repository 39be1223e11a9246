"""Temporal scorer-ranking lookup.

A ranking version covers the half-open interval ``[effective_from, effective_to)``;
``effective_to`` NULL means the version is still current. When versions
overlap (a writer bug) the one that started latest wins.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from betleague.database.schema import ScorerRankingVersion


def _as_utc(at: datetime) -> datetime:
    if at.tzinfo is None:
        return at
    return at.astimezone(timezone.utc)


def _covering(at: datetime):
    return (
        ScorerRankingVersion.effective_from <= at,
        or_(
            ScorerRankingVersion.effective_to.is_(None),
            ScorerRankingVersion.effective_to > at,
        ),
    )


async def ranking_at(
    session: AsyncSession,
    player_id: int,
    at: datetime,
    *,
    league_id: Optional[int] = None,
) -> Optional[int]:
    """Tier in effect for ``player_id`` at ``at``, or None when unranked."""
    at = _as_utc(at)
    stmt = (
        select(ScorerRankingVersion.ranking)
        .where(ScorerRankingVersion.player_id == player_id, *_covering(at))
        .order_by(
            ScorerRankingVersion.effective_from.desc(),
            ScorerRankingVersion.ranking_version_id.desc(),
        )
        .limit(1)
    )
    if league_id is not None:
        stmt = stmt.where(ScorerRankingVersion.league_id == league_id)
    return (await session.execute(stmt)).scalar_one_or_none()


async def rankings_at(session: AsyncSession, league_id: int, at: datetime) -> Dict[int, int]:
    """Batch variant: ``{player_id: tier}`` for every player ranked at ``at``.

    One query per evaluation batch; players without a covering version are absent.
    """
    at = _as_utc(at)
    stmt = (
        select(ScorerRankingVersion.player_id, ScorerRankingVersion.ranking)
        .where(ScorerRankingVersion.league_id == league_id, *_covering(at))
        .order_by(
            ScorerRankingVersion.player_id,
            ScorerRankingVersion.effective_from.desc(),
            ScorerRankingVersion.ranking_version_id.desc(),
        )
    )
    tiers: Dict[int, int] = {}
    for player_id, ranking in (await session.execute(stmt)).all():
        # first row per player is the latest-starting covering version
        tiers.setdefault(player_id, ranking)
    return tiers


__all__ = ["ranking_at", "rankings_at"]

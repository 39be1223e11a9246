"""League leaderboard read model.

Totals are the sum of ``total_points`` over a member's live predictions in
all four bet categories. Ties share a rank (1, 2, 2, 4). Results are cached
under ``leaderboard:<league_id>``, which evaluation invalidates.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select, union_all

from betleague.actions.cache import TagCache, leaderboard_tag
from betleague.database.dbm import DBM
from betleague.database.schema import (
    LeagueUser,
    UserMatchBet,
    UserQuestionBet,
    UserSeriesBet,
    UserSingleBet,
)
from betleague.shared.rows import LeaderboardRow

_USER_BET_MODELS = (UserMatchBet, UserSeriesBet, UserSingleBet, UserQuestionBet)


def _points_subquery():
    parts = [
        select(
            model.league_user_id.label("league_user_id"),
            model.total_points.label("points"),
        ).where(model.deleted_at.is_(None))
        for model in _USER_BET_MODELS
    ]
    return union_all(*parts).subquery("points")


async def compute_leaderboard(dbm: DBM, league_id: int) -> List[LeaderboardRow]:
    points = _points_subquery()
    total = func.coalesce(func.sum(points.c.points), 0).label("total_points")
    stmt = (
        select(LeagueUser.league_user_id, LeagueUser.user_id, total)
        .select_from(LeagueUser)
        .outerjoin(points, points.c.league_user_id == LeagueUser.league_user_id)
        .where(LeagueUser.league_id == league_id, LeagueUser.deleted_at.is_(None))
        .group_by(LeagueUser.league_user_id, LeagueUser.user_id)
        .order_by(total.desc(), LeagueUser.user_id)
    )
    rows = await dbm.read(stmt)

    board: List[LeaderboardRow] = []
    rank = 0
    previous: Optional[int] = None
    for position, row in enumerate(rows, start=1):
        points_value = int(row["total_points"])
        if points_value != previous:
            rank = position
            previous = points_value
        board.append(
            {
                "rank": rank,
                "leagueUserId": row["league_user_id"],
                "userId": row["user_id"],
                "totalPoints": points_value,
            }
        )
    return board


async def get_leaderboard(
    dbm: DBM,
    league_id: int,
    cache: Optional[TagCache] = None,
) -> List[LeaderboardRow]:
    """Cached leaderboard for ``league_id``."""
    if cache is None:
        return await compute_leaderboard(dbm, league_id)
    tag = leaderboard_tag(league_id)
    return await cache.get_or_set(
        tag,
        lambda: compute_leaderboard(dbm, league_id),
        tags=(tag,),
    )


__all__ = ["compute_leaderboard", "get_leaderboard"]

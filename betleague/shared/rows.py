from __future__ import annotations

from typing import List, TypedDict


class EvaluatorResultRow(TypedDict):
    evaluatorName: str
    awarded: bool
    points: int


class UserResultRow(TypedDict):
    userId: int
    totalPoints: int
    evaluatorResults: List[EvaluatorResultRow]


class EvaluationResponse(TypedDict, total=False):
    success: bool
    results: List[UserResultRow]
    totalUsersEvaluated: int
    error: str
    code: str


class LeaderboardRow(TypedDict):
    rank: int
    leagueUserId: int
    userId: int
    totalPoints: int


__all__ = [
    "EvaluatorResultRow",
    "UserResultRow",
    "EvaluationResponse",
    "LeaderboardRow",
]

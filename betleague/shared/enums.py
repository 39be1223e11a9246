from __future__ import annotations

from enum import Enum


class BetCategory(str, Enum):
    MATCH = "match"
    SERIES = "series"
    SINGLE_BET = "single_bet"
    QUESTION = "question"


class EvaluatorKindName(str, Enum):
    # match
    EXACT_SCORE = "exact_score"
    SCORE_DIFFERENCE = "score_difference"
    ONE_TEAM_SCORE = "one_team_score"
    WINNER = "winner"
    DRAW = "draw"
    SOCCER_PLAYOFF_ADVANCE = "soccer_playoff_advance"
    SCORER = "scorer"
    # series
    SERIES_EXACT = "series_exact"
    SERIES_WINNER = "series_winner"
    # single bet
    EXACT_TEAM = "exact_team"
    EXACT_PLAYER = "exact_player"
    EXACT_VALUE = "exact_value"
    CLOSEST_VALUE = "closest_value"
    GROUP_STAGE_TEAM = "group_stage_team"
    # question
    QUESTION = "question"


class AuditEventType(str, Enum):
    MATCH_EVALUATED = "MATCH_EVALUATED"
    SERIES_EVALUATED = "SERIES_EVALUATED"
    SINGLE_BET_EVALUATED = "SINGLE_BET_EVALUATED"
    QUESTION_EVALUATED = "QUESTION_EVALUATED"


class AuditEventCategory(str, Enum):
    ADMIN_ACTION = "ADMIN_ACTION"
    EVALUATION = "EVALUATION"


class LogSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


__all__ = [
    "BetCategory",
    "EvaluatorKindName",
    "AuditEventType",
    "AuditEventCategory",
    "LogSeverity",
]

from .base import Base, metadata
from .league import AppUser, League, LeagueUser, Player, ScorerRankingVersion, Team
from .evaluator import Evaluator, EvaluatorType
from .bets import (
    Match,
    MatchScorer,
    Question,
    Series,
    SingleBet,
    SingleBetAdvancedTeam,
    UserMatchBet,
    UserQuestionBet,
    UserSeriesBet,
    UserSingleBet,
)
from .audit import AuditLog

__all__ = [
    "Base",
    "metadata",
    "AppUser",
    "League",
    "LeagueUser",
    "Team",
    "Player",
    "ScorerRankingVersion",
    "EvaluatorType",
    "Evaluator",
    "Match",
    "MatchScorer",
    "UserMatchBet",
    "Series",
    "UserSeriesBet",
    "SingleBet",
    "SingleBetAdvancedTeam",
    "UserSingleBet",
    "Question",
    "UserQuestionBet",
    "AuditLog",
]

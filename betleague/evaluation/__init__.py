from betleague.database.dbm import DBM
from betleague.shared.enums import BetCategory

from .adapters import BetAdapter, MatchAdapter, QuestionAdapter, SeriesAdapter, SingleBetAdapter
from .orchestrator import AtomicEvaluator
from .types import (
    BadRequestError,
    ConflictError,
    ErrorCode,
    EvaluationError,
    EvaluationSummary,
    EvaluatorResult,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UserEvaluation,
)

ADAPTERS = {
    BetCategory.MATCH: MatchAdapter,
    BetCategory.SERIES: SeriesAdapter,
    BetCategory.SINGLE_BET: SingleBetAdapter,
    BetCategory.QUESTION: QuestionAdapter,
}


def evaluator_for(dbm: DBM, category: BetCategory) -> AtomicEvaluator:
    return AtomicEvaluator(dbm, ADAPTERS[category]())


__all__ = [
    "ADAPTERS",
    "AtomicEvaluator",
    "BetAdapter",
    "evaluator_for",
    "ErrorCode",
    "EvaluationError",
    "NotFoundError",
    "BadRequestError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
    "EvaluatorResult",
    "UserEvaluation",
    "EvaluationSummary",
]

"""Result types and the error taxonomy for bet evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from betleague.shared.rows import EvaluationResponse, EvaluatorResultRow, UserResultRow


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class EvaluationError(Exception):
    """Domain error raised by the evaluation engine.

    Raising inside ``DBM.transaction()`` rolls the whole batch back.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class NotFoundError(EvaluationError):
    code = ErrorCode.NOT_FOUND


class BadRequestError(EvaluationError):
    code = ErrorCode.BAD_REQUEST


class ConflictError(EvaluationError):
    code = ErrorCode.CONFLICT


class UnauthorizedError(EvaluationError):
    code = ErrorCode.UNAUTHORIZED


class ForbiddenError(EvaluationError):
    code = ErrorCode.FORBIDDEN


@dataclass(frozen=True)
class EvaluatorResult:
    evaluator_name: str
    awarded: bool
    points: int

    def to_response(self) -> EvaluatorResultRow:
        return {
            "evaluatorName": self.evaluator_name,
            "awarded": self.awarded,
            "points": self.points,
        }


@dataclass(frozen=True)
class UserEvaluation:
    user_id: int
    total_points: int
    evaluator_results: Tuple[EvaluatorResult, ...] = ()

    def to_response(self) -> UserResultRow:
        return {
            "userId": self.user_id,
            "totalPoints": self.total_points,
            "evaluatorResults": [r.to_response() for r in self.evaluator_results],
        }


@dataclass(frozen=True)
class EvaluationSummary:
    bet_id: int
    league_id: int
    results: Tuple[UserEvaluation, ...] = field(default_factory=tuple)
    marked_evaluated: bool = False
    success: bool = True

    @property
    def total_users_evaluated(self) -> int:
        return len(self.results)

    @property
    def total_points(self) -> int:
        return sum(r.total_points for r in self.results)

    def to_response(self) -> EvaluationResponse:
        return {
            "success": self.success,
            "results": [r.to_response() for r in self.results],
            "totalUsersEvaluated": self.total_users_evaluated,
        }

    def result_rows(self) -> List[UserResultRow]:
        return [r.to_response() for r in self.results]


__all__ = [
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

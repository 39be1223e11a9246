"""Evaluation action layer.

Validates the request, requires an administrator, runs the atomic evaluator
with a bounded retry on serialization conflicts, then writes the audit record
and invalidates cached read models. The last two run after commit and their
failures are logged, never returned to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from time import monotonic
from typing import Any, Awaitable, Callable, Mapping, Optional

from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from betleague.config import Settings
from betleague.database.dbm import DBM
from betleague.database.errors import is_serialization_failure
from betleague.evaluation import AtomicEvaluator, evaluator_for
from betleague.evaluation.types import ErrorCode, EvaluationError, EvaluationSummary
from betleague.shared.enums import BetCategory
from betleague.shared.rows import EvaluationResponse

from .audit import EvaluationAuditLogger
from .auth import Principal, require_admin
from .cache import CATEGORY_TAGS, TagCache, get_cache, leaderboard_tag
from .validation import EvaluateRequest, describe_validation_error, parse_request

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Evaluation failed due to a datastore error; it is safe to run it again"


def failure(message: str, code: ErrorCode) -> EvaluationResponse:
    return {"success": False, "error": message, "code": code.value}


class EvaluationService:
    def __init__(
        self,
        dbm: DBM,
        settings: Optional[Settings] = None,
        *,
        audit: Optional[EvaluationAuditLogger] = None,
        cache: Optional[TagCache] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.dbm = dbm
        self.settings = settings or dbm.settings
        self.audit = audit or EvaluationAuditLogger(dbm)
        self.cache = cache if cache is not None else get_cache(self.settings.cache.ttl_seconds)
        self._sleep = sleep

    async def evaluate_match_bets(self, payload: Mapping[str, Any], principal: Optional[Principal]) -> EvaluationResponse:
        return await self.evaluate(BetCategory.MATCH, payload, principal)

    async def evaluate_series_bets(self, payload: Mapping[str, Any], principal: Optional[Principal]) -> EvaluationResponse:
        return await self.evaluate(BetCategory.SERIES, payload, principal)

    async def evaluate_single_bets(self, payload: Mapping[str, Any], principal: Optional[Principal]) -> EvaluationResponse:
        return await self.evaluate(BetCategory.SINGLE_BET, payload, principal)

    async def evaluate_question_bets(self, payload: Mapping[str, Any], principal: Optional[Principal]) -> EvaluationResponse:
        return await self.evaluate(BetCategory.QUESTION, payload, principal)

    async def evaluate(
        self,
        category: BetCategory,
        payload: Mapping[str, Any],
        principal: Optional[Principal],
    ) -> EvaluationResponse:
        started = monotonic()
        try:
            request = parse_request(payload)
        except ValidationError as exc:
            return failure(describe_validation_error(exc), ErrorCode.VALIDATION_ERROR)

        evaluator = evaluator_for(self.dbm, category)
        try:
            admin = require_admin(principal)
            summary = await self._run_with_retry(evaluator, request)
        except EvaluationError as exc:
            logger.warning({
                "evaluate_action": {
                    "event": "rejected",
                    "category": category.value,
                    "bet_id": request.bet_instance_id,
                    "code": exc.code.value,
                    "error": exc.message,
                }
            })
            return failure(exc.message, exc.code)
        except SQLAlchemyError:
            logger.exception({
                "evaluate_action": {
                    "event": "datastore_error",
                    "category": category.value,
                    "bet_id": request.bet_instance_id,
                }
            })
            return failure(INTERNAL_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR)

        duration_ms = int((monotonic() - started) * 1000)
        await self._record_audit(evaluator, admin, request, summary, duration_ms)
        self._invalidate_caches(category, summary)
        return summary.to_response()

    async def _run_with_retry(self, evaluator: AtomicEvaluator, request: EvaluateRequest) -> EvaluationSummary:
        policy = self.settings.evaluation
        backoff_ms = policy.initial_backoff_ms
        attempt = 0
        while True:
            attempt += 1
            try:
                return await evaluator.evaluate(request.bet_instance_id, request.user_id)
            except DBAPIError as exc:
                if not is_serialization_failure(exc) or attempt >= policy.max_attempts:
                    raise
                logger.warning({
                    "evaluate_action": {
                        "event": "serialization_retry",
                        "category": evaluator.adapter.category.value,
                        "bet_id": request.bet_instance_id,
                        "attempt": attempt,
                        "backoff_ms": backoff_ms,
                    }
                })
                await self._sleep(backoff_ms / 1000.0)
                backoff_ms = min(max(backoff_ms, 1) * 2, policy.max_backoff_ms)

    async def _record_audit(
        self,
        evaluator: AtomicEvaluator,
        admin: Principal,
        request: EvaluateRequest,
        summary: EvaluationSummary,
        duration_ms: int,
    ) -> None:
        try:
            await self.audit.record(
                event_type=evaluator.adapter.audit_event,
                admin_user_id=admin.user_id,
                bet_id=request.bet_instance_id,
                total_users_evaluated=summary.total_users_evaluated,
                total_points=summary.total_points,
                duration_ms=duration_ms,
                league_id=summary.league_id,
                user_id=request.user_id,
                results=summary.result_rows(),
            )
        except Exception:
            logger.exception({
                "evaluate_action": {
                    "event": "audit_failed",
                    "bet_id": request.bet_instance_id,
                }
            })

    def _invalidate_caches(self, category: BetCategory, summary: EvaluationSummary) -> None:
        tags = (CATEGORY_TAGS[category], leaderboard_tag(summary.league_id))
        try:
            dropped = self.cache.invalidate_tags(*tags)
        except Exception:
            logger.exception({"evaluate_action": {"event": "cache_invalidation_failed", "tags": list(tags)}})
            return
        logger.debug({"evaluate_action": {"event": "cache_invalidated", "tags": list(tags), "dropped": dropped}})


__all__ = ["EvaluationService", "failure", "INTERNAL_ERROR_MESSAGE"]

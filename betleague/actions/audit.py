"""Audit sink for evaluation events.

Every evaluation is written to ``audit_log`` in its own short transaction and
mirrored to the ``betleague.audit`` logger at EVENT level. Callers treat the sink as
fire-and-forget: the evaluation has already committed when it runs.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from betleague.database.dbm import DBM
from betleague.database.schema import AuditLog
from betleague.shared.enums import AuditEventCategory, AuditEventType, LogSeverity
from betleague.shared.hashing import compute_results_hash
from betleague.shared.logging import AUDIT_LOGGER_NAME, EVENTS_LEVEL_NUM

SENSITIVE_KEYS = (
    "password",
    "token",
    "api",
    "secret",
    "hash",
    "salt",
    "auth",
    "bearer",
)
MAX_SANITIZE_DEPTH = 5


def sanitize_metadata(metadata: Optional[Dict[str, Any]], depth: int = 0) -> Optional[Dict[str, Any]]:
    """Redact secret-looking keys and cap nesting depth."""
    if metadata is None:
        return None
    if depth >= MAX_SANITIZE_DEPTH:
        return {"_truncated": True}

    sanitized: Dict[str, Any] = {}
    for key, value in metadata.items():
        lowered = str(key).lower()
        if any(s in lowered for s in SENSITIVE_KEYS):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_metadata(value, depth + 1)
        elif isinstance(value, (list, tuple)):
            sanitized[key] = [
                sanitize_metadata(v, depth + 1) if isinstance(v, dict) else v for v in value
            ]
        else:
            sanitized[key] = value
    return sanitized


class EvaluationAuditLogger:
    """Persists and logs one audit row per evaluation."""

    def __init__(self, dbm: DBM, logger: Optional[logging.Logger] = None):
        self.dbm = dbm
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    async def record(
        self,
        *,
        event_type: AuditEventType,
        admin_user_id: int,
        bet_id: int,
        total_users_evaluated: int,
        total_points: int,
        duration_ms: int,
        league_id: Optional[int] = None,
        user_id: Optional[int] = None,
        results: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        """Write the evaluation event.

        Args:
            event_type: MATCH_EVALUATED, SERIES_EVALUATED, ...
            admin_user_id: Administrator who ran the evaluation
            bet_id: Evaluated bet instance
            total_users_evaluated: Number of predictions scored
            total_points: Sum of awarded points across the batch
            duration_ms: Wall time of the evaluation
            league_id: League the bet instance belongs to
            user_id: Set when only one user's prediction was evaluated
            results: Per-user result rows, digested for run-to-run comparison
        """
        resource_type = event_type.value.replace("_EVALUATED", "").lower()
        metadata: Dict[str, Any] = {
            "affectedUsers": total_users_evaluated,
            "totalPoints": total_points,
        }
        if user_id is not None:
            metadata["scopeUserId"] = user_id
        if results is not None:
            metadata["resultsDigest"] = compute_results_hash(resource_type, bet_id, results)
        metadata = sanitize_metadata(metadata)

        row = AuditLog(
            timestamp=datetime.now(timezone.utc),
            event_type=event_type,
            event_category=AuditEventCategory.EVALUATION,
            severity=LogSeverity.INFO,
            user_id=admin_user_id,
            resource_type=resource_type,
            resource_id=bet_id,
            league_id=league_id,
            description=f"{resource_type} {bet_id} evaluated by admin {admin_user_id}",
            event_metadata=metadata,
            duration_ms=duration_ms,
            success=True,
        )
        async with self.dbm.session() as session:
            async with session.begin():
                session.add(row)

        self.logger.log(EVENTS_LEVEL_NUM, {
            "event": event_type.value,
            "admin_user_id": admin_user_id,
            "resource_type": resource_type,
            "resource_id": bet_id,
            "league_id": league_id,
            "duration_ms": duration_ms,
            **metadata,
        })


__all__ = [
    "EvaluationAuditLogger",
    "sanitize_metadata",
    "SENSITIVE_KEYS",
]

"""Tests for actions/audit.py - evaluation audit sink."""

import logging
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select

from betleague.actions.audit import MAX_SANITIZE_DEPTH, EvaluationAuditLogger, sanitize_metadata
from betleague.database.schema import AuditLog
from betleague.shared.enums import AuditEventCategory, AuditEventType, LogSeverity
from betleague.shared.hashing import compute_results_hash
from betleague.shared.logging import EVENTS_LEVEL_NUM


class TestSanitizeMetadata:
    """Tests for sanitize_metadata."""

    def test_none(self):
        assert sanitize_metadata(None) is None

    def test_redacts_sensitive_keys(self):
        out = sanitize_metadata({"password": "x", "apiKey": "y", "sessionToken": "z", "points": 5})
        assert out == {
            "password": "[REDACTED]",
            "apiKey": "[REDACTED]",
            "sessionToken": "[REDACTED]",
            "points": 5,
        }

    def test_nested_and_lists(self):
        out = sanitize_metadata({"outer": {"secret": 1, "ok": 2}, "rows": [{"token": "t"}, 3]})
        assert out == {"outer": {"secret": "[REDACTED]", "ok": 2}, "rows": [{"token": "[REDACTED]"}, 3]}

    def test_depth_cap(self):
        data = {"v": 1}
        for _ in range(MAX_SANITIZE_DEPTH + 1):
            data = {"n": data}
        out = sanitize_metadata(data)
        for _ in range(MAX_SANITIZE_DEPTH):
            out = out["n"]
        assert out == {"_truncated": True}


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


class TestEvaluationAuditLogger:
    """Tests for EvaluationAuditLogger.record."""

    @pytest.mark.asyncio
    async def test_persists_row(self, dbm, seed, mock_logger):
        admin = await seed.user("root", is_admin=True)
        league = await seed.league()
        results = [{"userId": 3, "totalPoints": 5, "evaluatorResults": []}]

        sink = EvaluationAuditLogger(dbm, logger=mock_logger)
        await sink.record(
            event_type=AuditEventType.SINGLE_BET_EVALUATED,
            admin_user_id=admin,
            bet_id=42,
            total_users_evaluated=1,
            total_points=5,
            duration_ms=12,
            league_id=league,
            user_id=3,
            results=results,
        )

        async with dbm.session() as session:
            row = (await session.execute(select(AuditLog))).scalar_one()
        assert row.event_type == AuditEventType.SINGLE_BET_EVALUATED
        assert row.event_category == AuditEventCategory.EVALUATION
        assert row.severity == LogSeverity.INFO
        assert row.user_id == admin
        assert row.resource_type == "single_bet"
        assert row.resource_id == 42
        assert row.league_id == league
        assert row.duration_ms == 12
        assert row.success is True
        assert row.event_metadata == {
            "affectedUsers": 1,
            "totalPoints": 5,
            "scopeUserId": 3,
            "resultsDigest": compute_results_hash("single_bet", 42, results),
        }

        mock_logger.log.assert_called_once()
        level, logged = mock_logger.log.call_args.args
        assert level == EVENTS_LEVEL_NUM
        assert logged["event"] == "SINGLE_BET_EVALUATED"
        assert logged["resource_id"] == 42

    @pytest.mark.asyncio
    async def test_full_run_has_no_scope(self, dbm, seed, mock_logger):
        admin = await seed.user("root", is_admin=True)
        sink = EvaluationAuditLogger(dbm, logger=mock_logger)
        await sink.record(
            event_type=AuditEventType.MATCH_EVALUATED,
            admin_user_id=admin,
            bet_id=1,
            total_users_evaluated=0,
            total_points=0,
            duration_ms=1,
        )
        async with dbm.session() as session:
            row = (await session.execute(select(AuditLog))).scalar_one()
        assert row.resource_type == "match"
        assert row.event_metadata == {"affectedUsers": 0, "totalPoints": 0}

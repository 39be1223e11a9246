"""Persistent audit trail for administrator actions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from betleague.shared.enums import AuditEventCategory, AuditEventType, LogSeverity

from .base import (
    Base,
    JSONType,
    audit_event_category_enum,
    audit_event_type_enum,
    log_severity_enum,
)


class AuditLog(Base):
    __tablename__ = "audit_log"

    audit_log_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the event happened (UTC)",
    )
    event_type: Mapped[AuditEventType] = mapped_column(audit_event_type_enum, nullable=False)
    event_category: Mapped[AuditEventCategory] = mapped_column(
        audit_event_category_enum,
        nullable=False,
    )
    severity: Mapped[LogSeverity] = mapped_column(
        log_severity_enum,
        nullable=False,
        default=LogSeverity.INFO,
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("app_user.user_id", ondelete="SET NULL"),
        comment="Acting administrator",
    )
    resource_type: Mapped[Optional[str]] = mapped_column(String(64))
    resource_id: Mapped[Optional[int]] = mapped_column(Integer)
    league_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("league.league_id"))
    description: Mapped[Optional[str]] = mapped_column(Text)
    # "metadata" is reserved on declarative classes
    event_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata",
        JSONType,
        comment="Sanitized event details",
    )
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_audit_log_timestamp", "timestamp"),
        Index("ix_audit_log_event_type_timestamp", "event_type", "timestamp"),
        Index("ix_audit_log_user_timestamp", "user_id", "timestamp"),
    )


__all__ = ["AuditLog"]

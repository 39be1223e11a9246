"""Shared SQLAlchemy base definitions and enums."""

from __future__ import annotations

from sqlalchemy import JSON, Enum as SAEnum, MetaData
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

from betleague.shared.enums import (
    AuditEventCategory,
    AuditEventType,
    BetCategory,
    LogSeverity,
)


# Shared metadata constant so create_all sees every table
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=naming_convention)


class Base(DeclarativeBase):
    metadata = metadata


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# JSONB on PostgreSQL, plain JSON text elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

# SQLAlchemy Enum instances bound to shared metadata
bet_category_enum = SAEnum(
    BetCategory,
    name="bet_category",
    metadata=metadata,
    values_callable=_enum_values,
)
audit_event_type_enum = SAEnum(
    AuditEventType,
    name="audit_event_type",
    metadata=metadata,
    values_callable=_enum_values,
)
audit_event_category_enum = SAEnum(
    AuditEventCategory,
    name="audit_event_category",
    metadata=metadata,
    values_callable=_enum_values,
)
log_severity_enum = SAEnum(
    LogSeverity,
    name="log_severity",
    metadata=metadata,
    values_callable=_enum_values,
)


__all__ = [
    "Base",
    "metadata",
    "JSONType",
    "bet_category_enum",
    "audit_event_type_enum",
    "audit_event_category_enum",
    "log_severity_enum",
]

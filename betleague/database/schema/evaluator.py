"""Evaluator catalog and per-league rule instances."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from betleague.shared.enums import BetCategory

from .base import Base, JSONType, bet_category_enum


class EvaluatorType(Base):
    """Immutable catalog row: one per evaluator kind."""

    __tablename__ = "evaluator_type"

    evaluator_type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="Kind name (exact_team, scorer, ...)",
    )
    category: Mapped[BetCategory] = mapped_column(
        bet_category_enum,
        nullable=False,
        comment="Bet category the kind targets",
    )


class Evaluator(Base):
    __tablename__ = "evaluator"

    evaluator_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("league.league_id"),
        nullable=False,
    )
    evaluator_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("evaluator_type.evaluator_type_id"),
        nullable=False,
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), comment="Display label")
    points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Default award when the rule matches",
    )
    config: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType,
        comment="Kind-specific configuration payload",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint("points >= 0", name="points_non_negative"),
        Index("ix_evaluator_league_type", "league_id", "evaluator_type_id"),
    )


__all__ = ["EvaluatorType", "Evaluator"]

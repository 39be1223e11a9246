"""Bet instances (outcomes recorded by admins) and user predictions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

_NOT_DELETED = text("deleted_at IS NULL")


def _one_live_prediction(table: str, bet_column: str) -> Index:
    """At most one non-deleted prediction per (bet instance, league user)."""
    return Index(
        f"uq_{table}_{bet_column}_league_user_live",
        bet_column,
        "league_user_id",
        unique=True,
        postgresql_where=_NOT_DELETED,
        sqlite_where=_NOT_DELETED,
    )


class _BetInstanceColumns:
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("league.league_id"),
        nullable=False,
    )
    scheduled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Scheduled start / betting deadline (UTC)",
    )
    is_evaluated: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Set once every live prediction has been scored",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class _UserBetColumns:
    league_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("league_user.league_user_id"),
        nullable=False,
    )
    total_points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Points from the latest evaluation (overwritten each run)",
    )
    evaluated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        comment="When the prediction was last scored; NULL until first evaluation",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class Match(_BetInstanceColumns, Base):
    __tablename__ = "match"

    match_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    home_team_id: Mapped[int] = mapped_column(Integer, ForeignKey("team.team_id"), nullable=False)
    away_team_id: Mapped[int] = mapped_column(Integer, ForeignKey("team.team_id"), nullable=False)
    home_regular_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Home score after regulation time",
    )
    away_regular_score: Mapped[Optional[int]] = mapped_column(Integer)
    home_final_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Home score including overtime/shootout",
    )
    away_final_score: Mapped[Optional[int]] = mapped_column(Integer)
    is_overtime: Mapped[Optional[bool]] = mapped_column(Boolean)
    is_shootout: Mapped[Optional[bool]] = mapped_column(Boolean)
    is_playoff_game: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    home_advanced: Mapped[Optional[bool]] = mapped_column(
        Boolean,
        comment="Playoff only: whether the home side advanced",
    )
    is_doubled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Double every user's total for this match",
    )

    __table_args__ = (
        Index("ix_match_league_scheduled", "league_id", "scheduled_at"),
    )


class MatchScorer(Base):
    __tablename__ = "match_scorer"

    match_scorer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("match.match_id", ondelete="CASCADE"),
        nullable=False,
    )
    player_id: Mapped[int] = mapped_column(Integer, ForeignKey("player.player_id"), nullable=False)
    number_of_goals: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("ix_match_scorer_match", "match_id"),
    )


class UserMatchBet(_UserBetColumns, Base):
    __tablename__ = "user_match_bet"

    user_match_bet_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(Integer, ForeignKey("match.match_id"), nullable=False)
    home_score: Mapped[int] = mapped_column(Integer, nullable=False)
    away_score: Mapped[int] = mapped_column(Integer, nullable=False)
    scorer_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("player.player_id"))
    no_scorer: Mapped[Optional[bool]] = mapped_column(
        Boolean,
        comment="Predicts that nobody scores",
    )
    overtime: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    home_advanced: Mapped[Optional[bool]] = mapped_column(Boolean)

    __table_args__ = (
        _one_live_prediction("user_match_bet", "match_id"),
    )


class Series(_BetInstanceColumns, Base):
    __tablename__ = "series"

    series_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    home_team_id: Mapped[int] = mapped_column(Integer, ForeignKey("team.team_id"), nullable=False)
    away_team_id: Mapped[int] = mapped_column(Integer, ForeignKey("team.team_id"), nullable=False)
    best_of: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    home_team_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Games won by the home side",
    )
    away_team_score: Mapped[Optional[int]] = mapped_column(Integer)


class UserSeriesBet(_UserBetColumns, Base):
    __tablename__ = "user_series_bet"

    user_series_bet_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    series_id: Mapped[int] = mapped_column(Integer, ForeignKey("series.series_id"), nullable=False)
    home_team_score: Mapped[Optional[int]] = mapped_column(Integer)
    away_team_score: Mapped[Optional[int]] = mapped_column(Integer)

    __table_args__ = (
        _one_live_prediction("user_series_bet", "series_id"),
    )


class SingleBet(_BetInstanceColumns, Base):
    __tablename__ = "single_bet"

    single_bet_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    evaluator_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("evaluator.evaluator_id"),
        comment="When set, the only evaluator applied to this bet",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    group_name: Mapped[Optional[str]] = mapped_column(
        String(64),
        comment="Group-stage group this bet is about",
    )
    team_result_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("team.team_id"),
        comment="Winning team (or group winner)",
    )
    player_result_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("player.player_id"),
    )
    value_result: Mapped[Optional[int]] = mapped_column(Integer)


class SingleBetAdvancedTeam(Base):
    __tablename__ = "single_bet_advanced_team"

    single_bet_advanced_team_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    single_bet_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("single_bet.single_bet_id", ondelete="CASCADE"),
        nullable=False,
    )
    team_id: Mapped[int] = mapped_column(Integer, ForeignKey("team.team_id"), nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index(
            "uq_single_bet_advanced_team_live",
            "single_bet_id",
            "team_id",
            unique=True,
            postgresql_where=_NOT_DELETED,
            sqlite_where=_NOT_DELETED,
        ),
    )


class UserSingleBet(_UserBetColumns, Base):
    __tablename__ = "user_single_bet"

    user_single_bet_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    single_bet_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("single_bet.single_bet_id"),
        nullable=False,
    )
    team_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("team.team_id"))
    player_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("player.player_id"))
    value: Mapped[Optional[int]] = mapped_column(Integer)

    __table_args__ = (
        _one_live_prediction("user_single_bet", "single_bet_id"),
    )


class Question(_BetInstanceColumns, Base):
    __tablename__ = "question"

    question_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    result: Mapped[Optional[bool]] = mapped_column(
        Boolean,
        comment="Correct answer (yes=true); NULL until recorded",
    )


class UserQuestionBet(_UserBetColumns, Base):
    __tablename__ = "user_question_bet"

    user_question_bet_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("question.question_id"),
        nullable=False,
    )
    answer: Mapped[Optional[bool]] = mapped_column(
        Boolean,
        comment="User's answer; NULL when not picked",
    )

    __table_args__ = (
        _one_live_prediction("user_question_bet", "question_id"),
    )


__all__ = [
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
]

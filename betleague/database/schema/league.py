"""Leagues, members and the participants they bet on."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class AppUser(Base):
    __tablename__ = "app_user"

    user_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Global user identity",
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Platform administrator flag (may run evaluations)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class League(Base):
    __tablename__ = "league"

    league_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Isolated prediction competition",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class LeagueUser(Base):
    __tablename__ = "league_user"

    league_user_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Membership of a user in a league",
    )
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("league.league_id"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.user_id"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("league_id", "user_id", name="uq_league_user_league_user"),
    )


class Team(Base):
    __tablename__ = "team"

    team_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("league.league_id"),
        nullable=False,
        comment="League the team is registered in",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    group_name: Mapped[Optional[str]] = mapped_column(
        String(64),
        comment="Group-stage group label, if any",
    )


class Player(Base):
    __tablename__ = "player"

    player_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("league.league_id"),
        nullable=False,
    )
    team_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("team.team_id"))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[Optional[str]] = mapped_column(
        String(32),
        comment="Playing position label (e.g. goalkeeper, G, D, F)",
    )

    __table_args__ = (
        Index("ix_player_league_team", "league_id", "team_id"),
    )


class ScorerRankingVersion(Base):
    """Effective-dated scorer ranking tier.

    Intervals are half-open ``[effective_from, effective_to)``; an open interval
    has ``effective_to`` NULL. Non-overlap is enforced by the writers.
    """

    __tablename__ = "scorer_ranking_version"

    ranking_version_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("league.league_id"),
        nullable=False,
    )
    player_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("player.player_id"),
        nullable=False,
    )
    ranking: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Ranking tier (1 = best)",
    )
    effective_from: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Inclusive start of the interval (UTC)",
    )
    effective_to: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        comment="Exclusive end of the interval (UTC); NULL while current",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("ranking >= 1", name="ranking_positive"),
        Index("ix_scorer_ranking_version_league_from", "league_id", "effective_from"),
        Index("ix_scorer_ranking_version_player_from", "player_id", "effective_from"),
    )


__all__ = [
    "AppUser",
    "League",
    "LeagueUser",
    "Team",
    "Player",
    "ScorerRankingVersion",
]

"""SQLAlchemy ORM models for the Rookie Roster database.

Tables: teams, team_members, events, stats, news_feed, notifications.
Stats are stored as JSON blobs keyed by category so every sport can track
its own set of categories without schema changes.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class TeamRow(Base):
    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    teamname: Mapped[str] = mapped_column(String(18), nullable=False, unique=True)
    gender: Mapped[str] = mapped_column(String(1), default="c")
    sport: Mapped[int] = mapped_column(Integer, default=0)
    season: Mapped[int] = mapped_column(Integer, default=1)
    slogan: Mapped[str] = mapped_column(String(50), default="")
    homefield: Mapped[str] = mapped_column(String(50), default="")
    city: Mapped[str] = mapped_column(String(100), default="")
    lat: Mapped[float] = mapped_column(Float, default=0.0)
    long: Mapped[float] = mapped_column(Float, default=0.0)
    user_stats: Mapped[list] = mapped_column(JSON, default=list)
    rc_stats: Mapped[list] = mapped_column(JSON, default=list)
    meta: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    creator_id: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    members: Mapped[list[TeamMemberRow]] = relationship(back_populates="team")


class TeamMemberRow(Base):
    """A roster slot. ``user_id`` is 0 for ghosts (no linked account)."""

    __tablename__ = "team_members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    team_id: Mapped[str] = mapped_column(ForeignKey("teams.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, default=0)
    role: Mapped[int] = mapped_column(Integer, nullable=False)
    meta: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    team: Mapped[TeamRow] = relationship(back_populates="members")

    __table_args__ = (Index("ix_team_members_team_id", "team_id"),)


class EventRow(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    team_id: Mapped[str] = mapped_column(ForeignKey("teams.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="game")
    start: Mapped[int] = mapped_column(Integer, nullable=False)
    end: Mapped[int] = mapped_column(Integer, nullable=False)
    details: Mapped[str] = mapped_column(Text, default="")
    creator_id: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (Index("ix_events_team_start", "team_id", "start"),)


class StatRow(Base):
    """One player's (type 0) or the team's (type 1) stat line for one event.

    Soft-deleted rows keep ``deleted_at`` set and are excluded from reads.
    """

    __tablename__ = "stats"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False)
    member_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    team_id: Mapped[str] = mapped_column(ForeignKey("teams.id"), nullable=False)
    event_id: Mapped[str] = mapped_column(String(36), nullable=False)
    event_date: Mapped[int] = mapped_column(Integer, nullable=False)
    sport: Mapped[int] = mapped_column(Integer, default=0)
    season: Mapped[int] = mapped_column(Integer, default=1)
    type: Mapped[int] = mapped_column(Integer, nullable=False)
    stats: Mapped[dict] = mapped_column(JSON, nullable=False)
    meta: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_now, onupdate=_now)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_stats_team_season", "team_id", "season"),
        Index("ix_stats_event_owner_type", "event_id", "owner_id", "type"),
        Index("ix_stats_member_id", "member_id"),
    )


class NewsFeedRow(Base):
    """Team news feed entries (stats posted, events created/changed)."""

    __tablename__ = "news_feed"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    team_id: Mapped[str] = mapped_column(ForeignKey("teams.id"), nullable=False)
    event_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    creator_id: Mapped[int] = mapped_column(Integer, default=0)
    meta: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (Index("ix_news_feed_team_id", "team_id"),)


class NotificationRow(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    team_id: Mapped[str] = mapped_column(ForeignKey("teams.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    reference_id: Mapped[str] = mapped_column(String(36), nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (Index("ix_notifications_user_id", "user_id"),)

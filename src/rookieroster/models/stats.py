"""Stat models: stored stat records, submissions and derived views."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field

from rookieroster.models.team import EventSnapshot


class StatType(IntEnum):
    PLAYER = 0
    TEAM = 1


class Outcome(IntEnum):
    """Result of a game from the team's point of view."""

    LOSS = 0
    WIN = 1
    TIE = 2


class StatRecord(BaseModel):
    """One stored stat row: a player's or the team's line for one event."""

    id: str
    owner_id: str
    member_id: str | None = None
    team_id: str
    event_id: str
    event_date: int
    sport: int
    season: int
    type: StatType
    stats: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class PlayerLine(BaseModel):
    """One player's submitted line. Categories ride along as extra fields."""

    id: str | int

    model_config = {"extra": "allow"}

    def as_raw(self) -> dict[str, Any]:
        return self.model_dump()


class StatSubmission(BaseModel):
    """Request body for submitting (or re-submitting) an event's stats."""

    event: EventSnapshot
    meta: dict[str, Any] = Field(default_factory=dict)
    team_stats: dict[str, Any] = Field(default_factory=dict)
    player_stats: list[PlayerLine] = Field(default_factory=list)

    def player_lines(self) -> list[dict[str, Any]]:
        return [line.as_raw() for line in self.player_stats]


class KeySet(BaseModel):
    """Ordered stat columns applicable to a team, identity columns first."""

    player_columns: list[str] = Field(default_factory=list)
    team_columns: list[str] = Field(default_factory=list)


class SeasonStats(BaseModel):
    """Season-to-date totals and per-game averages for a team and its roster."""

    team_totals: dict[str, Any]
    team_averages: dict[str, Any]
    player_totals: list[dict[str, Any]]
    player_averages: list[dict[str, Any]]

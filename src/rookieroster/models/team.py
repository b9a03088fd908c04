"""Team, roster and event models.

These are the validated shapes that cross the API boundary. The ORM rows
live in rookieroster.db.models.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Literal

from pydantic import BaseModel, Field, model_validator

# Reserved teamnames that would collide with application routes.
RESERVED_TEAMNAMES = frozenset({"create"})

EventType = Literal["home_game", "away_game", "game", "practice", "other"]


class Sport(IntEnum):
    BASKETBALL = 0


class TeamRole(IntEnum):
    """Roster roles. Stored as ints on the team member row."""

    COACH = 1
    PLAYER = 2
    FAN = 3
    GHOST_PLAYER = 4
    GHOST_COACH = 5
    INVITED_PLAYER = 6
    INVITED_COACH = 7
    REQUESTED_TO_JOIN = 8

    @property
    def is_player(self) -> bool:
        return self in (TeamRole.PLAYER, TeamRole.GHOST_PLAYER, TeamRole.INVITED_PLAYER)

    @property
    def is_coach(self) -> bool:
        return self in (TeamRole.COACH, TeamRole.GHOST_COACH, TeamRole.INVITED_COACH)

    @property
    def is_fan(self) -> bool:
        return self is TeamRole.FAN

    @property
    def is_ghost(self) -> bool:
        return self in (TeamRole.GHOST_PLAYER, TeamRole.GHOST_COACH)

    @property
    def has_been_invited(self) -> bool:
        return self in (TeamRole.INVITED_PLAYER, TeamRole.INVITED_COACH)

    @property
    def has_requested_to_join(self) -> bool:
        return self is TeamRole.REQUESTED_TO_JOIN


class RosterEntry(BaseModel):
    """A player or coach listed when the team is created."""

    firstname: str = Field(min_length=1, max_length=50)
    lastname: str = Field(default="", max_length=50)
    email: str = ""
    user_id: int = 0  # 0 = ghost (no linked account yet)


class CreateTeamRequest(BaseModel):
    """Input for creating a team, with user-friendly validation messages."""

    name: str = Field(min_length=1, max_length=50)
    teamname: str = Field(min_length=1, max_length=18, pattern=r"^[A-Za-z0-9]+$")
    gender: str = Field(min_length=1, max_length=1)
    sport: Sport = Sport.BASKETBALL
    season: int = 1
    slogan: str = Field(default="", max_length=50)
    homefield: str = Field(default="", max_length=50)
    city: str = Field(min_length=1)
    lat: float
    long: float
    user_is_a: Literal["p", "c", "f"] = Field(default="c", alias="userIsA")
    players: list[RosterEntry] = Field(default_factory=list)
    coaches: list[RosterEntry] = Field(default_factory=list)
    user_stats: list[str] = Field(default_factory=list, alias="userStats")
    rc_stats: list[str] = Field(default_factory=list, alias="rcStats")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _teamname_not_reserved(self) -> CreateTeamRequest:
        if self.teamname.lower() in RESERVED_TEAMNAMES:
            msg = "Reserved name, try another"
            raise ValueError(msg)
        return self


class CreateEventRequest(BaseModel):
    """Input for creating or editing an event. Times are unix seconds, UTC."""

    title: str = Field(min_length=1, max_length=100)
    type: EventType = "game"
    start: int
    end: int
    details: str = ""


class EventSnapshot(BaseModel):
    """The event reference handed to stat ingestion and embedded in stat meta."""

    id: str
    start: int
    end: int | None = None
    type: str = "game"
    title: str = ""

    model_config = {"extra": "allow"}

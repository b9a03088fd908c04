"""Shape ORM rows into plain dicts for API responses and feed meta."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC
from typing import Any

from rookieroster.db.models import EventRow, NewsFeedRow, TeamMemberRow, TeamRow
from rookieroster.models.team import TeamRole

GHOST_PIC = "/images/ghost.png"


def present_team(team: TeamRow) -> dict[str, Any]:
    return {
        "id": team.id,
        "name": team.name,
        "teamname": team.teamname,
        "gender": team.gender,
        "sport": team.sport,
        "season": team.season,
        "slogan": team.slogan,
        "homefield": team.homefield,
        "city": team.city,
        "lat": team.lat,
        "long": team.long,
        "meta": team.meta,
        "creator_id": team.creator_id,
    }


def present_event(event: EventRow) -> dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "start": event.start,
        "end": event.end,
        "type": event.type,
        "creator_id": event.creator_id,
        "details": event.details,
    }


def present_events(events: Iterable[EventRow]) -> list[dict[str, Any]]:
    return [present_event(e) for e in events]


def present_feed(entries: Iterable[NewsFeedRow]) -> list[dict[str, Any]]:
    """Feed entries with ``date`` as unix seconds (UTC)."""
    formatted = []
    for entry in entries:
        created = entry.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        formatted.append(
            {
                "id": entry.id,
                "type": entry.type,
                "event_id": entry.event_id,
                "creator_id": entry.creator_id,
                "meta": entry.meta,
                "date": int(created.timestamp()),
            }
        )
    return formatted


def present_members(members: Iterable[TeamMemberRow], is_admin: bool = False) -> list[dict]:
    """Roster entries with role flags.

    Ghosts get a mock identity from their meta. Their email is only shown to
    team admins.
    """
    formatted = []
    for member in members:
        meta = dict(member.meta or {})
        role = TeamRole(member.role)

        if member.user_id == 0:
            name = (meta.get("name") or "").split(" ", 1)
            meta.setdefault("firstname", name[0])
            meta.setdefault("lastname", name[1] if len(name) > 1 else "")
            if not is_admin:
                meta.pop("email", None)

        formatted.append(
            {
                "id": member.user_id,
                "member_id": member.id,
                "firstname": meta.get("firstname", ""),
                "lastname": meta.get("lastname", ""),
                "pic": GHOST_PIC if member.user_id == 0 else meta.get("pic"),
                "role": role.name.lower(),
                "isCoach": role.is_coach,
                "isPlayer": role.is_player,
                "isFan": role.is_fan,
                "isGhost": role.is_ghost,
                "hasBeenInvited": role.has_been_invited,
                "hasRequestedToJoin": role.has_requested_to_join,
                "meta": meta,
            }
        )
    return formatted

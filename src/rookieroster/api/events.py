"""Team event (schedule) API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from rookieroster.api.deps import RepoDep, SettingsDep, TeamDep
from rookieroster.config import Settings
from rookieroster.core.events import (
    EventNotFound,
    EventService,
    InvalidEventError,
    TooManyEventsError,
)
from rookieroster.core.transforms import present_event, present_events, present_feed
from rookieroster.db.repository import Repository
from rookieroster.models.team import CreateEventRequest

router = APIRouter(prefix="/api/teams/{team_id}/events", tags=["events"])


def _service(repo: Repository, settings: Settings) -> EventService:
    return EventService(repo, max_events=settings.rookieroster_max_events_per_team)


@router.get("")
async def list_events(team: TeamDep, repo: RepoDep) -> dict:
    events = await repo.get_events_for_team(team.id)
    return {"data": present_events(events)}


@router.post("", status_code=201)
async def post_event(
    body: CreateEventRequest,
    team: TeamDep,
    repo: RepoDep,
    settings: SettingsDep,
    creator_id: int = 0,
) -> dict:
    try:
        event, feed = await _service(repo, settings).create_event(team, body, creator_id)
    except TooManyEventsError as exc:
        raise HTTPException(429, str(exc)) from exc
    except InvalidEventError as exc:
        raise HTTPException(422, str(exc)) from exc
    return {"data": present_event(event), "feed": present_feed([feed])}


@router.put("/{event_id}")
async def put_event(
    event_id: str,
    body: CreateEventRequest,
    team: TeamDep,
    repo: RepoDep,
    settings: SettingsDep,
) -> dict:
    try:
        event, feed = await _service(repo, settings).update_event(team, event_id, body)
    except EventNotFound as exc:
        raise HTTPException(404, str(exc)) from exc
    except InvalidEventError as exc:
        raise HTTPException(422, str(exc)) from exc
    return {"data": present_event(event), "feed": present_feed([feed]) if feed else []}


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    team: TeamDep,
    repo: RepoDep,
    settings: SettingsDep,
) -> dict:
    """Delete an event along with every stat recorded for it."""
    try:
        feed = await _service(repo, settings).delete_event(team, event_id)
    except EventNotFound as exc:
        raise HTTPException(404, str(exc)) from exc
    return {"data": {"id": event_id}, "feed": present_feed([feed]) if feed else []}

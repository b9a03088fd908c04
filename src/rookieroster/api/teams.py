"""Team, roster and news feed API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from rookieroster.api.deps import RepoDep, TeamDep
from rookieroster.core.teams import TeamnameTakenError, create_team
from rookieroster.core.transforms import present_feed, present_members, present_team
from rookieroster.models.team import CreateTeamRequest

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.post("", status_code=201)
async def post_team(body: CreateTeamRequest, repo: RepoDep, creator_id: int = 0) -> dict:
    """Create a team and its initial roster."""
    try:
        team = await create_team(repo, body, creator_id=creator_id)
    except TeamnameTakenError as exc:
        raise HTTPException(422, str(exc)) from exc
    return {"data": present_team(team)}


@router.get("/{team_id}")
async def get_team(team: TeamDep) -> dict:
    """Get a single team."""
    return {"data": present_team(team)}


@router.get("/{team_id}/members")
async def list_members(team: TeamDep, repo: RepoDep, admin: bool = False) -> dict:
    """List the roster. Ghost emails are hidden unless ``admin`` is set."""
    members = await repo.get_members_for_team(team.id)
    return {"data": present_members(members, is_admin=admin)}


@router.get("/{team_id}/feed")
async def get_feed(team: TeamDep, repo: RepoDep, limit: int = 50) -> dict:
    """Most recent news feed entries first."""
    entries = await repo.get_feed_for_team(team.id, limit=limit)
    return {"data": present_feed(entries)}

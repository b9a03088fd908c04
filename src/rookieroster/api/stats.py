"""Game stats API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from rookieroster.api.deps import RepoDep, SettingsDep, TeamDep
from rookieroster.core.stats import OwnershipTransferError, StatService
from rookieroster.models.stats import StatRecord, StatSubmission

router = APIRouter(prefix="/api/teams/{team_id}/stats", tags=["stats"])


def _records(rows: list) -> list[dict]:
    return [StatRecord.model_validate(r).model_dump(mode="json") for r in rows]


@router.post("", status_code=201)
async def post_stats(body: StatSubmission, team: TeamDep, repo: RepoDep) -> dict:
    """Record an event's stats: the team's line plus one line per player."""
    service = StatService(repo)
    team_row = await service.ingest_team_stats(team, body.team_stats, body.event, body.meta)
    player_rows = await service.ingest_player_stats(
        team, body.player_lines(), body.event, body.meta
    )
    return {"data": {"team": _records([team_row])[0], "players": _records(player_rows)}}


@router.put("")
async def put_stats(body: StatSubmission, team: TeamDep, repo: RepoDep) -> dict:
    """Replace an event's stats with a corrected submission."""
    rows = await StatService(repo).update_stats(
        team, body.team_stats, body.player_lines(), body.event, body.meta
    )
    return {"data": _records(rows)}


@router.post("/owners")
async def switch_owners(
    team: TeamDep,
    repo: RepoDep,
    from_member_id: str,
    to_member_id: str,
) -> dict:
    """Move a roster slot's stats to another member (e.g. a ghost's replacement)."""
    current = await repo.get_member(from_member_id)
    new = await repo.get_member(to_member_id)
    if current is None or new is None or current.team_id != team.id:
        raise HTTPException(404, "Member not found")
    try:
        moved = await StatService(repo).switch_owners(current, new)
    except OwnershipTransferError as exc:
        raise HTTPException(422, str(exc)) from exc
    return {"data": {"moved": moved}}


@router.get("/keys")
async def get_keys(team: TeamDep, repo: RepoDep) -> dict:
    """Stat columns this team shows, identity columns first."""
    return {"data": StatService(repo).keys(team).model_dump()}


@router.get("/season")
async def get_season(team: TeamDep, repo: RepoDep) -> dict:
    """Season-to-date totals and per-game averages for the team and roster."""
    season = await StatService(repo).season_stats(team)
    return {"data": season.model_dump()}


@router.get("/recent")
async def get_recent(team: TeamDep, repo: RepoDep, settings: SettingsDep) -> dict:
    """The team's stat line for each game, most recent first."""
    games = await StatService(repo).recent_games(team, tz=settings.tz)
    return {"data": games}

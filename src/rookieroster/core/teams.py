"""Team creation and roster setup."""

from __future__ import annotations

import logging

from rookieroster.db.models import TeamRow
from rookieroster.db.repository import Repository
from rookieroster.models.team import CreateTeamRequest, RosterEntry, TeamRole

logger = logging.getLogger(__name__)

_CREATOR_ROLES = {"p": TeamRole.PLAYER, "c": TeamRole.COACH, "f": TeamRole.FAN}


class TeamnameTakenError(ValueError):
    """Another team already uses this teamname."""


def _member_meta(entry: RosterEntry) -> dict[str, str]:
    return {
        "name": f"{entry.firstname} {entry.lastname}".strip(),
        "firstname": entry.firstname,
        "lastname": entry.lastname,
        "email": entry.email,
    }


async def create_team(
    repo: Repository,
    request: CreateTeamRequest,
    creator_id: int = 0,
) -> TeamRow:
    """Create a team with its initial roster.

    Listed players and coaches without an account become ghosts. The creator
    joins in the role they picked (player, coach or fan).
    """
    if await repo.get_team_by_teamname(request.teamname) is not None:
        msg = "Already taken, try another"
        raise TeamnameTakenError(msg)

    team = await repo.create_team(
        name=request.name,
        teamname=request.teamname,
        sport=int(request.sport),
        season=request.season,
        user_stats=request.user_stats,
        rc_stats=request.rc_stats,
        gender=request.gender,
        slogan=request.slogan,
        homefield=request.homefield,
        city=request.city,
        lat=request.lat,
        long=request.long,
        creator_id=creator_id,
    )

    if creator_id:
        await repo.add_member(team.id, _CREATOR_ROLES[request.user_is_a], user_id=creator_id)

    for entry in request.players:
        role = TeamRole.PLAYER if entry.user_id else TeamRole.GHOST_PLAYER
        await repo.add_member(team.id, role, user_id=entry.user_id, meta=_member_meta(entry))
    for entry in request.coaches:
        role = TeamRole.COACH if entry.user_id else TeamRole.GHOST_COACH
        await repo.add_member(team.id, role, user_id=entry.user_id, meta=_member_meta(entry))

    logger.info(
        "team_created team=%s teamname=%s players=%d coaches=%d",
        team.id,
        team.teamname,
        len(request.players),
        len(request.coaches),
    )
    return team

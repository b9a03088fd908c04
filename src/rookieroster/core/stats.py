"""Stat submission, editing and reporting for a team's events.

Submissions carry one stat line for the team and one per player. Player
lines go through ``format_player_stats`` on both the create and the edit
path; players who did not play never get a row, and a player marked DNP on
an edit loses the row they had.

Rows are keyed by (event, owner, type): writing the same key twice
overwrites the first row instead of adding a second one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, tzinfo
from typing import Any

from rookieroster.core.aggregator import (
    Row,
    aggregate_roster_season,
    aggregate_team_season,
    recent_team_games,
)
from rookieroster.core.formatting import (
    Excluded,
    coerce_stats,
    extract_owner,
    format_player_stats,
)
from rookieroster.core.keys import resolve_keys
from rookieroster.core.notifications import Notifier
from rookieroster.db.models import StatRow, TeamMemberRow, TeamRow
from rookieroster.db.repository import Repository
from rookieroster.models.stats import KeySet, SeasonStats, StatType
from rookieroster.models.team import EventSnapshot, TeamRole

logger = logging.getLogger(__name__)

TEAM_STATS_KIND = "team_stats"


class OwnershipTransferError(Exception):
    """Stats can only move between roster slots on the same team."""


def stat_meta(meta: dict[str, Any], event: EventSnapshot) -> dict[str, Any]:
    """Merge the event snapshot into submitted meta (rebuilds the news feed later)."""
    return {**meta, "event": event.model_dump()}


def owner_for(member: TeamMemberRow) -> str:
    """The owner id stats are filed under for a roster slot."""
    return str(member.user_id) if member.user_id else member.id


def roster_players(members: Iterable[TeamMemberRow]) -> list[dict[str, Any]]:
    """Identity dicts for every member who plays, in roster order."""
    players = []
    for member in members:
        try:
            role = TeamRole(member.role)
        except ValueError:
            logger.warning("unknown_role member=%s role=%s", member.id, member.role)
            continue
        if not role.is_player:
            continue
        meta = member.meta or {}
        players.append(
            {
                "member_id": member.id,
                "user_id": member.user_id,
                "firstname": meta.get("firstname", ""),
                "lastname": meta.get("lastname", ""),
            }
        )
    return players


def _resolve_member(members: Iterable[TeamMemberRow], owner_id: str) -> str | None:
    for member in members:
        if member.id == owner_id or (member.user_id and str(member.user_id) == owner_id):
            return member.id
    return None


class StatService:
    """Create, edit, move, delete and report on a team's stats."""

    def __init__(self, repo: Repository, notifier: Notifier | None = None) -> None:
        self.repo = repo
        self.notifier = notifier or Notifier(repo)

    # --- Writes ---

    async def _write_team_row(
        self,
        team: TeamRow,
        raw_stats: dict[str, Any],
        event: EventSnapshot,
        meta: dict[str, Any],
    ) -> StatRow:
        return await self.repo.upsert_stat(
            owner_id=team.id,
            team_id=team.id,
            event_id=event.id,
            event_date=event.start,
            sport=team.sport,
            season=team.season,
            stat_type=StatType.TEAM,
            stats=coerce_stats(raw_stats),
            meta=meta,
        )

    async def _write_player_row(
        self,
        team: TeamRow,
        owner_id: str,
        member_id: str | None,
        stats: dict[str, Any],
        event: EventSnapshot,
        meta: dict[str, Any],
    ) -> StatRow:
        return await self.repo.upsert_stat(
            owner_id=owner_id,
            member_id=member_id,
            team_id=team.id,
            event_id=event.id,
            event_date=event.start,
            sport=team.sport,
            season=team.season,
            stat_type=StatType.PLAYER,
            stats=stats,
            meta=meta,
        )

    async def ingest_team_stats(
        self,
        team: TeamRow,
        raw_stats: dict[str, Any],
        event: EventSnapshot,
        meta: dict[str, Any],
    ) -> StatRow:
        """Store the team's line for an event, then tell the team about it."""
        full_meta = stat_meta(meta, event)
        row = await self._write_team_row(team, raw_stats, event, full_meta)

        members = await self.repo.get_members_for_team(team.id)
        await self.notifier.status_update(team.id, event.id, TEAM_STATS_KIND, full_meta)
        await self.notifier.notify(members, team.id, TEAM_STATS_KIND, row.id)

        logger.info("team_stats_stored team=%s event=%s stat=%s", team.id, event.id, row.id)
        return row

    async def ingest_player_stats(
        self,
        team: TeamRow,
        raw_player_stats: Iterable[dict[str, Any]],
        event: EventSnapshot,
        meta: dict[str, Any],
    ) -> list[StatRow]:
        """Store one row per player who played. DNP lines are dropped."""
        full_meta = stat_meta(meta, event)
        members = await self.repo.get_members_for_team(team.id)

        rows: list[StatRow] = []
        for raw in raw_player_stats:
            owner_id, member_id, stats = extract_owner(raw)
            formatted = format_player_stats(stats)
            if isinstance(formatted, Excluded):
                logger.debug(
                    "player_dnp event=%s owner=%s reason=%s", event.id, owner_id, formatted.reason
                )
                continue

            row = await self._write_player_row(
                team,
                owner_id,
                member_id or _resolve_member(members, owner_id),
                formatted,
                event,
                full_meta,
            )
            rows.append(row)

        logger.info("player_stats_stored team=%s event=%s rows=%d", team.id, event.id, len(rows))
        return rows

    async def update_stats(
        self,
        team: TeamRow,
        team_stats: dict[str, Any],
        player_stats: Iterable[dict[str, Any]],
        event: EventSnapshot,
        meta: dict[str, Any],
    ) -> list[StatRow]:
        """Replace an event's stats with a fresh submission.

        Each player line overwrites that player's row (or creates it). A
        player who now counts as DNP has their row deleted. The team row is
        always overwritten. Returns the live rows, team row last.
        """
        full_meta = stat_meta(meta, event)
        members = await self.repo.get_members_for_team(team.id)

        rows: list[StatRow] = []
        removed = 0
        for raw in player_stats:
            owner_id, member_id, stats = extract_owner(raw)
            formatted = format_player_stats(stats)
            if isinstance(formatted, Excluded):
                existing = await self.repo.find_stat(event.id, owner_id, StatType.PLAYER)
                if existing is not None:
                    await self.repo.delete_stat(existing)
                    removed += 1
                continue

            row = await self._write_player_row(
                team,
                owner_id,
                member_id or _resolve_member(members, owner_id),
                formatted,
                event,
                full_meta,
            )
            rows.append(row)

        rows.append(await self._write_team_row(team, team_stats, event, full_meta))

        logger.info(
            "stats_updated team=%s event=%s rows=%d removed=%d",
            team.id,
            event.id,
            len(rows),
            removed,
        )
        return rows

    async def switch_owners(self, current: TeamMemberRow, new: TeamMemberRow) -> int:
        """Hand every stat row of one roster slot to another on the same team.

        Used when a ghost player is replaced by a real account. Returns the
        number of rows moved.
        """
        if current.team_id != new.team_id:
            msg = "Cannot move stats between members of different teams"
            raise OwnershipTransferError(msg)

        rows = await self.repo.get_stats_for_member(current.team_id, current.id)
        for row in rows:
            await self.repo.update_stat(row, member_id=new.id, owner_id=owner_for(new))

        logger.info("stats_owner_switched from=%s to=%s rows=%d", current.id, new.id, len(rows))
        return len(rows)

    async def delete_by_event(self, team: TeamRow, event_id: str) -> int:
        count = await self.repo.delete_stats_for_event(team.id, event_id)
        logger.info("stats_deleted team=%s event=%s rows=%d", team.id, event_id, count)
        return count

    async def delete_by_member(self, member: TeamMemberRow) -> int:
        count = await self.repo.delete_stats_for_member(member.id)
        logger.info("stats_deleted member=%s rows=%d", member.id, count)
        return count

    # --- Reads ---

    def keys(self, team: TeamRow) -> KeySet:
        return resolve_keys(team.sport, team.user_stats or [], team.rc_stats or [])

    async def season_stats(self, team: TeamRow) -> SeasonStats:
        """Season-to-date totals and averages for the team and each player."""
        keys = self.keys(team)
        records = await self.repo.get_stats_for_team(team.id, season=team.season)
        members = await self.repo.get_members_for_team(team.id)

        team_totals, team_averages = aggregate_team_season(records, keys.team_columns, team.sport)
        player_totals, player_averages = aggregate_roster_season(
            roster_players(members), records, keys.player_columns, team.sport
        )
        return SeasonStats(
            team_totals=team_totals,
            team_averages=team_averages,
            player_totals=player_totals,
            player_averages=player_averages,
        )

    async def recent_games(self, team: TeamRow, tz: tzinfo = UTC) -> list[Row]:
        keys = self.keys(team)
        records = await self.repo.get_stats_for_team(team.id, season=team.season)
        return recent_team_games(records, keys.team_columns, tz, team.sport)

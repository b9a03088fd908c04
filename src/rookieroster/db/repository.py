"""Repository pattern for database access.

Wraps SQLAlchemy async sessions. Stat rows are soft-deleted: a deleted row
keeps ``deleted_at`` and is invisible to every read below.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rookieroster.db.models import (
    EventRow,
    NewsFeedRow,
    NotificationRow,
    StatRow,
    TeamMemberRow,
    TeamRow,
)


class Repository:
    """Async repository for all database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Teams / Members ---

    async def create_team(
        self,
        name: str,
        teamname: str,
        sport: int = 0,
        season: int = 1,
        user_stats: list[str] | None = None,
        rc_stats: list[str] | None = None,
        **fields: Any,
    ) -> TeamRow:
        row = TeamRow(
            name=name,
            teamname=teamname,
            sport=sport,
            season=season,
            user_stats=user_stats or [],
            rc_stats=rc_stats or [],
            **fields,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_team(self, team_id: str) -> TeamRow | None:
        stmt = select(TeamRow).where(TeamRow.id == team_id).options(selectinload(TeamRow.members))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_team_by_teamname(self, teamname: str) -> TeamRow | None:
        stmt = select(TeamRow).where(func.lower(TeamRow.teamname) == teamname.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_member(
        self,
        team_id: str,
        role: int,
        user_id: int = 0,
        meta: dict | None = None,
    ) -> TeamMemberRow:
        row = TeamMemberRow(team_id=team_id, role=role, user_id=user_id, meta=meta or {})
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_member(self, member_id: str) -> TeamMemberRow | None:
        return await self.session.get(TeamMemberRow, member_id)

    async def get_members_for_team(self, team_id: str) -> list[TeamMemberRow]:
        """Return the roster in the order members were added."""
        stmt = (
            select(TeamMemberRow)
            .where(TeamMemberRow.team_id == team_id)
            .order_by(TeamMemberRow.created_at, TeamMemberRow.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # --- Events ---

    async def create_event(
        self,
        team_id: str,
        title: str,
        start: int,
        end: int,
        type: str = "game",
        details: str = "",
        creator_id: int = 0,
    ) -> EventRow:
        row = EventRow(
            team_id=team_id,
            title=title,
            type=type,
            start=start,
            end=end,
            details=details,
            creator_id=creator_id,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_event(self, event_id: str) -> EventRow | None:
        return await self.session.get(EventRow, event_id)

    async def get_events_for_team(self, team_id: str) -> list[EventRow]:
        stmt = select(EventRow).where(EventRow.team_id == team_id).order_by(EventRow.start)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_events_for_team(self, team_id: str) -> int:
        stmt = select(func.count(EventRow.id)).where(EventRow.team_id == team_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update_event(self, event: EventRow, **fields: Any) -> EventRow:
        for key, value in fields.items():
            setattr(event, key, value)
        await self.session.flush()
        return event

    async def delete_event(self, event: EventRow) -> None:
        await self.session.delete(event)
        await self.session.flush()

    # --- Stats ---

    async def create_stat(
        self,
        owner_id: str,
        team_id: str,
        event_id: str,
        event_date: int,
        sport: int,
        season: int,
        stat_type: int,
        stats: dict,
        meta: dict,
        member_id: str | None = None,
    ) -> StatRow:
        row = StatRow(
            owner_id=owner_id,
            member_id=member_id,
            team_id=team_id,
            event_id=event_id,
            event_date=event_date,
            sport=sport,
            season=season,
            type=stat_type,
            stats=stats,
            meta=meta,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_stat(self, stat_id: str) -> StatRow | None:
        stmt = select(StatRow).where(StatRow.id == stat_id, StatRow.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_stat(self, event_id: str, owner_id: str, stat_type: int) -> StatRow | None:
        """Find the live row for (event, owner, type), or None."""
        stmt = (
            select(StatRow)
            .where(
                StatRow.event_id == event_id,
                StatRow.owner_id == owner_id,
                StatRow.type == stat_type,
                StatRow.deleted_at.is_(None),
            )
            .order_by(StatRow.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_stats_for_team(
        self,
        team_id: str,
        season: int | None = None,
        stat_type: int | None = None,
    ) -> list[StatRow]:
        """Return live stat rows for a team, most recent event first."""
        stmt = select(StatRow).where(StatRow.team_id == team_id, StatRow.deleted_at.is_(None))
        if season is not None:
            stmt = stmt.where(StatRow.season == season)
        if stat_type is not None:
            stmt = stmt.where(StatRow.type == stat_type)
        stmt = stmt.order_by(StatRow.event_date.desc(), StatRow.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_stats_for_event(self, event_id: str) -> list[StatRow]:
        stmt = select(StatRow).where(StatRow.event_id == event_id, StatRow.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_stats_for_member(self, team_id: str, member_id: str) -> list[StatRow]:
        stmt = select(StatRow).where(
            StatRow.team_id == team_id,
            StatRow.member_id == member_id,
            StatRow.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_stat(self, row: StatRow, **fields: Any) -> StatRow:
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def upsert_stat(
        self,
        owner_id: str,
        team_id: str,
        event_id: str,
        event_date: int,
        sport: int,
        season: int,
        stat_type: int,
        stats: dict,
        meta: dict,
        member_id: str | None = None,
    ) -> StatRow:
        """Overwrite the live row for (event, owner, type), creating it if missing."""
        row = await self.find_stat(event_id, owner_id, stat_type)
        if row is None:
            return await self.create_stat(
                owner_id=owner_id,
                team_id=team_id,
                event_id=event_id,
                event_date=event_date,
                sport=sport,
                season=season,
                stat_type=stat_type,
                stats=stats,
                meta=meta,
                member_id=member_id,
            )
        fields: dict[str, Any] = {"stats": stats, "meta": meta, "event_date": event_date}
        if member_id is not None:
            fields["member_id"] = member_id
        return await self.update_stat(row, **fields)

    async def delete_stat(self, row: StatRow) -> None:
        row.deleted_at = datetime.now(UTC)
        await self.session.flush()

    async def delete_stats_for_event(self, team_id: str, event_id: str) -> int:
        """Soft-delete every live row for an event. Returns the number of rows."""
        stmt = (
            update(StatRow)
            .where(
                StatRow.team_id == team_id,
                StatRow.event_id == event_id,
                StatRow.deleted_at.is_(None),
            )
            .values(deleted_at=datetime.now(UTC))
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_stats_for_member(self, member_id: str) -> int:
        stmt = (
            update(StatRow)
            .where(StatRow.member_id == member_id, StatRow.deleted_at.is_(None))
            .values(deleted_at=datetime.now(UTC))
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    # --- News feed / Notifications ---

    async def add_feed_entry(
        self,
        team_id: str,
        type: str,
        meta: dict,
        event_id: str | None = None,
        creator_id: int = 0,
    ) -> NewsFeedRow:
        row = NewsFeedRow(
            team_id=team_id,
            type=type,
            meta=meta,
            event_id=event_id,
            creator_id=creator_id,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_feed_for_team(self, team_id: str, limit: int = 50) -> list[NewsFeedRow]:
        stmt = (
            select(NewsFeedRow)
            .where(NewsFeedRow.team_id == team_id)
            .order_by(NewsFeedRow.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_notifications(
        self,
        user_ids: list[int],
        team_id: str,
        type: str,
        reference_id: str,
    ) -> list[NotificationRow]:
        rows = [
            NotificationRow(user_id=uid, team_id=team_id, type=type, reference_id=reference_id)
            for uid in user_ids
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    async def get_notifications_for_user(self, user_id: int) -> list[NotificationRow]:
        stmt = (
            select(NotificationRow)
            .where(NotificationRow.user_id == user_id)
            .order_by(NotificationRow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

"""News feed entries and member notifications.

Writes go through the repository in the caller's session, so a feed entry
only exists if the change it announces was committed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from rookieroster.db.models import NewsFeedRow, TeamMemberRow
from rookieroster.db.repository import Repository

logger = logging.getLogger(__name__)


class Notifier:
    """Posts team news feed entries and fans notifications out to members."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    async def status_update(
        self,
        team_id: str,
        event_id: str | None,
        kind: str,
        meta: dict[str, Any],
        creator_id: int = 0,
    ) -> NewsFeedRow:
        entry = await self.repo.add_feed_entry(
            team_id=team_id,
            type=kind,
            meta=meta,
            event_id=event_id,
            creator_id=creator_id,
        )
        logger.info("feed_entry team=%s kind=%s event=%s", team_id, kind, event_id)
        return entry

    async def notify(
        self,
        members: Iterable[TeamMemberRow],
        team_id: str,
        kind: str,
        reference_id: str,
    ) -> int:
        """Notify every member with an account. Returns the number notified.

        Ghost members (``user_id == 0``) have nobody to notify and are skipped.
        """
        user_ids = sorted({m.user_id for m in members if m.user_id})
        if not user_ids:
            return 0
        await self.repo.add_notifications(user_ids, team_id, kind, reference_id)
        logger.info(
            "notifications_sent team=%s kind=%s ref=%s count=%d",
            team_id,
            kind,
            reference_id,
            len(user_ids),
        )
        return len(user_ids)

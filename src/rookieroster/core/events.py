"""Team event scheduling: create, edit and delete games and practices.

Changes to events that haven't finished yet are announced on the team news
feed. Deleting an event also deletes every stat recorded for it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from rookieroster.config import DEFAULT_MAX_EVENTS_PER_TEAM
from rookieroster.core.notifications import Notifier
from rookieroster.core.stats import StatService
from rookieroster.core.transforms import present_event
from rookieroster.db.models import EventRow, NewsFeedRow, TeamRow
from rookieroster.db.repository import Repository
from rookieroster.models.team import CreateEventRequest

logger = logging.getLogger(__name__)


class InvalidEventError(ValueError):
    """The submitted event is inconsistent (e.g. it ends before it starts)."""


class TooManyEventsError(Exception):
    """The team has created more events than any real team would."""


class EventNotFound(LookupError):
    """No such event on this team."""


def _validate(request: CreateEventRequest) -> None:
    if request.end < request.start:
        msg = "The event ends before it starts"
        raise InvalidEventError(msg)


class EventService:
    """Event lifecycle for one team, with news feed side effects."""

    def __init__(
        self,
        repo: Repository,
        notifier: Notifier | None = None,
        max_events: int = DEFAULT_MAX_EVENTS_PER_TEAM,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.repo = repo
        self.notifier = notifier or Notifier(repo)
        self.stats = StatService(repo, self.notifier)
        self.max_events = max_events
        self.clock = clock

    def _is_future(self, event: EventRow) -> bool:
        return event.end > self.clock()

    async def has_too_many_events(self, team: TeamRow) -> bool:
        return await self.repo.count_events_for_team(team.id) > self.max_events

    async def get_event(self, team: TeamRow, event_id: str) -> EventRow:
        event = await self.repo.get_event(event_id)
        if event is None or event.team_id != team.id:
            msg = f"Event {event_id} not found"
            raise EventNotFound(msg)
        return event

    async def create_event(
        self,
        team: TeamRow,
        request: CreateEventRequest,
        creator_id: int = 0,
    ) -> tuple[EventRow, NewsFeedRow]:
        if await self.has_too_many_events(team):
            logger.warning("event_limit_reached team=%s max=%d", team.id, self.max_events)
            msg = "This team has created too many events"
            raise TooManyEventsError(msg)
        _validate(request)

        event = await self.repo.create_event(
            team_id=team.id,
            title=request.title,
            type=request.type,
            start=request.start,
            end=request.end,
            details=request.details,
            creator_id=creator_id,
        )
        feed = await self.notifier.status_update(
            team.id, event.id, "new_event", {"event": present_event(event)}, creator_id
        )
        logger.info("event_created team=%s event=%s type=%s", team.id, event.id, event.type)
        return event, feed

    async def update_event(
        self,
        team: TeamRow,
        event_id: str,
        request: CreateEventRequest,
    ) -> tuple[EventRow, NewsFeedRow | None]:
        """Apply an edit. Only events that haven't ended get a feed entry."""
        _validate(request)
        event = await self.get_event(team, event_id)
        old = present_event(event)

        event = await self.repo.update_event(event, **request.model_dump())

        feed = None
        if self._is_future(event):
            feed = await self.notifier.status_update(
                team.id,
                event.id,
                "update_event",
                {"event": present_event(event), "oldEvent": old},
            )
        logger.info("event_updated team=%s event=%s", team.id, event.id)
        return event, feed

    async def delete_event(self, team: TeamRow, event_id: str) -> NewsFeedRow | None:
        """Delete an event and the stats recorded for it."""
        event = await self.get_event(team, event_id)

        feed = None
        if self._is_future(event):
            feed = await self.notifier.status_update(
                team.id, event.id, "delete_event", {"event": present_event(event)}
            )

        await self.stats.delete_by_event(team, event.id)
        await self.repo.delete_event(event)
        logger.info("event_deleted team=%s event=%s", team.id, event_id)
        return feed

"""Tests for event scheduling and its news feed side effects."""

import pytest

from rookieroster.core.events import (
    EventNotFound,
    EventService,
    InvalidEventError,
    TooManyEventsError,
)
from rookieroster.core.stats import StatService
from rookieroster.db.repository import Repository
from rookieroster.models.team import CreateEventRequest, EventSnapshot

NOW = 1_700_000_000
HOUR = 3600


def _request(start: int, title: str = "vs Thorns", type: str = "home_game") -> CreateEventRequest:
    return CreateEventRequest(title=title, type=type, start=start, end=start + 2 * HOUR)


async def _team(repo: Repository, teamname: str = "ripcity"):
    return await repo.create_team("Rip City Rec", teamname)


class TestCreate:
    async def test_create_posts_feed_entry(self, repo: Repository):
        team = await _team(repo)
        service = EventService(repo, clock=lambda: NOW)
        event, feed = await service.create_event(team, _request(NOW + HOUR), creator_id=7)

        assert event.team_id == team.id
        assert event.creator_id == 7
        assert feed.type == "new_event"
        assert feed.event_id == event.id
        assert feed.meta["event"]["title"] == "vs Thorns"

    async def test_end_before_start_rejected(self, repo: Repository):
        team = await _team(repo)
        bad = CreateEventRequest(title="Backwards", start=NOW, end=NOW - 1)
        with pytest.raises(InvalidEventError):
            await EventService(repo).create_event(team, bad)
        assert await repo.count_events_for_team(team.id) == 0

    async def test_too_many_events(self, repo: Repository):
        team = await _team(repo)
        service = EventService(repo, max_events=2)
        # The limit trips once the team is already past it
        for i in range(3):
            await service.create_event(team, _request(NOW + i * HOUR))

        assert await service.has_too_many_events(team)
        with pytest.raises(TooManyEventsError):
            await service.create_event(team, _request(NOW + 10 * HOUR))
        assert await repo.count_events_for_team(team.id) == 3

    async def test_limit_is_per_team(self, repo: Repository):
        busy = await _team(repo)
        quiet = await _team(repo, "thorns")
        service = EventService(repo, max_events=0)
        await service.create_event(busy, _request(NOW))

        assert await service.has_too_many_events(busy)
        assert not await service.has_too_many_events(quiet)


class TestUpdate:
    async def test_future_event_posts_old_and_new(self, repo: Repository):
        team = await _team(repo)
        service = EventService(repo, clock=lambda: NOW)
        event, _ = await service.create_event(team, _request(NOW + HOUR))

        updated, feed = await service.update_event(
            team, event.id, _request(NOW + 2 * HOUR, title="vs Herons", type="away_game")
        )

        assert updated.title == "vs Herons"
        assert updated.type == "away_game"
        assert feed is not None
        assert feed.type == "update_event"
        assert feed.meta["event"]["title"] == "vs Herons"
        assert feed.meta["oldEvent"]["title"] == "vs Thorns"

    async def test_past_event_updates_quietly(self, repo: Repository):
        team = await _team(repo)
        service = EventService(repo, clock=lambda: NOW)
        event, _ = await service.create_event(team, _request(NOW - 10 * HOUR))

        updated, feed = await service.update_event(
            team, event.id, _request(NOW - 10 * HOUR, title="vs Herons")
        )
        assert updated.title == "vs Herons"
        assert feed is None

    async def test_end_before_start_rejected(self, repo: Repository):
        team = await _team(repo)
        service = EventService(repo)
        event, _ = await service.create_event(team, _request(NOW))

        bad = CreateEventRequest(title="Backwards", start=NOW, end=NOW - HOUR)
        with pytest.raises(InvalidEventError):
            await service.update_event(team, event.id, bad)

    async def test_event_of_another_team_not_found(self, repo: Repository):
        team = await _team(repo)
        other = await _team(repo, "thorns")
        service = EventService(repo)
        event, _ = await service.create_event(other, _request(NOW))

        with pytest.raises(EventNotFound):
            await service.update_event(team, event.id, _request(NOW))


class TestDelete:
    async def test_delete_removes_event_and_stats(self, repo: Repository):
        team = await _team(repo)
        service = EventService(repo, clock=lambda: NOW)
        event, _ = await service.create_event(team, _request(NOW - 10 * HOUR))
        snapshot = EventSnapshot(id=event.id, start=event.start, end=event.end, type=event.type)
        await StatService(repo).ingest_team_stats(team, {"pts": 50}, snapshot, {})

        feed = await service.delete_event(team, event.id)

        assert feed is None
        assert await repo.get_event(event.id) is None
        assert await repo.get_stats_for_event(event.id) == []

    async def test_delete_future_event_posts_feed(self, repo: Repository):
        team = await _team(repo)
        service = EventService(repo, clock=lambda: NOW)
        event, _ = await service.create_event(team, _request(NOW + HOUR))

        feed = await service.delete_event(team, event.id)
        assert feed is not None
        assert feed.type == "delete_event"
        assert feed.meta["event"]["id"] == event.id

    async def test_delete_unknown_event(self, repo: Repository):
        team = await _team(repo)
        with pytest.raises(EventNotFound):
            await EventService(repo).delete_event(team, "missing")

"""Tests for stat submission, editing, ownership transfer and reporting."""

import pytest

from rookieroster.core.stats import OwnershipTransferError, StatService, owner_for
from rookieroster.core.teams import create_team
from rookieroster.db.repository import Repository
from rookieroster.models.stats import StatType
from rookieroster.models.team import CreateTeamRequest, EventSnapshot, TeamRole

START = 1_700_000_000

TEAM = {
    "name": "Rip City Rec",
    "teamname": "ripcity",
    "gender": "c",
    "city": "Portland, OR",
    "lat": 45.5,
    "long": -122.6,
    "userIsA": "c",
    "players": [
        {"firstname": "Briar", "lastname": "Ashwood"},
        {"firstname": "Rosa", "lastname": "Vex", "user_id": 21},
    ],
    "userStats": ["pts", "reb", "min"],
    "rcStats": ["stl"],
}


async def _setup(repo: Repository):
    team = await create_team(repo, CreateTeamRequest.model_validate(TEAM), creator_id=7)
    members = await repo.get_members_for_team(team.id)
    by_first = {m.meta.get("firstname"): m for m in members if m.meta}
    return team, by_first["Briar"], by_first["Rosa"]


def _event(event_id: str = "e-1", start: int = START, type: str = "home_game") -> EventSnapshot:
    return EventSnapshot(id=event_id, start=start, end=start + 7200, type=type)


class TestIngest:
    async def test_team_row_stored_with_event_meta(self, repo: Repository):
        team, _, _ = await _setup(repo)
        service = StatService(repo)
        row = await service.ingest_team_stats(
            team, {"pts": "54", "reb": ""}, _event(), {"opp": "Thorns", "score": 54}
        )
        assert row.type == StatType.TEAM
        assert row.owner_id == team.id
        assert row.stats == {"pts": 54, "reb": 0}
        assert row.meta["opp"] == "Thorns"
        assert row.meta["event"]["id"] == "e-1"
        assert row.event_date == START

    async def test_team_row_posts_feed_and_notifies_members(self, repo: Repository):
        team, _, _ = await _setup(repo)
        row = await StatService(repo).ingest_team_stats(team, {"pts": 54}, _event(), {})

        feed = await repo.get_feed_for_team(team.id)
        assert [f.type for f in feed] == ["team_stats"]
        assert feed[0].event_id == "e-1"

        # creator (7) and Rosa (21) have accounts; Briar is a ghost
        for user_id in (7, 21):
            notes = await repo.get_notifications_for_user(user_id)
            assert [n.reference_id for n in notes] == [row.id]
        assert await repo.get_notifications_for_user(0) == []

    async def test_team_row_overwritten_on_resubmit(self, repo: Repository):
        team, _, _ = await _setup(repo)
        service = StatService(repo)
        first = await service.ingest_team_stats(team, {"pts": 50}, _event(), {})
        second = await service.ingest_team_stats(team, {"pts": 54}, _event(), {})
        assert second.id == first.id
        rows = await repo.get_stats_for_event("e-1")
        assert len(rows) == 1
        assert rows[0].stats == {"pts": 54}

    async def test_dnp_lines_not_stored(self, repo: Repository):
        team, briar, rosa = await _setup(repo)
        rows = await StatService(repo).ingest_player_stats(
            team,
            [
                {"id": briar.id, "pts": 12, "min": 20},
                {"id": "21", "pts": 0, "min": 0},
            ],
            _event(),
            {},
        )
        assert len(rows) == 1
        assert rows[0].owner_id == briar.id
        assert rows[0].member_id == briar.id
        assert await repo.find_stat("e-1", "21", StatType.PLAYER) is None

    async def test_member_resolved_from_user_id(self, repo: Repository):
        team, _, rosa = await _setup(repo)
        rows = await StatService(repo).ingest_player_stats(
            team, [{"id": 21, "pts": 8}], _event(), {}
        )
        assert rows[0].owner_id == "21"
        assert rows[0].member_id == rosa.id

    async def test_missing_player_id_rejected(self, repo: Repository):
        team, _, _ = await _setup(repo)
        with pytest.raises(ValueError, match="player id"):
            await StatService(repo).ingest_player_stats(team, [{"pts": 8}], _event(), {})


class TestUpdate:
    async def test_marking_dnp_deletes_existing_row(self, repo: Repository):
        team, briar, rosa = await _setup(repo)
        service = StatService(repo)
        await service.ingest_player_stats(
            team,
            [{"id": briar.id, "pts": 12, "min": 20}, {"id": rosa.id, "pts": 9, "min": 18}],
            _event(),
            {},
        )

        rows = await service.update_stats(
            team,
            {"pts": 21},
            [{"id": briar.id, "pts": 14, "min": 22}, {"id": rosa.id, "dnp": True}],
            _event(),
            {},
        )

        assert await repo.find_stat("e-1", rosa.id, StatType.PLAYER) is None
        briar_row = await repo.find_stat("e-1", briar.id, StatType.PLAYER)
        assert briar_row is not None
        assert briar_row.stats == {"pts": 14, "min": 22}
        assert rows[-1].type == StatType.TEAM
        assert [r.owner_id for r in rows[:-1]] == [briar.id]

    async def test_update_creates_missing_rows(self, repo: Repository):
        team, briar, _ = await _setup(repo)
        rows = await StatService(repo).update_stats(
            team, {"pts": 30}, [{"id": briar.id, "pts": 30}], _event(), {}
        )
        assert len(rows) == 2
        assert len(await repo.get_stats_for_event("e-1")) == 2

    async def test_player_stays_dnp_without_a_row(self, repo: Repository):
        team, briar, _ = await _setup(repo)
        rows = await StatService(repo).update_stats(
            team, {}, [{"id": briar.id, "min": 0}], _event(), {}
        )
        assert [r.type for r in rows] == [StatType.TEAM]


class TestOwnership:
    async def test_switch_owners_moves_rows(self, repo: Repository):
        team, briar, _ = await _setup(repo)
        service = StatService(repo)
        for event_id in ("e-1", "e-2"):
            await service.ingest_player_stats(
                team, [{"id": briar.id, "pts": 10}], _event(event_id), {}
            )

        claimed = await repo.add_member(team.id, TeamRole.PLAYER, user_id=42)
        moved = await service.switch_owners(briar, claimed)

        assert moved == 2
        assert owner_for(claimed) == "42"
        assert await repo.get_stats_for_member(team.id, briar.id) == []
        rows = await repo.get_stats_for_member(team.id, claimed.id)
        assert {r.owner_id for r in rows} == {"42"}

    async def test_switch_owners_across_teams_rejected(self, repo: Repository):
        team, briar, _ = await _setup(repo)
        other = await repo.create_team("Thorns", "thorns")
        stranger = await repo.add_member(other.id, TeamRole.PLAYER, user_id=99)

        with pytest.raises(OwnershipTransferError):
            await StatService(repo).switch_owners(briar, stranger)

    async def test_owner_for_ghost_is_member_id(self, repo: Repository):
        _, briar, _ = await _setup(repo)
        assert owner_for(briar) == briar.id


class TestDelete:
    async def test_delete_by_event(self, repo: Repository):
        team, briar, _ = await _setup(repo)
        service = StatService(repo)
        await service.ingest_team_stats(team, {"pts": 10}, _event("e-1"), {})
        await service.ingest_player_stats(team, [{"id": briar.id, "pts": 10}], _event("e-1"), {})
        await service.ingest_team_stats(team, {"pts": 12}, _event("e-2"), {})

        assert await service.delete_by_event(team, "e-1") == 2
        assert await repo.get_stats_for_event("e-1") == []
        assert len(await repo.get_stats_for_event("e-2")) == 1

    async def test_delete_by_member(self, repo: Repository):
        team, briar, rosa = await _setup(repo)
        service = StatService(repo)
        await service.ingest_player_stats(
            team, [{"id": briar.id, "pts": 10}, {"id": rosa.id, "pts": 4}], _event(), {}
        )

        assert await service.delete_by_member(briar) == 1
        assert len(await repo.get_stats_for_member(team.id, rosa.id)) == 1


class TestReports:
    async def test_keys(self, repo: Repository):
        team, _, _ = await _setup(repo)
        keys = StatService(repo).keys(team)
        assert keys.player_columns == ["name", "min", "pts", "reb", "stl"]
        assert keys.team_columns == ["date", "win", "opp", "pts", "reb", "stl"]

    async def test_season_stats(self, repo: Repository):
        team, briar, rosa = await _setup(repo)
        service = StatService(repo)
        games = [("e-1", 54, 48, 20), ("e-2", 41, 50, 10)]
        for i, (event_id, score, opp_score, briar_pts) in enumerate(games):
            event = _event(event_id, START + i * 86_400)
            meta = {"score": score, "opp_score": opp_score}
            await service.ingest_team_stats(team, {"pts": score, "reb": 30}, event, meta)
            await service.ingest_player_stats(
                team, [{"id": briar.id, "pts": briar_pts, "min": 30}], event, meta
            )

        season = await service.season_stats(team)
        assert season.team_totals["gp"] == 2
        assert season.team_totals["wins"] == 1
        assert season.team_totals["losses"] == 1
        assert season.team_totals["pts"] == 95
        assert season.team_averages["reb"] == 30

        rows = {row["member_id"]: row for row in season.player_totals}
        assert set(rows) == {briar.id, rosa.id}
        assert rows[briar.id]["pts"] == 30
        assert rows[briar.id]["name"] == "Ashwood"
        # Rosa never played: a row of nulls with her name on it
        assert rows[rosa.id]["pts"] is None
        assert rows[rosa.id]["name"] == "Vex"

        averages = {row["member_id"]: row for row in season.player_averages}
        assert averages[briar.id]["pts"] == 15

    async def test_season_stats_without_games(self, repo: Repository):
        team, _, _ = await _setup(repo)
        season = await StatService(repo).season_stats(team)
        assert season.team_totals == {
            "date": None,
            "win": None,
            "opp": None,
            "pts": None,
            "reb": None,
            "stl": None,
        }

    async def test_recent_games(self, repo: Repository):
        team, _, _ = await _setup(repo)
        service = StatService(repo)
        await service.ingest_team_stats(
            team, {"pts": 54}, _event("e-1", START), {"opp": "Thorns", "score": 54, "opp_score": 2}
        )
        await service.ingest_team_stats(
            team,
            {"pts": 40},
            _event("e-2", START + 86_400, type="away_game"),
            {"opp": "Herons", "score": 40, "opp_score": 50},
        )

        games = await service.recent_games(team)
        assert [g["opp"] for g in games] == ["Herons^^^", "Thorns***"]
        assert [g["win"] for g in games] == [0, 1]

    async def test_recent_games_from_player_lines_only(self, repo: Repository):
        team, briar, rosa = await _setup(repo)
        await StatService(repo).ingest_player_stats(
            team,
            [{"id": briar.id, "pts": 12, "min": 20}, {"id": rosa.id, "pts": 9, "min": 18}],
            _event(),
            {"opp": "Thorns", "score": 21, "opp_score": 3},
        )

        games = await StatService(repo).recent_games(team)
        assert len(games) == 1
        assert games[0]["pts"] == 21
        assert games[0]["opp"] == "Thorns***"
        assert games[0]["win"] == 1
        assert games[0]["event_id"] == "e-1"

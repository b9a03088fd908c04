"""Seed a demo team with a few games of stats and print its season.

Usage:
    python scripts/demo_seed.py seed      # Create team, roster, games and stats
    python scripts/demo_seed.py season    # Print season totals and averages
    python scripts/demo_seed.py recent    # Print the recent games view

Uses a local SQLite database (demo_rookieroster.db).
"""

from __future__ import annotations

import asyncio
import os
import sys

from rookieroster.core.events import EventService
from rookieroster.core.stats import StatService
from rookieroster.core.teams import create_team
from rookieroster.db.engine import create_engine, create_tables, get_session
from rookieroster.db.models import TeamRow
from rookieroster.db.repository import Repository
from rookieroster.models.team import CreateEventRequest, CreateTeamRequest, EventSnapshot

DEMO_DB = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///demo_rookieroster.db")
TEAMNAME = "ripcity"

TEAM = {
    "name": "Rip City Rec",
    "teamname": TEAMNAME,
    "gender": "c",
    "city": "Portland, OR",
    "lat": 45.5152,
    "long": -122.6784,
    "players": [
        {"firstname": "Briar", "lastname": "Ashwood"},
        {"firstname": "Rosa", "lastname": "Vex"},
        {"firstname": "Hazel", "lastname": "Blackthorn"},
    ],
    "coaches": [{"firstname": "Pat", "lastname": "Moss"}],
    "userStats": ["pts", "reb", "ast", "fgm", "fga", "fg_", "min"],
    "rcStats": ["stl", "blk"],
}

# (opponent, venue, our score, their score, per-player [pts, reb, ast, fgm, fga, min])
GAMES = [
    (
        "Thorns",
        "home_game",
        54,
        48,
        [[20, 6, 3, 8, 15, 30], [18, 4, 7, 7, 14, 28], [16, 9, 1, 6, 10, 25]],
    ),
    (
        "Herons",
        "away_game",
        41,
        50,
        [[12, 3, 2, 5, 13, 30], [15, 5, 4, 6, 16, 32], [14, 8, 0, 5, 9, 0]],
    ),
    (
        "Burnside",
        "game",
        47,
        47,
        [[19, 7, 5, 7, 12, 30], [10, 2, 6, 4, 11, 30], [18, 11, 2, 7, 12, 27]],
    ),
]

DAY = 86_400
SEASON_START = 1_700_000_000


async def seed() -> None:
    engine = create_engine(DEMO_DB)
    await create_tables(engine)

    async with get_session(engine) as session:
        repo = Repository(session)
        team = await create_team(repo, CreateTeamRequest.model_validate(TEAM), creator_id=1)
        members = await repo.get_members_for_team(team.id)
        players = [m for m in members if m.meta.get("firstname") in {"Briar", "Rosa", "Hazel"}]

        events = EventService(repo)
        stats = StatService(repo)
        for i, (opp, venue, score, opp_score, lines) in enumerate(GAMES):
            start = SEASON_START + i * 7 * DAY
            event, _ = await events.create_event(
                team,
                CreateEventRequest(title=f"vs {opp}", type=venue, start=start, end=start + 7200),
            )
            snapshot = EventSnapshot(id=event.id, start=event.start, end=event.end, type=event.type)
            meta = {"opp": opp, "score": score, "opp_score": opp_score}

            player_lines = []
            for member, (pts, reb, ast, fgm, fga, minutes) in zip(players, lines, strict=True):
                player_lines.append(
                    {
                        "id": member.id,
                        "pts": pts,
                        "reb": reb,
                        "ast": ast,
                        "fgm": fgm,
                        "fga": fga,
                        "min": minutes,
                        "starter": True,
                    }
                )
            team_line = {
                "pts": score,
                "reb": sum(line[1] for line in lines),
                "ast": sum(line[2] for line in lines),
                "fgm": sum(line[3] for line in lines),
                "fga": sum(line[4] for line in lines),
            }
            await stats.ingest_team_stats(team, team_line, snapshot, meta)
            await stats.ingest_player_stats(team, player_lines, snapshot, meta)

    await engine.dispose()
    print(f"Seeded team {TEAMNAME} with {len(GAMES)} games")


async def _demo_team(repo: Repository) -> TeamRow:
    team = await repo.get_team_by_teamname(TEAMNAME)
    if team is None:
        print("No demo team yet. Run: python scripts/demo_seed.py seed")
        sys.exit(1)
    return team


def _print_row(row: dict) -> None:
    cells = (f"{k}={v:.1f}" if isinstance(v, float) else f"{k}={v}" for k, v in row.items())
    print("  " + "  ".join(cells))


async def season() -> None:
    engine = create_engine(DEMO_DB)
    async with get_session(engine) as session:
        repo = Repository(session)
        team = await _demo_team(repo)
        result = await StatService(repo).season_stats(team)

    print("Team totals:")
    _print_row(result.team_totals)
    print("Team per game:")
    _print_row(result.team_averages)
    print("Players per game:")
    for row in result.player_averages:
        _print_row(row)
    await engine.dispose()


async def recent() -> None:
    engine = create_engine(DEMO_DB)
    async with get_session(engine) as session:
        repo = Repository(session)
        team = await _demo_team(repo)
        games = await StatService(repo).recent_games(team)

    for game in games:
        _print_row(game)
    await engine.dispose()


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1]
    if command == "seed":
        asyncio.run(seed())
    elif command == "season":
        asyncio.run(season())
    elif command == "recent":
        asyncio.run(recent())
    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()

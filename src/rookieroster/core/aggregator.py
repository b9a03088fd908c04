"""Season and recent-game stat aggregation.

Pure functions over stat rows that have already been fetched. Nothing here
touches the database, so the same functions serve the API, the demo script
and the tests.

Every entry point returns at least one row: an entity with no stats for the
season gets a row with every column set to ``None`` so callers can render
empty rows the same way as full ones.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import Any, Protocol

from rookieroster.core.formatting import PASSTHROUGH_FIELDS
from rookieroster.core.sports import NEVER_AVG, NEVER_SUM, StatsView, get_schema
from rookieroster.models.stats import Outcome, StatType

# Meta keys holding the final score, from the submitting team's point of view.
SCORE_KEY = "score"
OPP_SCORE_KEY = "opp_score"

# Suffixes that tell the display layer where a game was played.
HOME_MARKER = "***"
AWAY_MARKER = "^^^"

Row = dict[str, Any]


class StatLike(Protocol):
    id: str
    owner_id: str
    member_id: str | None
    event_id: str
    event_date: int
    type: int
    stats: dict[str, Any]
    meta: dict[str, Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _score(meta: Mapping[str, Any], key: str) -> float:
    value = meta.get(key)
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def who_won(record: StatLike) -> Outcome:
    """Classify the game a record belongs to as a loss, win or tie.

    Compares ``meta["score"]`` (points scored) with ``meta["opp_score"]``
    (points allowed). A missing score counts as zero.
    """
    meta = record.meta or {}
    scored = _score(meta, SCORE_KEY)
    allowed = _score(meta, OPP_SCORE_KEY)
    if scored > allowed:
        return Outcome.WIN
    if scored < allowed:
        return Outcome.LOSS
    return Outcome.TIE


def mark_empty(keys: Iterable[str], merge: Mapping[str, Any] | None = None) -> Row:
    """Return a row with every key set to None, then overlay *merge*."""
    row: Row = dict.fromkeys(keys)
    if merge:
        row.update(merge)
    return row


def sum_common_stats(
    record: StatLike,
    totals: Row,
    never_sum: Collection[str] = NEVER_SUM,
    stats: Mapping[str, Any] | None = None,
) -> Row:
    """Add one record's stats into *totals* and return it.

    Each record counts as one game played plus one win, loss or tie. Keys in
    *never_sum* (and any non-numeric value) are carried through instead, last
    value wins. *stats* overrides ``record.stats`` when the caller has already
    edited a copy.
    """
    line = dict(record.stats if stats is None else stats)

    outcome = who_won(record)
    line["gp"] = 1
    line["wins"] = 1 if outcome is Outcome.WIN else 0
    line["losses"] = 1 if outcome is Outcome.LOSS else 0
    line["ties"] = 1 if outcome is Outcome.TIE else 0

    for key, value in line.items():
        if key in never_sum or not _is_number(value):
            totals[key] = value
            continue
        current = totals.get(key)
        totals[key] = value if not _is_number(current) else current + value

    return totals


def per_game(totals: Mapping[str, Any], never_avg: Collection[str] = NEVER_AVG) -> Row:
    """Divide every summed category by games played.

    Keys in *never_avg* and non-numeric values pass through as-is.
    """
    games = totals.get("gp")
    averaged: Row = {}
    for key, value in totals.items():
        if key in never_avg or not _is_number(value) or not games:
            averaged[key] = value
            continue
        averaged[key] = value / games
    return averaged


def _season(
    records: Sequence[StatLike],
    keys: Sequence[str],
    sport: int,
    view: StatsView,
    identity: Mapping[str, Any] | None = None,
) -> tuple[Row, Row]:
    if not records:
        empty = mark_empty(keys, identity)
        return empty, dict(empty)

    schema = get_schema(sport)
    never_sum = schema.never_sum(view)
    never_avg = schema.never_avg(view)

    totals: Row = dict(identity or {})
    for record in records:
        edited = schema.edit_record(dict(record.stats), view)
        totals = sum_common_stats(record, totals, never_sum, stats=edited)
    if identity:
        totals.update(identity)

    totals = schema.derive_totals(totals, keys)
    averages = per_game(totals, never_avg)
    return mark_empty(keys, totals), mark_empty(keys, averages)


@dataclass(frozen=True)
class CompiledTeamStat:
    """A team line built from the player lines of one event.

    Has no stored row behind it, so ``id`` is None.
    """

    event_id: str
    event_date: int
    stats: dict[str, Any]
    meta: dict[str, Any]
    id: str | None = None
    owner_id: str = ""
    member_id: str | None = None
    type: int = StatType.TEAM


def compile_team_stats(
    records: Iterable[StatLike],
    keys: Sequence[str] = (),
    sport: int = 0,
) -> list[CompiledTeamStat]:
    """Sum player lines into one team line per event, in first-seen order.

    Used when a team only records player stats. Ratios are recomputed from
    the summed counts rather than added up.
    """
    schema = get_schema(sport)
    skip = schema.never_sum("team_season") | PASSTHROUGH_FIELDS | {"dnp", "gs"}

    grouped: dict[str, tuple[StatLike, Row]] = {}
    for record in records:
        if record.type != StatType.PLAYER:
            continue
        first, totals = grouped.setdefault(record.event_id, (record, {}))
        for key, value in (record.stats or {}).items():
            if key in skip or not _is_number(value):
                continue
            totals[key] = totals.get(key, 0) + value

    return [
        CompiledTeamStat(
            event_id=event_id,
            event_date=first.event_date,
            stats=schema.derive_totals(totals, keys),
            meta=dict(first.meta or {}),
        )
        for event_id, (first, totals) in grouped.items()
    ]


def _team_records(
    records: Iterable[StatLike], keys: Sequence[str], sport: int
) -> Sequence[StatLike]:
    records = list(records)
    team_records = [r for r in records if r.type == StatType.TEAM]
    if team_records:
        return team_records
    return compile_team_stats(records, keys, sport)


def aggregate_team_season(
    records: Iterable[StatLike],
    keys: Sequence[str] = (),
    sport: int = 0,
) -> tuple[Row, Row]:
    """Return the team's (season totals, per-game averages).

    Without any stored team lines, the team line of each event is compiled
    from its player lines.
    """
    return _season(_team_records(records, keys, sport), keys, sport, "team_season")


def _belongs_to(record: StatLike, player_id: str) -> bool:
    if record.member_id is not None:
        return record.member_id == player_id
    return record.owner_id == player_id


def aggregate_player_season(
    player_id: str,
    records: Iterable[StatLike],
    keys: Sequence[str] = (),
    sport: int = 0,
    identity: Mapping[str, Any] | None = None,
) -> tuple[Row, Row]:
    """Return one player's (season totals, per-game averages).

    *player_id* matches a record's roster slot (``member_id``) when the record
    has one, its ``owner_id`` otherwise. *identity* (name fields) is merged
    into both rows.
    """
    player_records = [
        r for r in records if r.type == StatType.PLAYER and _belongs_to(r, player_id)
    ]
    return _season(player_records, keys, sport, "player_season", identity)


def player_identity(player: Mapping[str, Any]) -> Row:
    """Build the identity columns shown next to a player's stats."""
    firstname = player.get("firstname") or ""
    lastname = player.get("lastname") or ""
    if firstname and lastname:
        abbr = f"{firstname[0]}. {lastname}"
    else:
        abbr = firstname or lastname
    return {
        "name": lastname or firstname,
        "firstname": firstname,
        "abbrName": abbr,
        "member_id": player.get("member_id"),
    }


def aggregate_roster_season(
    players: Iterable[Mapping[str, Any]],
    records: Iterable[StatLike],
    keys: Sequence[str] = (),
    sport: int = 0,
) -> tuple[list[Row], list[Row]]:
    """Season totals and averages for every rostered player, in roster order."""
    records = list(records)
    totals: list[Row] = []
    averages: list[Row] = []
    for player in players:
        identity = player_identity(player)
        player_totals, player_averages = aggregate_player_season(
            str(player["member_id"]), records, keys, sport, identity
        )
        totals.append(player_totals)
        averages.append(player_averages)
    return totals, averages


def _opponent_label(meta: Mapping[str, Any]) -> str | None:
    opp = meta.get("opp")
    if opp is None or opp == "":
        return None
    event_type = (meta.get("event") or {}).get("type")
    if event_type == "home_game":
        return f"{opp}{HOME_MARKER}"
    if event_type == "away_game":
        return f"{opp}{AWAY_MARKER}"
    return str(opp)


def recent_team_games(
    records: Iterable[StatLike],
    keys: Sequence[str] = (),
    tz: tzinfo = UTC,
    sport: int = 0,
) -> list[Row]:
    """One row per game the team recorded stats for, most recent first."""
    team_records = _team_records(records, keys, sport)
    if not team_records:
        return [mark_empty(keys)]

    games: list[Row] = []
    for record in team_records:
        meta = record.meta or {}
        event = meta.get("event") or {}
        start = int(event.get("start") or record.event_date)

        row = dict(record.stats)
        row["date"] = datetime.fromtimestamp(start, tz).date().isoformat()
        row["timestamp"] = start
        row["id"] = record.id
        row["event_id"] = record.event_id
        row["opp"] = _opponent_label(meta)
        row["win"] = int(who_won(record))
        games.append(mark_empty(keys, row))

    games.sort(key=lambda g: g["timestamp"], reverse=True)
    return games

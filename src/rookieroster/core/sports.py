"""Per-sport stat schemas.

Each sport registers the ordered master lists of player and team categories
it knows about, which categories must never be summed or averaged in each
stats view, and how to recompute derived categories (percentages, ratios)
from season totals.

Views:
    player_season: one row per rostered player, season to date
    team_season: one row for the team, season to date
    team_recent: one row per game the team played
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from typing import Literal

from rookieroster.models.team import Sport

StatsView = Literal["player_season", "team_season", "team_recent"]

# Carried through unsummed (last value wins).
NEVER_SUM: frozenset[str] = frozenset({"name", "abbrName", "firstname", "member_id"})

# Passed through as totals when computing per-game averages.
NEVER_AVG: frozenset[str] = frozenset(
    {"name", "abbrName", "firstname", "member_id", "wins", "losses", "ties", "gp", "gs"}
)

Totals = dict[str, object]


def _no_derived(totals: Totals, keys: Collection[str]) -> Totals:
    return totals


def _no_edit(stats: Totals, view: StatsView) -> Totals:
    return stats


@dataclass(frozen=True)
class SportSchema:
    """Categories and summing rules for one sport."""

    player_keys: tuple[str, ...] = ()
    team_keys: tuple[str, ...] = ()
    dont_sum: Mapping[str, frozenset[str]] = field(default_factory=dict)
    dont_avg: Mapping[str, frozenset[str]] = field(default_factory=dict)
    edit_record: Callable[[Totals, StatsView], Totals] = _no_edit
    derive_totals: Callable[[Totals, Collection[str]], Totals] = _no_derived

    def never_sum(self, view: StatsView) -> frozenset[str]:
        return NEVER_SUM | self.dont_sum.get(view, frozenset())

    def never_avg(self, view: StatsView) -> frozenset[str]:
        return NEVER_AVG | self.dont_avg.get(view, frozenset())


# ---------------------------------------------------------------------------
# Basketball
# ---------------------------------------------------------------------------

BASKETBALL_PLAYER_KEYS: tuple[str, ...] = (
    "gs",
    "min",
    "pts",
    "fgm",
    "fga",
    "fg_",
    "threepm",
    "threepa",
    "threep_",
    "ftm",
    "fta",
    "ft_",
    "ast",
    "reb",
    "oreb",
    "dreb",
    "stl",
    "blk",
    "to",
    "pf",
    "dd",
    "td",
    "efg_",
    "ts_",
    "astto",
)

BASKETBALL_TEAM_KEYS: tuple[str, ...] = (
    "pts",
    "fgm",
    "fga",
    "fg_",
    "threepm",
    "threepa",
    "threep_",
    "ftm",
    "fta",
    "ft_",
    "ast",
    "reb",
    "oreb",
    "dreb",
    "stl",
    "blk",
    "to",
    "pf",
    "efg_",
    "ts_",
    "astto",
)

# Ratios are recomputed from the summed counts, never summed or averaged.
BASKETBALL_DERIVED: frozenset[str] = frozenset({"fg_", "threep_", "ft_", "efg_", "ts_", "astto"})


def _num(totals: Totals, key: str) -> float:
    value = totals.get(key)
    return float(value) if isinstance(value, (int, float)) else 0.0


def _wanted(key: str, totals: Totals, keys: Collection[str]) -> bool:
    return key in totals or key in keys


def _pct(made: float, attempted: float) -> float | None:
    if attempted <= 0:
        return None
    return round(made / attempted * 100, 1)


def basketball_derived(totals: Totals, keys: Collection[str] = ()) -> Totals:
    """Recompute shooting percentages and assist/turnover ratio from counts.

    Only categories present in *totals* or listed in *keys* are recomputed, so
    a team that doesn't track e.g. true shooting never grows a ``ts_`` column.
    """
    fgm, fga = _num(totals, "fgm"), _num(totals, "fga")
    tpm, tpa = _num(totals, "threepm"), _num(totals, "threepa")
    ftm, fta = _num(totals, "ftm"), _num(totals, "fta")
    pts = _num(totals, "pts")

    if _wanted("fg_", totals, keys):
        totals["fg_"] = _pct(fgm, fga)
    if _wanted("threep_", totals, keys):
        totals["threep_"] = _pct(tpm, tpa)
    if _wanted("ft_", totals, keys):
        totals["ft_"] = _pct(ftm, fta)
    if _wanted("efg_", totals, keys):
        totals["efg_"] = _pct(fgm + 0.5 * tpm, fga)
    if _wanted("ts_", totals, keys):
        totals["ts_"] = _pct(pts, 2 * (fga + 0.44 * fta))
    if _wanted("astto", totals, keys):
        to = _num(totals, "to")
        totals["astto"] = round(_num(totals, "ast") / to, 2) if to > 0 else None
    return totals


_TRUTHY = frozenset({"1", "true", "yes", "on"})


def basketball_edit_record(stats: Totals, view: StatsView) -> Totals:
    """Count a game started for every player line flagged as a starter."""
    if view == "player_season" and "starter" in stats:
        starter = stats["starter"]
        if isinstance(starter, str):
            started = starter.strip().lower() in _TRUTHY
        else:
            started = bool(starter)
        stats["gs"] = 1 if started else 0
    return stats


BASKETBALL = SportSchema(
    player_keys=BASKETBALL_PLAYER_KEYS,
    team_keys=BASKETBALL_TEAM_KEYS,
    dont_sum={
        "player_season": BASKETBALL_DERIVED | {"starter", "dnp"},
        "team_season": BASKETBALL_DERIVED,
    },
    dont_avg={
        "player_season": BASKETBALL_DERIVED | {"starter", "dnp"},
        "team_season": BASKETBALL_DERIVED,
    },
    edit_record=basketball_edit_record,
    derive_totals=basketball_derived,
)

EMPTY_SCHEMA = SportSchema()

_REGISTRY: dict[int, SportSchema] = {
    Sport.BASKETBALL: BASKETBALL,
}


def get_schema(sport: int) -> SportSchema:
    """Return the registered schema for *sport*, or an empty one if unknown."""
    return _REGISTRY.get(sport, EMPTY_SCHEMA)

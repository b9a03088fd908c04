"""Stat column resolution.

A team tracks the categories its users picked plus any the organisation
defines. Columns always come back in the sport's master-list order, never
input order, so every team in a sport shows its stats the same way.
"""

from __future__ import annotations

from collections.abc import Iterable

from rookieroster.core.sports import get_schema
from rookieroster.models.stats import KeySet

PLAYER_IDENTITY_COLUMNS: tuple[str, ...] = ("name",)
TEAM_IDENTITY_COLUMNS: tuple[str, ...] = ("date", "win", "opp")


def resolve_keys(sport: int, user_stats: Iterable[str], rc_stats: Iterable[str]) -> KeySet:
    """Return the ordered player and team columns for a team.

    The ``name`` column is only included when the team tracks at least one
    user-defined category.
    """
    user = list(user_stats)
    used = set(user) | set(rc_stats)
    schema = get_schema(sport)

    player_columns = list(PLAYER_IDENTITY_COLUMNS) if user else []
    team_columns = list(TEAM_IDENTITY_COLUMNS)

    player_columns.extend(key for key in schema.player_keys if key in used)
    team_columns.extend(key for key in schema.team_keys if key in used)

    return KeySet(player_columns=player_columns, team_columns=team_columns)

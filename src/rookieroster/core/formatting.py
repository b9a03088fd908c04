"""Normalisation of submitted stat lines.

Both the create and the update path run every player line through
``format_player_stats``. The result is either the normalised stats or an
explicit ``Excluded`` marker for players who did not play.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

# Fields that pass through untouched; everything else must be numeric.
PASSTHROUGH_FIELDS: frozenset[str] = frozenset({"starter", "name"})

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class Excluded:
    """A player line dropped because the player did not play."""

    reason: str  # "min" or "dnp"


FormattedStats = dict[str, Any]


def to_number(value: Any) -> int | float:
    """Coerce a submitted value to a number.

    Empty, boolean or non-numeric input becomes 0. Integer strings keep full
    precision.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if _INTEGER.fullmatch(text):
            return int(text)
        if not _DECIMAL.fullmatch(text):
            return 0
        number = float(text)
        if not math.isfinite(number):
            return 0
        return int(number) if number.is_integer() and "." not in text else number
    return 0


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def did_not_play(stats: dict[str, Any]) -> str | None:
    """Return why a line counts as DNP, or None if the player played."""
    if stats.get("min") is not None and to_number(stats["min"]) <= 0:
        return "min"
    if stats.get("dnp") is not None and _is_true(stats["dnp"]):
        return "dnp"
    return None


def coerce_stats(stats: dict[str, Any]) -> FormattedStats:
    """Force every value numeric except the pass-through identity fields."""
    return {
        key: value if key in PASSTHROUGH_FIELDS else to_number(value)
        for key, value in stats.items()
    }


def format_player_stats(stats: dict[str, Any]) -> FormattedStats | Excluded:
    """Normalise one player's line, or exclude it if they didn't play.

    A line is excluded when ``min`` is present and <= 0, or when ``dnp`` is
    set. All other fields that are empty or not numeric are treated as zero.
    """
    reason = did_not_play(stats)
    if reason is not None:
        return Excluded(reason)
    return coerce_stats(stats)


def extract_owner(raw: dict[str, Any]) -> tuple[str, str | None, dict[str, Any]]:
    """Split a submitted player line into (owner id, member id, stats).

    The line itself is left untouched.
    """
    stats = dict(raw)
    try:
        owner_id = stats.pop("id")
    except KeyError:
        msg = "Player stat line is missing its player id"
        raise ValueError(msg) from None
    member_id = stats.pop("member_id", None)
    return str(owner_id), (str(member_id) if member_id is not None else None), stats

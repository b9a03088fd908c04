"""Rookie Roster: team rosters, schedules, game stats and a team news feed."""

__version__ = "0.1.0"

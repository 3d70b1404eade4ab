"""Database repository helpers."""

from repositories.league import (
    LEAGUE_TABLES,
    ensure_schema,
    fetch_raw_events,
    fetch_raw_players,
    fetch_raw_teams,
)

__all__ = [
    "LEAGUE_TABLES",
    "ensure_schema",
    "fetch_raw_events",
    "fetch_raw_players",
    "fetch_raw_teams",
]

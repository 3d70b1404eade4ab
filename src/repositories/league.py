"""Read players, teams and events from the league database as raw nested rows.

Rows come back shaped the way the hosted API embeds relations: some to-one
relations as a single mapping, some as a one-element list. The normalizer is
the only place that resolves that.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_metadata = MetaData()

_regions = Table(
    "regions",
    _metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
)

_players = Table(
    "players",
    _metadata,
    Column("id", String, primary_key=True),
    Column("gamertag", String, nullable=False),
    Column("position", String),
    Column("performance_score", Float),
    Column("player_rp", Float),
    Column("player_rank_score", Float),
    Column("monthly_value", Float),
    Column("is_rookie", Boolean, nullable=False, default=False),
)

_teams = Table(
    "teams",
    _metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("logo_url", String),
    Column("current_rp", Float),
    Column("elo_rating", Float),
    Column("global_rank", Integer),
    Column("leaderboard_tier", String),
    Column("region_id", String, ForeignKey("regions.id")),
    Column("captain_id", String, ForeignKey("players.id")),
    Column("wins", Integer),
    Column("losses", Integer),
)

_events = Table(
    "events",
    _metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("start_date", DateTime(timezone=True)),
    Column("end_date", DateTime(timezone=True)),
    Column("description", Text),
    Column("location", String),
    Column("region_id", String, ForeignKey("regions.id")),
    Column("max_teams", Integer),
)

_team_rosters = Table(
    "team_rosters",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("team_id", String, ForeignKey("teams.id"), nullable=False),
    Column("player_id", String, ForeignKey("players.id"), nullable=False),
    Column("event_id", String, ForeignKey("events.id")),
    Column("left_at", DateTime(timezone=True)),
)

_player_stats = Table(
    "player_stats",
    _metadata,
    Column("player_id", String, ForeignKey("players.id"), primary_key=True),
    Column("games_played", Integer),
    Column("points_per_game", Float),
    Column("assists_per_game", Float),
    Column("rebounds_per_game", Float),
    Column("steals_per_game", Float),
    Column("blocks_per_game", Float),
    Column("field_goal_percentage", Float),
    Column("three_point_percentage", Float),
    Column("free_throw_percentage", Float),
    Column("minutes_per_game", Float),
    Column("turnovers_per_game", Float),
)

LEAGUE_TABLES = {
    table.name: table
    for table in (_regions, _players, _teams, _events, _team_rosters, _player_stats)
}


def ensure_schema(engine: Engine) -> None:
    """Create the league tables when missing."""
    with engine.begin() as connection:
        _metadata.create_all(bind=connection, checkfirst=True)


def _regions_by_id(session: Session) -> dict[str, dict[str, Any]]:
    rows = session.execute(select(_regions.c.id, _regions.c.name)).mappings().all()
    return {row["id"]: dict(row) for row in rows}


def fetch_raw_players(session: Session) -> list[dict[str, Any]]:
    """Fetch players with their current roster team and season stats embedded."""
    player_rows = session.execute(select(_players).order_by(_players.c.id)).mappings().all()

    roster_statement = (
        select(
            _team_rosters.c.player_id,
            _team_rosters.c.team_id,
            _teams.c.name.label("team_name"),
            _teams.c.logo_url.label("team_logo_url"),
        )
        .select_from(_team_rosters.join(_teams, _teams.c.id == _team_rosters.c.team_id))
        .where(
            _team_rosters.c.left_at.is_(None),
            _team_rosters.c.event_id.is_(None),
        )
        .order_by(_team_rosters.c.player_id, _team_rosters.c.id)
    )
    rosters: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for row in session.execute(roster_statement).mappings():
        rosters[row["player_id"]].append(
            {
                "team_id": row["team_id"],
                "teams": {
                    "id": row["team_id"],
                    "name": row["team_name"],
                    "logo_url": row["team_logo_url"],
                },
            }
        )

    stats = {
        row["player_id"]: dict(row)
        for row in session.execute(select(_player_stats)).mappings()
    }

    raws: list[dict[str, Any]] = []
    for row in player_rows:
        raw = dict(row)
        raw["team_rosters"] = rosters.get(row["id"], [])
        stat_row = stats.get(row["id"])
        raw["player_stats"] = [] if stat_row is None else [stat_row]
        raws.append(raw)

    logger.info("Fetched %d players", len(raws))
    return raws


def fetch_raw_teams(session: Session) -> list[dict[str, Any]]:
    """Fetch teams with region, captain and current roster embedded."""
    regions = _regions_by_id(session)
    team_rows = session.execute(select(_teams).order_by(_teams.c.id)).mappings().all()

    captain_ids = {row["captain_id"] for row in team_rows if row["captain_id"] is not None}
    captains: dict[str, dict[str, Any]] = {}
    if captain_ids:
        captain_statement = select(_players.c.id, _players.c.gamertag).where(
            _players.c.id.in_(sorted(captain_ids))
        )
        captains = {
            row["id"]: dict(row) for row in session.execute(captain_statement).mappings()
        }

    roster_statement = (
        select(_team_rosters.c.team_id, _team_rosters.c.player_id)
        .where(
            _team_rosters.c.left_at.is_(None),
            _team_rosters.c.event_id.is_(None),
        )
        .order_by(_team_rosters.c.team_id, _team_rosters.c.id)
    )
    rosters: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for row in session.execute(roster_statement).mappings():
        rosters[row["team_id"]].append({"player_id": row["player_id"]})

    raws: list[dict[str, Any]] = []
    for row in team_rows:
        raw = dict(row)
        region_id = raw.pop("region_id")
        captain_id = raw.pop("captain_id")
        raw["regions"] = regions.get(region_id) if region_id is not None else None
        captain = captains.get(captain_id) if captain_id is not None else None
        raw["captain"] = None if captain is None else {"players": captain}
        raw["team_rosters"] = rosters.get(row["id"], [])
        raws.append(raw)

    logger.info("Fetched %d teams", len(raws))
    return raws


def fetch_raw_events(session: Session) -> list[dict[str, Any]]:
    """Fetch events with region and event-registered rosters embedded."""
    regions = _regions_by_id(session)
    event_rows = session.execute(select(_events).order_by(_events.c.id)).mappings().all()

    roster_statement = (
        select(_team_rosters.c.event_id, _team_rosters.c.team_id)
        .where(_team_rosters.c.event_id.is_not(None))
        .order_by(_team_rosters.c.event_id, _team_rosters.c.id)
    )
    rosters: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for row in session.execute(roster_statement).mappings():
        rosters[row["event_id"]].append({"team_id": row["team_id"]})

    raws: list[dict[str, Any]] = []
    for row in event_rows:
        raw = dict(row)
        region_id = raw.pop("region_id")
        region = regions.get(region_id) if region_id is not None else None
        raw["regions"] = [] if region is None else [region]
        raw["team_rosters"] = rosters.get(row["id"], [])
        raws.append(raw)

    logger.info("Fetched %d events", len(raws))
    return raws


__all__ = [
    "LEAGUE_TABLES",
    "ensure_schema",
    "fetch_raw_events",
    "fetch_raw_players",
    "fetch_raw_teams",
]

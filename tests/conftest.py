"""Shared fixtures: a small seeded league database."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import insert
from sqlalchemy.engine import Engine

from db import create_db_engine
from repositories.league import LEAGUE_TABLES, ensure_schema


def seed_league(engine: Engine) -> None:
    ensure_schema(engine)
    with engine.begin() as connection:
        connection.execute(
            insert(LEAGUE_TABLES["regions"]),
            [{"id": "r1", "name": "NA East"}, {"id": "r2", "name": "Europe"}],
        )
        connection.execute(
            insert(LEAGUE_TABLES["players"]),
            [
                {
                    "id": "p1",
                    "gamertag": "SplashKing",
                    "position": "PG",
                    "player_rank_score": 91.0,
                    "is_rookie": False,
                },
                {
                    "id": "p2",
                    "gamertag": "Glass",
                    "position": "C",
                    "player_rank_score": 74.5,
                    "is_rookie": True,
                },
                {
                    "id": "p3",
                    "gamertag": "Drifter",
                    "position": None,
                    "player_rank_score": None,
                    "is_rookie": False,
                },
            ],
        )
        connection.execute(
            insert(LEAGUE_TABLES["teams"]),
            [
                {
                    "id": "t1",
                    "name": "Hoopers",
                    "current_rp": 1800.0,
                    "global_rank": 2,
                    "leaderboard_tier": "S-Tier",
                    "region_id": "r1",
                    "captain_id": "p1",
                    "wins": 9,
                    "losses": 1,
                },
                {
                    "id": "t2",
                    "name": "Bench Mob",
                    "current_rp": None,
                    "global_rank": None,
                    "leaderboard_tier": None,
                    "region_id": None,
                    "captain_id": None,
                    "wins": None,
                    "losses": None,
                },
            ],
        )
        connection.execute(
            insert(LEAGUE_TABLES["events"]),
            [
                {
                    "id": "e1",
                    "name": "Spring Major",
                    "start_date": datetime(2021, 4, 1, 18, 0),
                    "end_date": datetime(2021, 4, 3, 23, 0),
                    "location": "Online",
                    "region_id": "r2",
                    "max_teams": 16,
                },
                {
                    "id": "e2",
                    "name": "Open Qualifier",
                    "start_date": None,
                    "end_date": None,
                    "location": None,
                    "region_id": None,
                    "max_teams": None,
                },
            ],
        )
        connection.execute(
            insert(LEAGUE_TABLES["team_rosters"]),
            [
                {"team_id": "t1", "player_id": "p1", "event_id": None, "left_at": None},
                {"team_id": "t1", "player_id": "p2", "event_id": None, "left_at": None},
                {
                    "team_id": "t2",
                    "player_id": "p3",
                    "event_id": None,
                    "left_at": datetime(2026, 1, 1),
                },
                {"team_id": "t1", "player_id": "p1", "event_id": "e1", "left_at": None},
                {"team_id": "t1", "player_id": "p2", "event_id": "e1", "left_at": None},
                {"team_id": "t2", "player_id": "p3", "event_id": "e1", "left_at": None},
            ],
        )
        connection.execute(
            insert(LEAGUE_TABLES["player_stats"]),
            [{"player_id": "p1", "games_played": 14, "points_per_game": 24.5}],
        )


@pytest.fixture()
def league_engine() -> Iterator[Engine]:
    engine = create_db_engine("sqlite+pysqlite:///:memory:")
    seed_league(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def league_db_url(tmp_path: Path) -> Iterator[str]:
    db_url = f"sqlite+pysqlite:///{tmp_path / 'league.db'}"
    engine = create_db_engine(db_url)
    seed_league(engine)
    engine.dispose()
    yield db_url

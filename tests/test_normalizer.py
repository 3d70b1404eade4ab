"""Tests for mapping raw joined rows onto canonical records."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from domain.normalizer import (
    normalize_event,
    normalize_player,
    normalize_records,
    normalize_team,
    to_many,
    to_one,
)
from domain.protocol import Position


def test_to_one_collapses_every_relation_shape() -> None:
    team = {"id": "t1", "name": "Hoopers"}
    assert to_one(None) is None
    assert to_one([]) is None
    assert to_one(team) == team
    assert to_one([team]) == team
    assert to_one([team, {"id": "t2"}]) == team


def test_to_many_expands_every_relation_shape() -> None:
    row = {"team_id": "t1"}
    assert to_many(None) == []
    assert to_many(row) == [row]
    assert to_many([row, row]) == [row, row]


def test_player_team_resolves_from_object_list_or_null() -> None:
    team = {"id": "t1", "name": "Hoopers", "logo_url": "https://cdn/logo.png"}

    as_object = normalize_player({"id": "p1", "gamertag": "A", "teams": team})
    as_list = normalize_player({"id": "p2", "gamertag": "B", "teams": [team]})
    as_null = normalize_player({"id": "p3", "gamertag": "C", "teams": None})

    assert as_object.team == as_list.team
    assert as_object.team is not None
    assert as_object.team.id == "t1"
    assert as_object.team.logo_url == "https://cdn/logo.png"
    assert as_null.team is None
    assert as_null.is_free_agent


def test_player_team_falls_back_to_roster_team() -> None:
    player = normalize_player(
        {
            "id": "p1",
            "gamertag": "Rostered",
            "team_rosters": [{"team_id": "t9", "teams": [{"id": "t9", "name": "Nine"}]}],
        }
    )
    assert player.team is not None
    assert player.team.name == "Nine"


def test_player_fields_and_stats_are_coerced() -> None:
    player = normalize_player(
        {
            "id": 42,
            "gamertag": "Dimes",
            "position": "pg",
            "performance_score": "91.5",
            "player_rp": 1200,
            "player_rank_score": None,
            "monthly_value": "n/a",
            "player_stats": [
                {"games_played": 12.0, "points_per_game": 21.4, "turnovers_per_game": None}
            ],
        }
    )

    assert player.id == "42"
    assert player.position is Position.PG
    assert player.performance_score == pytest.approx(91.5)
    assert player.player_rp == pytest.approx(1200.0)
    assert player.player_rank_score is None
    assert player.monthly_value is None
    assert player.stats is not None
    assert player.stats.games_played == 12
    assert player.stats.points_per_game == pytest.approx(21.4)
    assert player.stats.turnovers_per_game is None


def test_unknown_position_and_bad_numbers_log_warnings(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="domain.normalizer"):
        player = normalize_player(
            {"id": "p1", "gamertag": "X", "position": "GOAT", "player_rp": "lots"}
        )

    assert player.position is None
    assert player.player_rp is None
    assert "unknown position" in caplog.text
    assert "player_rp" in caplog.text


def test_team_region_captain_and_roster_count() -> None:
    team = normalize_team(
        {
            "id": "t1",
            "name": "Hoopers",
            "current_rp": 1500,
            "global_rank": 3,
            "regions": [{"id": "r1", "name": "NA East"}],
            "captain": {"players": {"id": "p1", "gamertag": "Cap"}},
            "team_rosters": [{"player_id": "p1"}, {"player_id": "p2"}],
            "wins": 7,
            "losses": 3,
        }
    )

    assert team.region is not None
    assert team.region.name == "NA East"
    assert team.captain is not None
    assert team.captain.gamertag == "Cap"
    assert team.roster_count == 2
    assert team.global_rank == 3
    assert team.wins == 7


def test_team_accepts_flat_captain_and_explicit_roster_count() -> None:
    team = normalize_team(
        {
            "id": "t1",
            "name": "Solo",
            "captain": [{"id": "p5", "gamertag": "Flat"}],
            "roster_count": 5,
            "region": None,
        }
    )
    assert team.captain is not None
    assert team.captain.player_id == "p5"
    assert team.roster_count == 5
    assert team.region is None


def test_event_dates_are_parsed_to_utc() -> None:
    event = normalize_event(
        {
            "id": "e1",
            "name": "Summer Open",
            "start_date": "2026-06-01T18:00:00Z",
            "end_date": datetime(2026, 6, 3, 12, 0, 0),
            "max_teams": 32,
        }
    )

    assert event.start_date == datetime(2026, 6, 1, 18, 0, 0, tzinfo=UTC)
    assert event.end_date == datetime(2026, 6, 3, 12, 0, 0, tzinfo=UTC)
    assert event.max_teams == 32


def test_event_registered_teams_counts_distinct_roster_teams() -> None:
    event = normalize_event(
        {
            "id": "e1",
            "name": "Qualifier",
            "team_rosters": [
                {"team_id": "t1"},
                {"team_id": "t1"},
                {"team_id": "t2"},
                {"team_id": None},
            ],
        }
    )
    assert event.registered_teams == 2


def test_event_unparseable_date_becomes_missing() -> None:
    event = normalize_event({"id": "e1", "name": "TBD", "start_date": "next week"})
    assert event.start_date is None


def test_normalize_records_preserves_order() -> None:
    raws = [{"id": str(index), "gamertag": f"g{index}"} for index in range(5)]
    players = normalize_records(raws, normalize_player)
    assert [player.id for player in players] == ["0", "1", "2", "3", "4"]


@pytest.mark.parametrize(
    "value, expected",
    [(None, False), (True, True), (1, True), ("false", False), ("TRUE", True)],
)
def test_player_rookie_flag_is_coerced(value: object, expected: bool) -> None:
    player = normalize_player({"id": "p1", "gamertag": "Rook", "is_rookie": value})
    assert player.is_rookie is expected

"""Field schemas for the players, teams and events views."""

from __future__ import annotations

from datetime import datetime

from domain.common import (
    EventRecord,
    PlayerRecord,
    TeamRecord,
    status_of,
    utc_now,
    win_percentage,
)
from domain.pipeline import FieldSpec, RecordSchema
from domain.protocol import EntityKind, FieldKind, SortDirection
from domain.ratings.reference import LEADERBOARD_TIERS
from domain.ratings.tiers import classify

DESC = SortDirection.DESC


def _team_name(player: PlayerRecord) -> str | None:
    return None if player.team is None else player.team.name


def _team_id(player: PlayerRecord) -> str | None:
    return None if player.team is None else player.team.id


def _games_played(player: PlayerRecord) -> int | None:
    return None if player.stats is None else player.stats.games_played


def _region_name(record: TeamRecord | EventRecord) -> str | None:
    return None if record.region is None else record.region.name


def _region_id(record: TeamRecord | EventRecord) -> str | None:
    return None if record.region is None else record.region.id


def _captain_gamertag(team: TeamRecord) -> str | None:
    return None if team.captain is None else team.captain.gamertag


def team_tier(team: TeamRecord) -> str:
    """Stored leaderboard tier, else the tier implied by the team's global rank."""
    return team.leaderboard_tier or classify(team.global_rank, LEADERBOARD_TIERS)


PLAYER_SCHEMA = RecordSchema(
    entity=EntityKind.PLAYER,
    fields=(
        FieldSpec("gamertag", FieldKind.TEXT, lambda p: p.gamertag, searchable=True),
        FieldSpec(
            "position",
            FieldKind.TEXT,
            lambda p: p.position,
            searchable=True,
            filter_getter=lambda p: p.position,
        ),
        FieldSpec(
            "team",
            FieldKind.RELATION,
            _team_name,
            searchable=True,
            filter_getter=_team_id,
        ),
        FieldSpec("player_rank_score", FieldKind.NUMERIC, lambda p: p.player_rank_score, DESC),
        FieldSpec("performance_score", FieldKind.NUMERIC, lambda p: p.performance_score, DESC),
        FieldSpec("player_rp", FieldKind.NUMERIC, lambda p: p.player_rp, DESC),
        FieldSpec("monthly_value", FieldKind.NUMERIC, lambda p: p.monthly_value, DESC),
        FieldSpec("games_played", FieldKind.NUMERIC, _games_played, DESC),
    ),
    default_sort_field="player_rank_score",
)


TEAM_SCHEMA = RecordSchema(
    entity=EntityKind.TEAM,
    fields=(
        FieldSpec("name", FieldKind.TEXT, lambda t: t.name, searchable=True),
        FieldSpec(
            "region",
            FieldKind.RELATION,
            _region_name,
            searchable=True,
            filter_getter=_region_id,
        ),
        FieldSpec(
            "captain",
            FieldKind.RELATION,
            _captain_gamertag,
            searchable=True,
        ),
        FieldSpec(
            "leaderboard_tier",
            FieldKind.TEXT,
            team_tier,
            filter_getter=team_tier,
        ),
        FieldSpec("current_rp", FieldKind.NUMERIC, lambda t: t.current_rp, DESC),
        FieldSpec("elo_rating", FieldKind.NUMERIC, lambda t: t.elo_rating, DESC),
        FieldSpec("global_rank", FieldKind.NUMERIC, lambda t: t.global_rank),
        FieldSpec("win_percentage", FieldKind.NUMERIC, win_percentage, DESC),
        FieldSpec("roster_count", FieldKind.NUMERIC, lambda t: t.roster_count, DESC),
    ),
    default_sort_field="current_rp",
)


def build_event_schema(now: datetime | None = None) -> RecordSchema:
    """Event schema whose status field is derived against ``now`` on every read."""
    current = now or utc_now()

    def status(event: EventRecord) -> str:
        return status_of(event, current).value

    return RecordSchema(
        entity=EntityKind.EVENT,
        fields=(
            FieldSpec("name", FieldKind.TEXT, lambda e: e.name, searchable=True),
            FieldSpec("location", FieldKind.TEXT, lambda e: e.location, searchable=True),
            FieldSpec("status", FieldKind.TEXT, status, filter_getter=status),
            FieldSpec(
                "region",
                FieldKind.RELATION,
                _region_name,
                filter_getter=_region_id,
            ),
            FieldSpec("start_date", FieldKind.DATE, lambda e: e.start_date),
            FieldSpec("end_date", FieldKind.DATE, lambda e: e.end_date),
            FieldSpec("registered_teams", FieldKind.NUMERIC, lambda e: e.registered_teams, DESC),
            FieldSpec("max_teams", FieldKind.NUMERIC, lambda e: e.max_teams, DESC),
        ),
        default_sort_field="start_date",
    )


def get_schema(entity: EntityKind, now: datetime | None = None) -> RecordSchema:
    """Look up the field schema for one entity kind."""
    if entity is EntityKind.PLAYER:
        return PLAYER_SCHEMA
    if entity is EntityKind.TEAM:
        return TEAM_SCHEMA
    return build_event_schema(now)


__all__ = ["PLAYER_SCHEMA", "TEAM_SCHEMA", "build_event_schema", "get_schema", "team_tier"]

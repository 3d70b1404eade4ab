"""Map raw joined rows from the data source onto canonical records.

Upstream joins hand back to-one relations as ``None``, a single mapping, or a
one-element list depending on how the join was written. Everything below
resolves that ambiguity once so the pipeline never has to.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, time
from typing import Any, TypeVar

from domain.common import (
    CaptainRef,
    EventRecord,
    PlayerRecord,
    PlayerStats,
    RegionRef,
    TeamRecord,
    TeamRef,
    as_utc,
)
from domain.protocol import Position

logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Any]
T = TypeVar("T")

_STAT_FIELDS = (
    "points_per_game",
    "assists_per_game",
    "rebounds_per_game",
    "steals_per_game",
    "blocks_per_game",
    "field_goal_percentage",
    "three_point_percentage",
    "free_throw_percentage",
    "minutes_per_game",
    "turnovers_per_game",
)


def to_one(value: Any) -> Any:
    """Collapse a to-one relation to ``None`` or a single object."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        if len(value) > 1:
            logger.debug("to-one relation arrived with %d rows; keeping the first", len(value))
        return value[0]
    return value


def to_many(value: Any) -> list[Any]:
    """Expand a to-many relation to an ordered list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _first_present(raw: RawRecord, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_float(value: Any, *, field: str) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric %s=%r", field, value)
        return None
    if not math.isfinite(number):
        return None
    return number


def _flag(value: Any, *, field: str) -> bool:
    if value is None:
        return False
    if isinstance(value, (bool, int)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "t", "yes", "1"):
            return True
        if text in ("false", "f", "no", "0", ""):
            return False
    logger.warning("Ignoring unsupported %s=%r", field, value)
    return False


def _optional_int(value: Any, *, field: str) -> int | None:
    number = _optional_float(value, field=field)
    if number is None:
        return None
    return int(number)


def _parse_datetime(value: Any, *, field: str) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Ignoring unparseable %s=%r", field, value)
            return None
    else:
        logger.warning("Ignoring unsupported %s=%r", field, value)
        return None
    return as_utc(parsed)


def _parse_position(value: Any) -> Position | None:
    text = _optional_str(value)
    if text is None:
        return None
    try:
        return Position(text.upper())
    except ValueError:
        logger.warning("Ignoring unknown position %r", value)
        return None


def _team_ref(value: Any) -> TeamRef | None:
    team = to_one(value)
    if not isinstance(team, Mapping) or team.get("id") is None:
        return None
    return TeamRef(
        id=str(team["id"]),
        name=str(team.get("name") or ""),
        logo_url=_optional_str(team.get("logo_url")),
    )


def _region_ref(value: Any) -> RegionRef | None:
    region = to_one(value)
    if not isinstance(region, Mapping) or region.get("id") is None:
        return None
    return RegionRef(id=str(region["id"]), name=str(region.get("name") or ""))


def _captain_ref(value: Any) -> CaptainRef | None:
    captain = to_one(value)
    if not isinstance(captain, Mapping):
        return None
    if "players" in captain:
        captain = to_one(captain["players"])
        if not isinstance(captain, Mapping):
            return None
    if captain.get("id") is None:
        return None
    return CaptainRef(player_id=str(captain["id"]), gamertag=str(captain.get("gamertag") or ""))


def _player_stats(value: Any) -> PlayerStats | None:
    stats = to_one(value)
    if not isinstance(stats, Mapping):
        return None
    rates = {name: _optional_float(stats.get(name), field=name) for name in _STAT_FIELDS}
    return PlayerStats(
        games_played=_optional_int(stats.get("games_played"), field="games_played"),
        **rates,
    )


def _resolve_player_team(raw: RawRecord) -> TeamRef | None:
    direct = to_one(raw.get("teams"))
    if direct is not None:
        return _team_ref(direct)
    roster = to_one(raw.get("team_rosters"))
    if isinstance(roster, Mapping):
        return _team_ref(roster.get("teams"))
    return None


def normalize_player(raw: RawRecord) -> PlayerRecord:
    """Build a ``PlayerRecord`` from a raw player row and its nested relations."""
    return PlayerRecord(
        id=str(raw.get("id", "")),
        gamertag=str(raw.get("gamertag") or ""),
        position=_parse_position(raw.get("position")),
        performance_score=_optional_float(raw.get("performance_score"), field="performance_score"),
        player_rp=_optional_float(raw.get("player_rp"), field="player_rp"),
        player_rank_score=_optional_float(raw.get("player_rank_score"), field="player_rank_score"),
        monthly_value=_optional_float(raw.get("monthly_value"), field="monthly_value"),
        team=_resolve_player_team(raw),
        stats=_player_stats(_first_present(raw, "stats", "player_stats")),
        is_rookie=_flag(raw.get("is_rookie"), field="is_rookie"),
    )


def normalize_team(raw: RawRecord) -> TeamRecord:
    """Build a ``TeamRecord`` from a raw team row and its nested relations."""
    roster_count = _optional_int(raw.get("roster_count"), field="roster_count")
    if roster_count is None:
        roster_count = len(to_many(raw.get("team_rosters")))

    return TeamRecord(
        id=str(raw.get("id", "")),
        name=str(raw.get("name") or ""),
        current_rp=_optional_float(raw.get("current_rp"), field="current_rp"),
        elo_rating=_optional_float(raw.get("elo_rating"), field="elo_rating"),
        global_rank=_optional_int(raw.get("global_rank"), field="global_rank"),
        leaderboard_tier=_optional_str(raw.get("leaderboard_tier")),
        region=_region_ref(_first_present(raw, "region", "regions")),
        captain=_captain_ref(raw.get("captain")),
        roster_count=roster_count,
        logo_url=_optional_str(raw.get("logo_url")),
        wins=_optional_int(raw.get("wins"), field="wins"),
        losses=_optional_int(raw.get("losses"), field="losses"),
    )


def normalize_event(raw: RawRecord) -> EventRecord:
    """Build an ``EventRecord``; registered teams fall back to distinct roster teams."""
    registered = _optional_int(raw.get("registered_teams"), field="registered_teams")
    if registered is None:
        team_ids = {
            row.get("team_id")
            for row in to_many(raw.get("team_rosters"))
            if isinstance(row, Mapping) and row.get("team_id") is not None
        }
        registered = len(team_ids)

    return EventRecord(
        id=str(raw.get("id", "")),
        name=str(raw.get("name") or ""),
        start_date=_parse_datetime(raw.get("start_date"), field="start_date"),
        end_date=_parse_datetime(raw.get("end_date"), field="end_date"),
        description=_optional_str(raw.get("description")),
        location=_optional_str(raw.get("location")),
        region=_region_ref(_first_present(raw, "region", "regions")),
        registered_teams=registered,
        max_teams=_optional_int(raw.get("max_teams"), field="max_teams"),
    )


def normalize_records(raws: Iterable[RawRecord], normalizer: Callable[[RawRecord], T]) -> list[T]:
    """Normalize a batch of raw rows, preserving upstream order."""
    return [normalizer(raw) for raw in raws]


__all__ = [
    "normalize_event",
    "normalize_player",
    "normalize_records",
    "normalize_team",
    "to_many",
    "to_one",
]

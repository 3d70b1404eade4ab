"""Canonical record types and the values derived from them on read."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from domain.protocol import EventStatus, Position

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class TeamRef:
    """Weak reference to a player's current team."""

    id: str
    name: str
    logo_url: str | None = None


@dataclass(frozen=True)
class RegionRef:
    id: str
    name: str


@dataclass(frozen=True)
class CaptainRef:
    player_id: str
    gamertag: str


@dataclass(frozen=True)
class PlayerStats:
    """Season averages for one player."""

    games_played: int | None = None
    points_per_game: float | None = None
    assists_per_game: float | None = None
    rebounds_per_game: float | None = None
    steals_per_game: float | None = None
    blocks_per_game: float | None = None
    field_goal_percentage: float | None = None
    three_point_percentage: float | None = None
    free_throw_percentage: float | None = None
    minutes_per_game: float | None = None
    turnovers_per_game: float | None = None


@dataclass(frozen=True)
class PlayerRecord:
    id: str
    gamertag: str
    position: Position | None = None
    performance_score: float | None = None
    player_rp: float | None = None
    player_rank_score: float | None = None
    monthly_value: float | None = None
    team: TeamRef | None = None
    stats: PlayerStats | None = None
    is_rookie: bool = False

    @property
    def is_free_agent(self) -> bool:
        return self.team is None


@dataclass(frozen=True)
class TeamRecord:
    id: str
    name: str
    current_rp: float | None = None
    elo_rating: float | None = None
    global_rank: int | None = None
    leaderboard_tier: str | None = None
    region: RegionRef | None = None
    captain: CaptainRef | None = None
    roster_count: int = 0
    logo_url: str | None = None
    wins: int | None = None
    losses: int | None = None


@dataclass(frozen=True)
class EventRecord:
    """Event snapshot; status is derived on read, never stored."""

    id: str
    name: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    description: str | None = None
    location: str | None = None
    region: RegionRef | None = None
    registered_teams: int = 0
    max_teams: int | None = None


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Read naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def event_status(
    start_date: datetime | None,
    end_date: datetime | None,
    now: datetime | None = None,
) -> EventStatus:
    """Derive an event's status from its date window and the current time."""
    current = utc_now() if now is None else as_utc(now)
    if end_date is not None and as_utc(end_date) < current:
        return EventStatus.COMPLETED
    if start_date is not None and as_utc(start_date) <= current:
        return EventStatus.ONGOING
    return EventStatus.UPCOMING


def status_of(event: EventRecord, now: datetime | None = None) -> EventStatus:
    return event_status(event.start_date, event.end_date, now)


def win_percentage(team: TeamRecord) -> float:
    """Share of decided games won, as a percentage; 0 when no games were played."""
    wins = team.wins or 0
    losses = team.losses or 0
    games = wins + losses
    if games <= 0:
        return 0.0
    return (wins / games) * 100.0


def display_value(value: object, *, digits: int | None = None) -> str:
    """Render a nullable value for display, keeping missing distinct from zero."""
    if value is None:
        return NOT_AVAILABLE
    if digits is not None and isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.{digits}f}"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


__all__ = [
    "CaptainRef",
    "EventRecord",
    "NOT_AVAILABLE",
    "PlayerRecord",
    "PlayerStats",
    "RegionRef",
    "TeamRecord",
    "TeamRef",
    "as_utc",
    "display_value",
    "event_status",
    "status_of",
    "utc_now",
    "win_percentage",
]

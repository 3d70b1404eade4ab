"""Shared enums for leaderboard views."""

from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    """Which record collection a view is listing."""

    PLAYER = "player"
    TEAM = "team"
    EVENT = "event"


class FieldKind(str, Enum):
    """How a field is compared when sorting."""

    NUMERIC = "numeric"
    TEXT = "text"
    RELATION = "relation"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class Position(str, Enum):
    """On-court positions a player can be listed at."""

    PG = "PG"
    SG = "SG"
    SF = "SF"
    PF = "PF"
    C = "C"

    @property
    def label(self) -> str:
        return _POSITION_LABELS[self]


_POSITION_LABELS = {
    Position.PG: "Point Guard",
    Position.SG: "Shooting Guard",
    Position.SF: "Small Forward",
    Position.PF: "Power Forward",
    Position.C: "Center",
}


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


__all__ = ["EntityKind", "EventStatus", "FieldKind", "Position", "SortDirection"]

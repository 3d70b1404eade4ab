"""Leaderboard domain modules."""

from domain.common import EventRecord, PlayerRecord, TeamRecord
from domain.pipeline import FilterCriteria, PageResult, ViewState, run_pipeline
from domain.protocol import EntityKind, EventStatus, FieldKind, Position, SortDirection

__all__ = [
    "EntityKind",
    "EventRecord",
    "EventStatus",
    "FieldKind",
    "FilterCriteria",
    "PageResult",
    "PlayerRecord",
    "Position",
    "SortDirection",
    "TeamRecord",
    "ViewState",
    "run_pipeline",
]

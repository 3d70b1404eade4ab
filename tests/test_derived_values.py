"""Tests for values derived from records on read."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from domain.common import (
    NOT_AVAILABLE,
    EventRecord,
    TeamRecord,
    display_value,
    event_status,
    status_of,
    win_percentage,
)
from domain.protocol import EventStatus, Position
from domain.views import build_event_schema

NOW = datetime(2026, 5, 10, 12, 0, 0, tzinfo=UTC)


def test_event_started_yesterday_without_end_is_ongoing() -> None:
    assert event_status(NOW - timedelta(days=1), None, NOW) is EventStatus.ONGOING


def test_event_entirely_in_the_past_is_completed() -> None:
    status = event_status(NOW - timedelta(days=5), NOW - timedelta(days=2), NOW)
    assert status is EventStatus.COMPLETED


def test_event_starting_in_the_future_is_upcoming() -> None:
    assert event_status(NOW + timedelta(days=3), None, NOW) is EventStatus.UPCOMING


def test_event_without_start_date_is_upcoming() -> None:
    assert event_status(None, None, NOW) is EventStatus.UPCOMING


def test_event_window_boundaries() -> None:
    assert event_status(NOW, NOW, NOW) is EventStatus.ONGOING
    assert event_status(NOW - timedelta(days=1), NOW + timedelta(days=1), NOW) is EventStatus.ONGOING


def test_status_is_recomputed_against_the_given_clock() -> None:
    event = EventRecord(
        id="e1",
        name="Finals",
        start_date=datetime(2026, 6, 1, tzinfo=UTC),
        end_date=datetime(2026, 6, 2, tzinfo=UTC),
    )
    assert status_of(event, NOW) is EventStatus.UPCOMING
    assert status_of(event, datetime(2026, 6, 1, 12, tzinfo=UTC)) is EventStatus.ONGOING
    assert status_of(event, datetime(2026, 7, 1, tzinfo=UTC)) is EventStatus.COMPLETED


def test_event_schema_filters_on_derived_status() -> None:
    events = [
        EventRecord(
            id="past",
            name="Past",
            start_date=NOW - timedelta(days=9),
            end_date=NOW - timedelta(days=8),
        ),
        EventRecord(id="live", name="Live", start_date=NOW - timedelta(hours=2)),
        EventRecord(id="soon", name="Soon", start_date=NOW + timedelta(days=2)),
    ]
    schema = build_event_schema(NOW)
    status = schema.field("status")
    assert [status.getter(event) for event in events] == ["completed", "ongoing", "upcoming"]


def test_win_percentage() -> None:
    assert win_percentage(TeamRecord(id="t", name="T", wins=3, losses=1)) == pytest.approx(75.0)
    assert win_percentage(TeamRecord(id="t", name="T", wins=0, losses=0)) == 0.0
    assert win_percentage(TeamRecord(id="t", name="T")) == 0.0


def test_display_value_keeps_missing_distinct_from_zero() -> None:
    assert display_value(None) == NOT_AVAILABLE
    assert display_value(0) == "0"
    assert display_value(0.0, digits=1) == "0.0"
    assert display_value(12.345, digits=2) == "12.35"
    assert display_value(Position.SF) == "SF"
    assert display_value(datetime(2026, 1, 2, 3, 4, tzinfo=UTC)) == "2026-01-02"


def test_position_labels() -> None:
    assert Position.PG.label == "Point Guard"
    assert Position.C.label == "Center"


def test_naive_dates_are_compared_as_utc() -> None:
    naive_now = NOW.replace(tzinfo=None)
    assert event_status(naive_now - timedelta(days=1), None, NOW) is EventStatus.ONGOING
    assert event_status(NOW - timedelta(days=3), naive_now - timedelta(days=1), NOW) is (
        EventStatus.COMPLETED
    )
    assert event_status(NOW + timedelta(hours=1), None, naive_now) is EventStatus.UPCOMING


def test_naive_start_against_the_current_time() -> None:
    started = datetime.now(UTC).replace(tzinfo=None) - timedelta(days=1)
    assert event_status(started, None) is EventStatus.ONGOING

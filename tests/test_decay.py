"""Tests for ranking-point decay."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

import pytest

from domain.errors import ConfigurationError
from domain.ratings.decay import (
    DEFAULT_DECAY_TABLE,
    DecayRule,
    DecayTable,
    RPAward,
    RPSource,
    current_rp,
    days_between,
    decay_table_from_mapping,
    decayed_value,
)
from domain.ratings.reference import cap_event_rp, max_rp_for


def test_linear_decay_midpoint() -> None:
    table = DecayTable([DecayRule("event", 30, 90)])
    assert decayed_value(100.0, "event", 60, table) == pytest.approx(50.0)


def test_full_value_until_decay_start_and_zero_after_full_decay() -> None:
    assert decayed_value(100.0, RPSource.EVENT, 0) == pytest.approx(100.0)
    assert decayed_value(100.0, RPSource.EVENT, 30) == pytest.approx(100.0)
    assert decayed_value(100.0, RPSource.EVENT, 90) == pytest.approx(0.0)
    assert decayed_value(100.0, RPSource.EVENT, 400) == pytest.approx(0.0)


@pytest.mark.parametrize("source", list(RPSource))
def test_decay_is_non_increasing_over_time(source: RPSource) -> None:
    values = [decayed_value(500.0, source, day) for day in range(0, 200, 3)]
    assert all(later <= earlier for earlier, later in zip(values, values[1:]))


def test_default_table_thresholds() -> None:
    expected = {
        "event": (30, 90),
        "franchise_weekly": (60, 120),
        "franchise_placement": (90, 150),
        "upa_college": (60, 120),
        "verified_league": (30, 60),
    }
    for source, (start, full) in expected.items():
        rule = DEFAULT_DECAY_TABLE.rule_for(source)
        assert (rule.decay_start_days, rule.full_decay_days) == (start, full)


def test_source_lookup_is_case_insensitive() -> None:
    assert "Franchise_Weekly" in DEFAULT_DECAY_TABLE
    assert decayed_value(80.0, " EVENT ", 60) == pytest.approx(40.0)


def test_unknown_source_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="No decay rule for RP source 'scrims'"):
        decayed_value(100.0, "scrims", 10)


def test_decay_rule_validation() -> None:
    with pytest.raises(ConfigurationError, match="must be greater than decay_start_days"):
        DecayRule("event", 90, 30)
    with pytest.raises(ConfigurationError, match="decay_start_days must be >= 0"):
        DecayRule("event", -1, 30)


def test_decay_table_rejects_duplicate_sources() -> None:
    with pytest.raises(ConfigurationError, match="Duplicate decay rule"):
        DecayTable([DecayRule("event", 30, 90), DecayRule("EVENT", 10, 20)])


def test_decay_table_from_mapping() -> None:
    table = decay_table_from_mapping(
        {"event": {"decay_start_days": 10, "full_decay_days": 20, "label": "Event"}}
    )
    assert len(table) == 1
    assert table.rule_for("event").label == "Event"
    assert table.as_config_json() == {
        "event": {"decay_start_days": 10.0, "full_decay_days": 20.0}
    }

    with pytest.raises(ConfigurationError, match="missing full_decay_days"):
        decay_table_from_mapping({"event": {"decay_start_days": 10}})


def test_current_rp_sums_decayed_awards() -> None:
    now = datetime(2026, 5, 1, tzinfo=UTC)
    awards = [
        RPAward("event", 1000.0, now - timedelta(days=60)),
        RPAward("franchise_weekly", 200.0, now - timedelta(days=10)),
        RPAward("verified_league", 300.0, now - timedelta(days=90)),
    ]
    assert days_between(awards[0].earned_at, now) == pytest.approx(60.0)
    assert current_rp(awards, now) == pytest.approx(500.0 + 200.0 + 0.0)


def test_event_rp_is_capped_by_tier() -> None:
    assert max_rp_for("t1") == 1000
    assert cap_event_rp("T3", 450.0) == pytest.approx(300.0)
    assert cap_event_rp("T5", -10.0) == pytest.approx(0.0)
    with pytest.raises(ConfigurationError, match="Unknown event tier 'T9'"):
        max_rp_for("T9")


def test_naive_datetimes_are_read_as_utc() -> None:
    now = datetime(2026, 5, 1, tzinfo=UTC)
    earned_at = (now - timedelta(days=60)).replace(tzinfo=None)
    assert days_between(earned_at, now) == pytest.approx(60.0)
    assert current_rp([RPAward("event", 100.0, earned_at)], now.replace(tzinfo=None)) == (
        pytest.approx(50.0)
    )


def test_naive_award_against_the_current_time() -> None:
    earned_at = datetime.now(UTC).replace(tzinfo=None) - timedelta(days=60)
    assert current_rp([RPAward("event", 100.0, earned_at)]) == pytest.approx(50.0, abs=0.01)


@pytest.mark.parametrize("start, full", [(math.nan, 30), (10, math.nan), (10, math.inf)])
def test_decay_rule_rejects_non_finite_bounds(start: float, full: float) -> None:
    with pytest.raises(ConfigurationError, match="must be finite"):
        DecayRule("event", start, full)


def test_decay_table_from_mapping_rejects_non_numeric_days() -> None:
    with pytest.raises(ConfigurationError, match="must be numbers"):
        decay_table_from_mapping({"event": {"decay_start_days": "soon", "full_decay_days": 20}})

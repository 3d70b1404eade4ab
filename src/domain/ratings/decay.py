"""Ranking-point decay by RP source."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from domain.common import as_utc, utc_now
from domain.errors import ConfigurationError

SECONDS_PER_DAY = 86_400.0


class RPSource(str, Enum):
    """Where a block of ranking points was earned."""

    EVENT = "event"
    FRANCHISE_WEEKLY = "franchise_weekly"
    FRANCHISE_PLACEMENT = "franchise_placement"
    UPA_COLLEGE = "upa_college"
    VERIFIED_LEAGUE = "verified_league"


@dataclass(frozen=True)
class DecayRule:
    """Points keep full value until ``decay_start_days``, then fade to zero linearly."""

    source: str
    decay_start_days: float
    full_decay_days: float
    label: str = ""

    def __post_init__(self) -> None:
        if not (math.isfinite(self.decay_start_days) and math.isfinite(self.full_decay_days)):
            raise ConfigurationError(
                f"Decay rule '{self.source}': decay_start_days and full_decay_days must be finite"
            )
        if self.decay_start_days < 0:
            raise ConfigurationError(
                f"Decay rule '{self.source}': decay_start_days must be >= 0"
            )
        if self.full_decay_days <= self.decay_start_days:
            raise ConfigurationError(
                f"Decay rule '{self.source}': full_decay_days ({self.full_decay_days}) must be "
                f"greater than decay_start_days ({self.decay_start_days})"
            )

    def factor(self, days_elapsed: float) -> float:
        """Fraction of the original points still counted after ``days_elapsed``."""
        if days_elapsed <= self.decay_start_days:
            return 1.0
        if days_elapsed >= self.full_decay_days:
            return 0.0
        return (self.full_decay_days - days_elapsed) / (
            self.full_decay_days - self.decay_start_days
        )


class DecayTable:
    """Decay rules keyed by RP source."""

    def __init__(self, rules: Iterable[DecayRule]) -> None:
        self._rules: dict[str, DecayRule] = {}
        for rule in rules:
            key = _source_key(rule.source)
            if key in self._rules:
                raise ConfigurationError(f"Duplicate decay rule for source '{key}'")
            self._rules[key] = rule
        if not self._rules:
            raise ConfigurationError("Decay table has no rules")

    def rule_for(self, source: RPSource | str) -> DecayRule:
        key = _source_key(source)
        try:
            return self._rules[key]
        except KeyError as exc:
            available = ", ".join(sorted(self._rules))
            raise ConfigurationError(
                f"No decay rule for RP source '{key}'. Available: {available}"
            ) from exc

    def rules(self) -> list[DecayRule]:
        return list(self._rules.values())

    def sources(self) -> list[str]:
        return list(self._rules)

    def as_config_json(self) -> dict[str, dict[str, float]]:
        return {
            key: {
                "decay_start_days": rule.decay_start_days,
                "full_decay_days": rule.full_decay_days,
            }
            for key, rule in self._rules.items()
        }

    def __contains__(self, source: object) -> bool:
        if not isinstance(source, (str, RPSource)):
            return False
        return _source_key(source) in self._rules

    def __len__(self) -> int:
        return len(self._rules)


def _source_key(source: RPSource | str) -> str:
    if isinstance(source, RPSource):
        return source.value
    return str(source).strip().lower()


DEFAULT_DECAY_TABLE = DecayTable(
    [
        DecayRule(RPSource.EVENT.value, 30, 90, "Event RP (LAN, Opens)"),
        DecayRule(RPSource.FRANCHISE_WEEKLY.value, 60, 120, "Franchise Weekly RP"),
        DecayRule(RPSource.FRANCHISE_PLACEMENT.value, 90, 150, "Franchise Placement RP"),
        DecayRule(RPSource.UPA_COLLEGE.value, 60, 120, "UPA College RP"),
        DecayRule(RPSource.VERIFIED_LEAGUE.value, 30, 60, "Verified League RP"),
    ]
)


def decayed_value(
    base_rp: float,
    source: RPSource | str,
    days_elapsed: float,
    table: DecayTable = DEFAULT_DECAY_TABLE,
) -> float:
    """Value of ``base_rp`` points from ``source`` after ``days_elapsed`` days."""
    return base_rp * table.rule_for(source).factor(days_elapsed)


def days_between(earned_at: datetime, now: datetime | None = None) -> float:
    """Elapsed days (fractional) between ``earned_at`` and ``now``."""
    current = utc_now() if now is None else as_utc(now)
    return (current - as_utc(earned_at)).total_seconds() / SECONDS_PER_DAY


@dataclass(frozen=True)
class RPAward:
    """A block of ranking points earned at a point in time."""

    source: str
    base_rp: float
    earned_at: datetime


def current_rp(
    awards: Iterable[RPAward],
    now: datetime | None = None,
    table: DecayTable = DEFAULT_DECAY_TABLE,
) -> float:
    """Sum of all awards after applying decay as of ``now``."""
    current = utc_now() if now is None else as_utc(now)
    return sum(
        decayed_value(award.base_rp, award.source, days_between(award.earned_at, current), table)
        for award in awards
    )


def decay_table_from_mapping(raw: Mapping[str, Mapping[str, Any]]) -> DecayTable:
    """Build a table from ``{source: {decay_start_days, full_decay_days, label}}``."""
    rules = []
    for source, values in raw.items():
        try:
            start = float(values["decay_start_days"])
            full = float(values["full_decay_days"])
        except KeyError as exc:
            raise ConfigurationError(
                f"Decay rule '{source}' is missing {exc.args[0]}"
            ) from exc
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Decay rule '{source}': decay_start_days and full_decay_days must be numbers"
            ) from exc
        rules.append(DecayRule(source, start, full, str(values.get("label", ""))))
    return DecayTable(rules)


__all__ = [
    "DEFAULT_DECAY_TABLE",
    "DecayRule",
    "DecayTable",
    "RPAward",
    "RPSource",
    "current_rp",
    "days_between",
    "decay_table_from_mapping",
    "decayed_value",
]

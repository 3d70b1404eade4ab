"""Threshold tables that bucket a score or a leaderboard rank into a tier."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from domain.errors import ConfigurationError

V = TypeVar("V")


class TierBasis(str, Enum):
    """What a tier table is keyed on."""

    SCORE = "score"
    RANK = "rank"


@dataclass(frozen=True)
class TierBand(Generic[V]):
    """One band of a tier table.

    For score tables ``bound`` is the inclusive lower bound; for rank tables it
    is the inclusive worst (largest) rank. The catch-all band uses -inf / +inf.
    """

    bound: float
    value: V
    name: str = ""
    description: str = ""
    emoji: str = ""

    @property
    def is_catch_all(self) -> bool:
        return math.isinf(self.bound)


@dataclass(frozen=True)
class TierTable(Generic[V]):
    """Ordered bands ending in a catch-all; validated on construction."""

    name: str
    basis: TierBasis
    bands: tuple[TierBand[V], ...]

    def __post_init__(self) -> None:
        if not self.bands:
            raise ConfigurationError(f"Tier table '{self.name}' has no bands")

        catch_all = math.inf if self.basis is TierBasis.RANK else -math.inf
        if self.bands[-1].bound != catch_all:
            raise ConfigurationError(
                f"Tier table '{self.name}' must end with a catch-all band (bound={catch_all})"
            )

        bounds = [band.bound for band in self.bands]
        for previous, current in zip(bounds, bounds[1:]):
            ordered = current > previous if self.basis is TierBasis.RANK else current < previous
            if not ordered:
                direction = "ascending" if self.basis is TierBasis.RANK else "descending"
                raise ConfigurationError(
                    f"Tier table '{self.name}' bounds must be strictly {direction}: {bounds}"
                )

    @property
    def catch_all(self) -> TierBand[V]:
        return self.bands[-1]

    def values(self) -> list[V]:
        return [band.value for band in self.bands]


def score_table(name: str, bands: Sequence[TierBand[V]]) -> TierTable[V]:
    return TierTable(name=name, basis=TierBasis.SCORE, bands=tuple(bands))


def rank_table(name: str, bands: Sequence[TierBand[V]]) -> TierTable[V]:
    return TierTable(name=name, basis=TierBasis.RANK, bands=tuple(bands))


def _unclassifiable(value: float, basis: TierBasis) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    return basis is TierBasis.RANK and value < 1


def classify_band(value: float | None, table: TierTable[V]) -> TierBand[V]:
    """Return the band ``value`` falls into; missing values land in the catch-all."""
    if value is None or _unclassifiable(value, table.basis):
        return table.catch_all
    for band in table.bands:
        if table.basis is TierBasis.RANK and value <= band.bound:
            return band
        if table.basis is TierBasis.SCORE and value >= band.bound:
            return band
    return table.catch_all


def classify(value: float | None, table: TierTable[V]) -> V:
    """Return the tier value (label or multiplier) for a score or 1-based rank."""
    return classify_band(value, table).value


__all__ = [
    "TierBand",
    "TierBasis",
    "TierTable",
    "classify",
    "classify_band",
    "rank_table",
    "score_table",
]

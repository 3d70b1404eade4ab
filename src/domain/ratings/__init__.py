"""Ranking reference tables, tier classification, RP decay and salary."""

from domain.ratings.decay import DecayRule, DecayTable, RPSource, decayed_value
from domain.ratings.tiers import TierBand, TierBasis, TierTable, classify

__all__ = [
    "DecayRule",
    "DecayTable",
    "RPSource",
    "TierBand",
    "TierBasis",
    "TierTable",
    "classify",
    "decayed_value",
]

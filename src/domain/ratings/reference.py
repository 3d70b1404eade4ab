"""Published ranking reference tables: RP categories, event tiers and tier bands."""

from __future__ import annotations

import math
from dataclasses import dataclass

from domain.errors import ConfigurationError
from domain.ratings.decay import DEFAULT_DECAY_TABLE
from domain.ratings.tiers import TierBand, TierTable, rank_table, score_table


@dataclass(frozen=True)
class RPCategory:
    key: str
    title: str
    description: str
    details: str


@dataclass(frozen=True)
class EventTier:
    code: str
    description: str
    max_rp: int


RP_CATEGORIES: tuple[RPCategory, ...] = (
    RPCategory(
        key="event",
        title="Event RP",
        description="Earned through placements in LANs, tournaments, and qualifiers.",
        details="Max: 1000 RP per event",
    ),
    RPCategory(
        key="franchise",
        title="Franchise RP",
        description="Accumulated through weekly matches and season achievements.",
        details="Includes wins, top 10 victories, and clean sweeps",
    ),
    RPCategory(
        key="bonus",
        title="Bonus RP",
        description="Awarded for special achievements and performances.",
        details="Includes MVPs, undefeated runs, and clutch plays",
    ),
    RPCategory(
        key="verified_league",
        title="Verified League RP",
        description="Points from UPA College and other verified leagues.",
        details="Subject to seasonal caps",
    ),
)

EVENT_TIERS: tuple[EventTier, ...] = (
    EventTier("T1", "Major LANs (Worlds, UPA Live Events)", 1000),
    EventTier("T2", "Monthly Franchise Events, UPA College Finals", 600),
    EventTier("T3", "Franchise Qualifiers, Redraft, UPA College Regular", 300),
    EventTier("T4", "Invitationals, Showmatches, Non-UPA Verified Leagues", 150),
    EventTier("T5", "Local/Community Events, Unverified", 50),
)

LEADERBOARD_TIERS: TierTable[str] = rank_table(
    "leaderboard",
    [
        TierBand(4, "S-Tier", "Elite Competitors", "The absolute best teams in the world"),
        TierBand(12, "A-Tier", "Championship Contenders", "Teams capable of winning major events"),
        TierBand(30, "B-Tier", "Playoff Hopefuls", "Competitive teams with playoff potential"),
        TierBand(
            100, "C-Tier", "Developing Teams", "Teams building their competitive foundation"
        ),
        TierBand(math.inf, "Unranked", "New/Inactive", "New teams or inactive squads"),
    ],
)

# Canonical player tiers, as published with the team ranking rules.
PLAYER_TIERS: TierTable[str] = score_table(
    "ratings_info",
    [
        TierBand(100, "Tier S", "Hall of Fame", emoji="🐐"),
        TierBand(90, "Tier A", "Elite", emoji="🥇"),
        TierBand(80, "Tier B", "Pro", emoji="🥈"),
        TierBand(70, "Tier C", "Rising Star", emoji="🥉"),
        TierBand(-math.inf, "Tier D", "Unranked", emoji="🛠️"),
    ],
)

# Deprecated variant from the standalone player-rating page; kept for display compatibility.
PLAYER_TIERS_PLAYER_RATING_INFO: TierTable[str] = score_table(
    "player_rating_info",
    [
        TierBand(95, "Tier S", "Elite", emoji="🏆"),
        TierBand(85, "Tier A", "All-Star", emoji="⭐"),
        TierBand(75, "Tier B", "Starter", emoji="🏀"),
        TierBand(65, "Tier C", "Role Player", emoji="⛹️"),
        TierBand(-math.inf, "Tier D", "Development", emoji="📊"),
    ],
)

PLAYER_TIER_VARIANTS: dict[str, TierTable[str]] = {
    PLAYER_TIERS.name: PLAYER_TIERS,
    PLAYER_TIERS_PLAYER_RATING_INFO.name: PLAYER_TIERS_PLAYER_RATING_INFO,
}

SALARY_MULTIPLIERS: TierTable[float] = score_table(
    "salary_multiplier",
    [
        TierBand(90, 1.3),
        TierBand(80, 1.2),
        TierBand(70, 1.1),
        TierBand(-math.inf, 1.0),
    ],
)

DECAY_TABLE = DEFAULT_DECAY_TABLE


def event_tier(code: str) -> EventTier:
    normalized = code.strip().upper()
    for tier in EVENT_TIERS:
        if tier.code == normalized:
            return tier
    available = ", ".join(tier.code for tier in EVENT_TIERS)
    raise ConfigurationError(f"Unknown event tier '{code}'. Available: {available}")


def max_rp_for(code: str) -> int:
    """Largest RP a single event of tier ``code`` can award."""
    return event_tier(code).max_rp


def cap_event_rp(code: str, rp: float) -> float:
    """Clamp an event award to its tier's ceiling."""
    return min(max(rp, 0.0), float(max_rp_for(code)))


def player_tier_table(variant: str = PLAYER_TIERS.name) -> TierTable[str]:
    try:
        return PLAYER_TIER_VARIANTS[variant]
    except KeyError as exc:
        available = ", ".join(sorted(PLAYER_TIER_VARIANTS))
        raise ConfigurationError(
            f"Unknown player tier variant '{variant}'. Available: {available}"
        ) from exc


__all__ = [
    "DECAY_TABLE",
    "EVENT_TIERS",
    "EventTier",
    "LEADERBOARD_TIERS",
    "PLAYER_TIERS",
    "PLAYER_TIERS_PLAYER_RATING_INFO",
    "PLAYER_TIER_VARIANTS",
    "RPCategory",
    "RP_CATEGORIES",
    "SALARY_MULTIPLIERS",
    "cap_event_rp",
    "event_tier",
    "max_rp_for",
    "player_tier_table",
]

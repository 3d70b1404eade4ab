"""Franchise salary formulas.

Two modifier structures have been published for the same raw salary: a flat
multiplier per global-rating bracket, and additive percentage bonuses for
awards and team success. Neither is authoritative, so both are offered here
as alternatives the caller picks between.
"""

from __future__ import annotations

from dataclasses import dataclass

from domain.common import PlayerStats
from domain.errors import ConfigurationError
from domain.ratings.reference import SALARY_MULTIPLIERS
from domain.ratings.tiers import TierTable, classify

POINTS_WEIGHT = 2.5
ASSISTS_WEIGHT = 1.8
STEALS_WEIGHT = 3.0
TURNOVERS_WEIGHT = 2.0

INACTIVITY_DECAY_PER_MONTH = 0.02


@dataclass(frozen=True)
class SalaryAwards:
    all_star_selections: int = 0
    mvp_awards: int = 0
    all_defensive_selections: int = 0
    team_success: float = 0.0


@dataclass(frozen=True)
class SalaryModifiers:
    """Percentage bonuses for the award-based salary structure."""

    all_star_bonus: float = 0.10
    mvp_bonus: float = 0.15
    all_defensive_bonus: float = 0.05
    team_success_min: float = -0.05
    team_success_max: float = 0.05
    salary_floor: float | None = None
    salary_cap: float | None = None

    def __post_init__(self) -> None:
        if self.team_success_min > self.team_success_max:
            raise ConfigurationError("team_success_min must be <= team_success_max")
        if (
            self.salary_floor is not None
            and self.salary_cap is not None
            and self.salary_floor > self.salary_cap
        ):
            raise ConfigurationError("salary_floor must be <= salary_cap")


def raw_salary(stats: PlayerStats | None) -> float:
    """(PPG x 2.5) + (APG x 1.8) + (SPG x 3.0) - (TO x 2.0); missing stats count as 0."""
    if stats is None:
        return 0.0
    return (
        (stats.points_per_game or 0.0) * POINTS_WEIGHT
        + (stats.assists_per_game or 0.0) * ASSISTS_WEIGHT
        + (stats.steals_per_game or 0.0) * STEALS_WEIGHT
        - (stats.turnovers_per_game or 0.0) * TURNOVERS_WEIGHT
    )


def salary_multiplier(
    global_rating: float | None,
    table: TierTable[float] = SALARY_MULTIPLIERS,
) -> float:
    return classify(global_rating, table)


def bracket_salary(
    stats: PlayerStats | None,
    global_rating: float | None,
    table: TierTable[float] = SALARY_MULTIPLIERS,
) -> float:
    """Raw salary scaled by the multiplier for the player's rating bracket."""
    return raw_salary(stats) * salary_multiplier(global_rating, table)


def award_salary(
    stats: PlayerStats | None,
    awards: SalaryAwards,
    modifiers: SalaryModifiers = SalaryModifiers(),
) -> float:
    """Raw salary scaled by additive award and team-success bonuses."""
    team_success = min(
        max(awards.team_success, modifiers.team_success_min),
        modifiers.team_success_max,
    )
    bonus = (
        awards.all_star_selections * modifiers.all_star_bonus
        + awards.mvp_awards * modifiers.mvp_bonus
        + awards.all_defensive_selections * modifiers.all_defensive_bonus
        + team_success
    )
    salary = raw_salary(stats) * (1.0 + bonus)
    if modifiers.salary_floor is not None:
        salary = max(salary, modifiers.salary_floor)
    if modifiers.salary_cap is not None:
        salary = min(salary, modifiers.salary_cap)
    return salary


def format_salary(value: float) -> str:
    return f"${value:,.2f}"


def apply_inactivity_decay(
    rating: float,
    months_inactive: int,
    rate: float = INACTIVITY_DECAY_PER_MONTH,
) -> float:
    """Reduce a player rating by ``rate`` per full month of inactivity, compounding."""
    if months_inactive <= 0:
        return rating
    return rating * (1.0 - rate) ** months_inactive


__all__ = [
    "SalaryAwards",
    "SalaryModifiers",
    "apply_inactivity_decay",
    "award_salary",
    "bracket_salary",
    "format_salary",
    "raw_salary",
    "salary_multiplier",
]

"""Season award candidates ranked by weighted per-game stats."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from domain.common import PlayerRecord
from domain.errors import InvalidArgumentError
from domain.pipeline import FieldSpec, RecordSchema, sort_records
from domain.protocol import EntityKind, FieldKind, SortDirection

DEFAULT_CANDIDATE_LIMIT = 5

# Read from the player record rather than the season stats.
OVERALL_RATING = "overall_rating"


class Award(str, Enum):
    OMVP = "omvp"
    DMVP = "dmvp"
    ROOKIE = "rookie"


@dataclass(frozen=True)
class AwardFormula:
    """Weighted sum of stats used to rank candidates for one award.

    Missing stats count as zero, so players without a stat line still appear
    at the bottom of the list rather than dropping out.
    """

    award: Award
    title: str
    weights: tuple[tuple[str, float], ...]
    rookies_only: bool = False

    def rating(self, player: PlayerRecord) -> float:
        return sum(weight * _stat(player, name) for name, weight in self.weights)

    def is_eligible(self, player: PlayerRecord) -> bool:
        return player.is_rookie or not self.rookies_only


@dataclass(frozen=True)
class AwardCandidate:
    player: PlayerRecord
    rating: float


AWARD_FORMULAS: dict[Award, AwardFormula] = {
    Award.OMVP: AwardFormula(
        Award.OMVP,
        "Offensive MVP",
        (
            ("points_per_game", 0.4),
            ("assists_per_game", 0.3),
            ("field_goal_percentage", 0.2),
            ("three_point_percentage", 0.1),
        ),
    ),
    Award.DMVP: AwardFormula(
        Award.DMVP,
        "Defensive MVP",
        (
            ("steals_per_game", 0.4),
            ("blocks_per_game", 0.3),
            ("rebounds_per_game", 0.3),
        ),
    ),
    Award.ROOKIE: AwardFormula(
        Award.ROOKIE,
        "Rookie of the Year",
        (
            ("points_per_game", 0.3),
            ("assists_per_game", 0.2),
            ("steals_per_game", 0.2),
            ("field_goal_percentage", 0.15),
            (OVERALL_RATING, 0.15),
        ),
        rookies_only=True,
    ),
}

CANDIDATE_SCHEMA = RecordSchema(
    entity=EntityKind.PLAYER,
    fields=(
        FieldSpec("rating", FieldKind.NUMERIC, lambda c: c.rating, SortDirection.DESC),
    ),
    default_sort_field="rating",
)


def _stat(player: PlayerRecord, name: str) -> float:
    if name == OVERALL_RATING:
        value = player.performance_score
    else:
        value = None if player.stats is None else getattr(player.stats, name)
    return float(value or 0)


def award_formula(award: Award | str) -> AwardFormula:
    if isinstance(award, Award):
        return AWARD_FORMULAS[award]
    try:
        return AWARD_FORMULAS[Award(str(award).strip().lower())]
    except ValueError as exc:
        available = ", ".join(item.value for item in Award)
        raise InvalidArgumentError(
            f"Unknown award '{award}'. Available: {available}"
        ) from exc


def award_candidates(
    players: Iterable[PlayerRecord],
    award: Award | str,
    *,
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> list[AwardCandidate]:
    """Top ``limit`` eligible players by award rating; ties keep input order."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}")

    formula = award_formula(award)
    candidates = [
        AwardCandidate(player=player, rating=formula.rating(player))
        for player in players
        if formula.is_eligible(player)
    ]
    ordered = sort_records(candidates, "rating", SortDirection.DESC, CANDIDATE_SCHEMA)
    return ordered[:limit]


__all__ = [
    "AWARD_FORMULAS",
    "Award",
    "AwardCandidate",
    "AwardFormula",
    "DEFAULT_CANDIDATE_LIMIT",
    "award_candidates",
    "award_formula",
]

"""Load ranking reference tables from TOML files."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from domain.config_base import BaseConfig, load_config_file, load_configs
from domain.errors import ConfigurationError
from domain.ratings.decay import DEFAULT_DECAY_TABLE, DecayTable, decay_table_from_mapping
from domain.ratings.reference import (
    EVENT_TIERS,
    LEADERBOARD_TIERS,
    PLAYER_TIERS,
    SALARY_MULTIPLIERS,
    EventTier,
)
from domain.ratings.tiers import TierBand, TierTable, rank_table, score_table

ROOT_DIR = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ranking"

V = TypeVar("V")


@dataclass(frozen=True)
class RankingConfig(BaseConfig):
    """One complete set of ranking reference tables."""

    leaderboard_tiers: TierTable[str]
    player_tiers: TierTable[str]
    salary_multipliers: TierTable[float]
    decay_table: DecayTable
    event_tiers: tuple[EventTier, ...]

    def as_config_json(self) -> dict[str, Any]:
        return {
            "leaderboard_tiers": [_band_json(band) for band in self.leaderboard_tiers.bands],
            "player_tier_variant": self.player_tiers.name,
            "player_tiers": [_band_json(band) for band in self.player_tiers.bands],
            "salary_multipliers": [_band_json(band) for band in self.salary_multipliers.bands],
            "decay": self.decay_table.as_config_json(),
            "event_tiers": {tier.code: tier.max_rp for tier in self.event_tiers},
        }


def _band_json(band: TierBand[Any]) -> dict[str, Any]:
    return {
        "bound": None if band.is_catch_all else band.bound,
        "value": band.value,
    }


def default_ranking_config() -> RankingConfig:
    """The built-in reference tables, without reading any file."""
    return RankingConfig(
        name="builtin",
        description="Built-in ranking reference tables",
        file_path=None,
        leaderboard_tiers=LEADERBOARD_TIERS,
        player_tiers=PLAYER_TIERS,
        salary_multipliers=SALARY_MULTIPLIERS,
        decay_table=DEFAULT_DECAY_TABLE,
        event_tiers=EVENT_TIERS,
    )


def load_ranking_configs(config_dir: Path = DEFAULT_CONFIG_DIR) -> list[RankingConfig]:
    """Load and validate all ranking TOML config files in a directory."""
    return load_configs(
        config_dir,
        _parse_ranking_config,
        duplicate_name_label="ranking config",
    )


def load_ranking_config(file_path: Path) -> RankingConfig:
    return load_config_file(file_path, _parse_ranking_config)


def find_ranking_config(name: str, config_dir: Path = DEFAULT_CONFIG_DIR) -> RankingConfig:
    """Pick one config by its ``[system].name``."""
    configs = load_ranking_configs(config_dir)
    for config in configs:
        if config.name == name:
            return config
    available = ", ".join(config.name for config in configs)
    raise ConfigurationError(
        f"No ranking config named '{name}' in {config_dir}. Available: {available}"
    )


def _parse_ranking_config(raw: dict[str, Any], file_path: Path) -> RankingConfig:
    system_raw = raw.get("system", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ConfigurationError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    try:
        leaderboard_tiers = _parse_tier_table(
            raw.get("leaderboard_tiers"),
            default=LEADERBOARD_TIERS,
            build=rank_table,
            table_name="leaderboard",
            bound_key="max_rank",
            value=lambda entry: str(entry["label"]),
        )
        player_tiers = _parse_tier_table(
            raw.get("player_tiers"),
            default=PLAYER_TIERS,
            build=score_table,
            table_name=str(system_raw.get("player_tier_variant", name)),
            bound_key="min_rating",
            value=lambda entry: str(entry["label"]),
        )
        salary_multipliers = _parse_tier_table(
            raw.get("salary_multipliers"),
            default=SALARY_MULTIPLIERS,
            build=score_table,
            table_name="salary_multiplier",
            bound_key="min_rating",
            value=lambda entry: float(entry["multiplier"]),
        )
        decay_raw = raw.get("decay")
        decay_table = (
            DEFAULT_DECAY_TABLE if decay_raw is None else decay_table_from_mapping(decay_raw)
        )
        event_tiers = _parse_event_tiers(raw.get("event_tiers"))
    except ConfigurationError as exc:
        raise ConfigurationError(f"{file_path}: {exc}") from exc
    except KeyError as exc:
        raise ConfigurationError(f"{file_path}: missing required key {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{file_path}: invalid value: {exc}") from exc

    return RankingConfig(
        name=name,
        description=description,
        file_path=file_path,
        leaderboard_tiers=leaderboard_tiers,
        player_tiers=player_tiers,
        salary_multipliers=salary_multipliers,
        decay_table=decay_table,
        event_tiers=event_tiers,
    )


def _parse_tier_table(
    entries: list[dict[str, Any]] | None,
    *,
    default: TierTable[V],
    build: Callable[[str, list[TierBand[V]]], TierTable[V]],
    table_name: str,
    bound_key: str,
    value: Callable[[dict[str, Any]], V],
) -> TierTable[V]:
    if entries is None:
        return default

    catch_all = math.inf if build is rank_table else -math.inf
    bands = [
        TierBand(
            bound=float(entry[bound_key]) if bound_key in entry else catch_all,
            value=value(entry),
            name=str(entry.get("name", "")),
            description=str(entry.get("description", "")),
            emoji=str(entry.get("emoji", "")),
        )
        for entry in entries
    ]
    return build(table_name, bands)


def _parse_event_tiers(entries: list[dict[str, Any]] | None) -> tuple[EventTier, ...]:
    if entries is None:
        return EVENT_TIERS

    tiers = tuple(
        EventTier(
            code=str(entry["code"]).strip().upper(),
            description=str(entry.get("description", "")),
            max_rp=int(entry["max_rp"]),
        )
        for entry in entries
    )
    codes = [tier.code for tier in tiers]
    if len(codes) != len(set(codes)):
        raise ConfigurationError(f"Duplicate event tier codes: {codes}")
    for tier in tiers:
        if tier.max_rp <= 0:
            raise ConfigurationError(f"Event tier {tier.code}: max_rp must be > 0")
    return tiers


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "RankingConfig",
    "default_ranking_config",
    "find_ranking_config",
    "load_ranking_config",
    "load_ranking_configs",
]

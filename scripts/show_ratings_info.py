#!/usr/bin/env python3
"""Print ranking reference tables and run tier, decay and salary calculations."""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.common import PlayerStats
from domain.errors import LeaderboardError
from domain.ratings.config import (
    DEFAULT_CONFIG_DIR,
    RankingConfig,
    default_ranking_config,
    find_ranking_config,
)
from domain.ratings.decay import decayed_value
from domain.ratings.reference import RP_CATEGORIES
from domain.ratings.salary import (
    SalaryAwards,
    award_salary,
    bracket_salary,
    format_salary,
    raw_salary,
    salary_multiplier,
)
from domain.ratings.tiers import TierTable, classify_band


class TableKind(str, Enum):
    LEADERBOARD = "leaderboard"
    PLAYER = "player"
    SALARY = "salary"


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Inspect ranking tiers, RP decay and salary formulas.",
)

ConfigNameOption = Annotated[
    str | None,
    typer.Option(
        "--config-name",
        help="Ranking config [system].name to use. Defaults to the built-in tables.",
    ),
]
ConfigDirOption = Annotated[
    Path,
    typer.Option("--config-dir", help="Directory of ranking TOML configs."),
]


def _load_config(config_name: str | None, config_dir: Path) -> RankingConfig:
    if config_name is None:
        return default_ranking_config()
    try:
        return find_ranking_config(config_name, config_dir)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-name") from exc


def _table_for(config: RankingConfig, kind: TableKind) -> TierTable[Any]:
    if kind is TableKind.LEADERBOARD:
        return config.leaderboard_tiers
    if kind is TableKind.PLAYER:
        return config.player_tiers
    return config.salary_multipliers


def _format_bound(bound: float, *, rank: bool) -> str:
    if rank:
        return "rest" if bound == float("inf") else f"<= #{bound:g}"
    return "rest" if bound == float("-inf") else f">= {bound:g}"


def _echo_tier_table(title: str, table: TierTable[Any], *, rank: bool) -> None:
    typer.echo(f"{title} ({table.name})")
    for band in table.bands:
        label = " ".join(part for part in (band.emoji, str(band.value), band.name) if part)
        typer.echo(f"  {_format_bound(band.bound, rank=rank):<10} {label}")


@app.command()
def tables(
    config_name: ConfigNameOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
) -> None:
    """Print every reference table of the selected ranking config."""
    config = _load_config(config_name, config_dir)
    typer.echo(f"config={config.name} file={config.file_path or 'builtin'}")

    typer.echo("RP categories")
    for category in RP_CATEGORIES:
        typer.echo(f"  {category.title:<20} {category.description} ({category.details})")

    typer.echo("Event tiers")
    for tier in config.event_tiers:
        typer.echo(f"  {tier.code:<3} max_rp={tier.max_rp:5d} {tier.description}")

    _echo_tier_table("Leaderboard tiers", config.leaderboard_tiers, rank=True)
    _echo_tier_table("Player tiers", config.player_tiers, rank=False)
    _echo_tier_table("Salary multipliers", config.salary_multipliers, rank=False)

    typer.echo("RP decay")
    for rule in config.decay_table.rules():
        typer.echo(
            f"  {rule.source:<20} full value until day {rule.decay_start_days:g}, "
            f"zero from day {rule.full_decay_days:g}"
        )


@app.command()
def classify(
    value: Annotated[float, typer.Argument(help="Score, rating or 1-based rank to classify.")],
    table: Annotated[
        TableKind,
        typer.Option("--table", help="Which tier table to classify against."),
    ] = TableKind.PLAYER,
    config_name: ConfigNameOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
) -> None:
    """Print the tier band a value falls into."""
    config = _load_config(config_name, config_dir)
    band = classify_band(value, _table_for(config, table))
    typer.echo(f"table={table.value} value={value:g} tier={band.value}")
    if band.name or band.description:
        typer.echo(f"  {band.name} {band.description}".rstrip())


@app.command()
def decay(
    base_rp: Annotated[float, typer.Argument(help="RP originally awarded.")],
    source: Annotated[str, typer.Argument(help="RP source, e.g. event or franchise_weekly.")],
    days: Annotated[float, typer.Argument(help="Days elapsed since the RP was earned.")],
    config_name: ConfigNameOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
) -> None:
    """Print the value of an RP award after decay."""
    if days < 0:
        raise typer.BadParameter("days must be >= 0", param_hint="days")
    config = _load_config(config_name, config_dir)
    try:
        value = decayed_value(base_rp, source, days, config.decay_table)
    except LeaderboardError as exc:
        raise typer.BadParameter(str(exc), param_hint="source") from exc
    typer.echo(f"source={source} base_rp={base_rp:g} days={days:g} current_rp={value:.2f}")


@app.command()
def salary(
    ppg: Annotated[float, typer.Option("--ppg", help="Points per game.")] = 0.0,
    apg: Annotated[float, typer.Option("--apg", help="Assists per game.")] = 0.0,
    spg: Annotated[float, typer.Option("--spg", help="Steals per game.")] = 0.0,
    tov: Annotated[float, typer.Option("--tov", help="Turnovers per game.")] = 0.0,
    rating: Annotated[
        float | None,
        typer.Option("--rating", help="Global rating for the bracket multiplier."),
    ] = None,
    all_star: Annotated[int, typer.Option("--all-star", help="All-Star selections.")] = 0,
    mvp: Annotated[int, typer.Option("--mvp", help="MVP awards.")] = 0,
    all_defensive: Annotated[
        int,
        typer.Option("--all-defensive", help="All-Defensive selections."),
    ] = 0,
    team_success: Annotated[
        float,
        typer.Option("--team-success", help="Team success modifier, clamped to +/-5%."),
    ] = 0.0,
    config_name: ConfigNameOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
) -> None:
    """Print the raw salary and both modifier structures."""
    config = _load_config(config_name, config_dir)
    stats = PlayerStats(
        points_per_game=ppg,
        assists_per_game=apg,
        steals_per_game=spg,
        turnovers_per_game=tov,
    )
    awards = SalaryAwards(
        all_star_selections=all_star,
        mvp_awards=mvp,
        all_defensive_selections=all_defensive,
        team_success=team_success,
    )
    multiplier = salary_multiplier(rating, config.salary_multipliers)
    typer.echo(f"raw={format_salary(raw_salary(stats))}")
    typer.echo(
        f"bracket={format_salary(bracket_salary(stats, rating, config.salary_multipliers))} "
        f"multiplier={multiplier:g}"
    )
    typer.echo(f"awards={format_salary(award_salary(stats, awards))}")


if __name__ == "__main__":
    app()

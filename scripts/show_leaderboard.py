#!/usr/bin/env python3
"""Show one page of the players, teams or events leaderboard."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, read_session
from domain.common import (
    EventRecord,
    PlayerRecord,
    TeamRecord,
    display_value,
    status_of,
    utc_now,
    win_percentage,
)
from domain.errors import LeaderboardError
from domain.normalizer import normalize_event, normalize_player, normalize_records, normalize_team
from domain.pipeline import DEFAULT_PAGE_SIZE, PageResult, RecordSchema, ViewState, run_pipeline
from domain.protocol import SortDirection
from domain.ratings.awards import (
    DEFAULT_CANDIDATE_LIMIT,
    Award,
    award_candidates,
    award_formula,
)
from domain.ratings.reference import player_tier_table
from domain.ratings.tiers import classify
from domain.views import PLAYER_SCHEMA, TEAM_SCHEMA, build_event_schema, team_tier
from repositories.league import fetch_raw_events, fetch_raw_players, fetch_raw_teams

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Search, filter, sort and page through the league leaderboards.",
)

SearchOption = Annotated[
    str,
    typer.Option("--search", help="Case-insensitive substring over the searchable fields."),
]
SortOption = Annotated[
    str | None,
    typer.Option("--sort", help="Field to sort by. Defaults to the view's default field."),
]
DirectionOption = Annotated[
    SortDirection | None,
    typer.Option("--direction", help="Sort direction. Defaults to the field's default."),
]
PageOption = Annotated[int, typer.Option("--page", help="1-based page number.")]
PageSizeOption = Annotated[int, typer.Option("--page-size", help="Rows per page.")]
DbUrlOption = Annotated[
    str,
    typer.Option("--db-url", help="Database URL. Defaults to the local proam postgres instance."),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", help="Log fetch and normalization details.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_state(
    *,
    search: str,
    filters: Mapping[str, Any],
    sort: str | None,
    direction: SortDirection | None,
    page: int,
    page_size: int,
) -> ViewState:
    if page < 1:
        raise typer.BadParameter("--page must be >= 1", param_hint="--page")
    return ViewState(
        search_text=search,
        category_filters=dict(filters),
        sort_field=sort,
        sort_direction=direction,
        page_index=page - 1,
        page_size=page_size,
    )


def _run(
    fetch: Callable[[Any], list[dict[str, Any]]],
    normalizer: Callable[[Mapping[str, Any]], Any],
    state: ViewState,
    schema: RecordSchema,
    db_url: str,
) -> PageResult[Any]:
    engine = create_db_engine(db_url)
    with read_session(engine) as session:
        raws = fetch(session)
    records = normalize_records(raws, normalizer)
    try:
        return run_pipeline(records, state, schema)
    except LeaderboardError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _echo_footer(result: PageResult[Any], noun: str) -> None:
    typer.echo(
        f"page {result.page_index + 1}/{result.total_pages} "
        f"showing {len(result.page_records)} of {result.total_count} {noun}"
    )


def _render_player(position: int, player: PlayerRecord, tier_variant: str) -> str:
    team = "Free Agent" if player.team is None else player.team.name
    games_played = None if player.stats is None else player.stats.games_played
    tier = classify(player.player_rank_score, player_tier_table(tier_variant))
    return (
        f"{position:3d}. {player.gamertag:<20} {display_value(player.position):<4} "
        f"{team:<20} rank_score={display_value(player.player_rank_score, digits=1):>6} "
        f"rp={display_value(player.player_rp, digits=0):>6} "
        f"gp={display_value(games_played):>4} tier={tier}"
    )


def _render_team(position: int, team: TeamRecord) -> str:
    tier = team_tier(team)
    region = None if team.region is None else team.region.name
    captain = None if team.captain is None else team.captain.gamertag
    return (
        f"{position:3d}. {team.name:<20} rp={display_value(team.current_rp, digits=0):>6} "
        f"elo={display_value(team.elo_rating, digits=1):>7} "
        f"rank={display_value(team.global_rank):>4} tier={tier:<8} "
        f"win%={win_percentage(team):5.1f} region={display_value(region)} "
        f"captain={display_value(captain)} roster={team.roster_count}"
    )


def _render_event(position: int, event: EventRecord, now: datetime) -> str:
    region = None if event.region is None else event.region.name
    capacity = f"{event.registered_teams}/{display_value(event.max_teams)}"
    return (
        f"{position:3d}. {event.name:<28} {status_of(event, now).value:<9} "
        f"{display_value(event.start_date)} -> {display_value(event.end_date)} "
        f"region={display_value(region)} location={display_value(event.location)} "
        f"teams={capacity}"
    )


@app.command()
def players(
    search: SearchOption = "",
    position: Annotated[
        str,
        typer.Option("--position", help="Position filter (PG, SG, SF, PF, C or 'all')."),
    ] = "all",
    team: Annotated[str, typer.Option("--team", help="Team id filter or 'all'.")] = "all",
    sort: SortOption = None,
    direction: DirectionOption = None,
    page: PageOption = 1,
    page_size: PageSizeOption = DEFAULT_PAGE_SIZE,
    tier_variant: Annotated[
        str,
        typer.Option("--tier-variant", help="Player tier table to label rows with."),
    ] = "ratings_info",
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Print one page of the player leaderboard."""
    _configure_logging(verbose)
    try:
        player_tier_table(tier_variant)
    except LeaderboardError as exc:
        raise typer.BadParameter(str(exc), param_hint="--tier-variant") from exc

    state = _build_state(
        search=search,
        filters={"position": position.upper(), "team": team},
        sort=sort,
        direction=direction,
        page=page,
        page_size=page_size,
    )
    result = _run(fetch_raw_players, normalize_player, state, PLAYER_SCHEMA, db_url)
    if result.is_empty:
        typer.echo("No players match the current search and filters.")
        return

    offset = result.page_index * result.page_size
    for index, player in enumerate(result.page_records, start=offset + 1):
        typer.echo(_render_player(index, player, tier_variant))
    _echo_footer(result, "players")


@app.command()
def teams(
    search: SearchOption = "",
    region: Annotated[str, typer.Option("--region", help="Region id filter or 'all'.")] = "all",
    tier: Annotated[
        str,
        typer.Option("--tier", help="Leaderboard tier filter (e.g. S-Tier) or 'all'."),
    ] = "all",
    sort: SortOption = None,
    direction: DirectionOption = None,
    page: PageOption = 1,
    page_size: PageSizeOption = DEFAULT_PAGE_SIZE,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Print one page of the team leaderboard."""
    _configure_logging(verbose)
    state = _build_state(
        search=search,
        filters={"region": region, "leaderboard_tier": tier},
        sort=sort,
        direction=direction,
        page=page,
        page_size=page_size,
    )
    result = _run(fetch_raw_teams, normalize_team, state, TEAM_SCHEMA, db_url)
    if result.is_empty:
        typer.echo("No teams match the current search and filters.")
        return

    offset = result.page_index * result.page_size
    for index, team in enumerate(result.page_records, start=offset + 1):
        typer.echo(_render_team(index, team))
    _echo_footer(result, "teams")


@app.command()
def events(
    search: SearchOption = "",
    status: Annotated[
        str,
        typer.Option("--status", help="Status filter (upcoming, ongoing, completed or 'all')."),
    ] = "all",
    region: Annotated[str, typer.Option("--region", help="Region id filter or 'all'.")] = "all",
    sort: SortOption = None,
    direction: DirectionOption = None,
    page: PageOption = 1,
    page_size: PageSizeOption = DEFAULT_PAGE_SIZE,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Print one page of events, with status derived from the current time."""
    _configure_logging(verbose)
    now = utc_now()
    state = _build_state(
        search=search,
        filters={"status": status.lower(), "region": region},
        sort=sort,
        direction=direction,
        page=page,
        page_size=page_size,
    )
    result = _run(fetch_raw_events, normalize_event, state, build_event_schema(now), db_url)
    if result.is_empty:
        typer.echo("No events match the current search and filters.")
        return

    offset = result.page_index * result.page_size
    for index, event in enumerate(result.page_records, start=offset + 1):
        typer.echo(_render_event(index, event, now))
    _echo_footer(result, "events")


@app.command()
def awards(
    award: Annotated[
        Award,
        typer.Option("--award", help="Award to rank candidates for."),
    ] = Award.OMVP,
    limit: Annotated[
        int,
        typer.Option("--limit", help="Number of candidates to show."),
    ] = DEFAULT_CANDIDATE_LIMIT,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Print the top award candidates by weighted season stats."""
    _configure_logging(verbose)
    engine = create_db_engine(db_url)
    with read_session(engine) as session:
        raws = fetch_raw_players(session)
    players = normalize_records(raws, normalize_player)
    try:
        candidates = award_candidates(players, award, limit=limit)
    except LeaderboardError as exc:
        raise typer.BadParameter(str(exc), param_hint="--limit") from exc

    title = award_formula(award).title
    if not candidates:
        typer.echo(f"No {title} candidates.")
        return

    typer.echo(title)
    for index, candidate in enumerate(candidates, start=1):
        player = candidate.player
        team = "Free Agent" if player.team is None else player.team.name
        typer.echo(
            f"{index:3d}. {player.gamertag:<20} {team:<20} rating={candidate.rating:7.2f}"
        )


if __name__ == "__main__":
    app()

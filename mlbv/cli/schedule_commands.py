"""
Schedule commands for the mlbv CLI.

Listing the schedule needs no login.
"""

from datetime import date
from typing import Optional

import click

from mlbv.stats.schedule_client import find_team_games
from mlbv.stats.teams import Team
from mlbv.utils.date_utils import date_range, resolve_day

from .utils import (
    GAME_DATE,
    TEAM,
    get_schedule_client,
    handle_errors,
    print_games,
    print_warning,
)


@click.command()
@click.argument("game_date", required=False, type=GAME_DATE)
@click.option("--yesterday", is_flag=True, help="Show yesterday's games")
@click.option("--tomorrow", is_flag=True, help="Show tomorrow's games")
@click.option(
    "--days",
    type=int,
    default=0,
    show_default=True,
    help="Also show the next N days (negative: the previous N days)",
)
@click.option("--team", "-t", type=TEAM, help="Only show games for this team")
@click.pass_context
@handle_errors
def schedule(
    ctx: click.Context,
    game_date: Optional[date],
    yesterday: bool,
    tomorrow: bool,
    days: int,
    team: Optional[Team],
) -> None:
    """
    Show the MLB schedule.

    \b
    Examples:
      mlbv schedule                   # Today
      mlbv schedule 2023-07-04        # A specific date
      mlbv schedule --yesterday       # Yesterday, with final scores
      mlbv schedule --days 6 -t wsh   # The Nationals' next seven days
    """
    try:
        day = resolve_day(game_date, yesterday=yesterday, tomorrow=tomorrow)
        start, end = date_range(day, days)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    result = get_schedule_client(ctx).get_schedule(start, end)
    games = find_team_games(result.games, team) if team else result.games

    if result.skipped:
        print_warning(f"{len(result.skipped)} schedule entries could not be read")

    if not games and start != end:
        click.echo(f"No games scheduled between {start} and {end}")
        return

    current = start
    while current <= end:
        day_games = [g for g in games if g.date == current]
        if day_games or start == end:
            print_games(current, day_games)
        current = date.fromordinal(current.toordinal() + 1)

"""
Playback commands for the mlbv CLI.

`play` needs an MLB.tv login; `highlight` plays free content and does not.
"""

import logging
from datetime import date
from typing import Optional

import click

from mlbv.mediagateway.exceptions import FeedNotFoundError, NotYetAvailableError
from mlbv.mediagateway.stream_resolver import select_feed
from mlbv.models import Capability, FeedType, MediaType
from mlbv.stats.exceptions import GameSelectionError
from mlbv.stats.models import Game, GameStatus
from mlbv.stats.schedule_client import find_team_games, resolve_highlight, select_game
from mlbv.stats.teams import Team
from mlbv.utils.date_utils import resolve_day

from .utils import (
    GAME_DATE,
    TEAM,
    get_cli_context,
    get_schedule_client,
    get_session_manager,
    get_stream_resolver,
    handle_errors,
    output_url,
    print_warning,
    team_side_feed,
)

logger = logging.getLogger(__name__)

FEED_CHOICES = ["home", "away", "national"]


def find_game(
    ctx: click.Context, team: Team, day: date, game_number: Optional[int]
) -> Game:
    """
    The team's game on a date (doubleheaders resolved by select_game).

    Raises:
        GameSelectionError: If the team has no game that day
    """
    games = get_schedule_client(ctx).get_games_for_date(day)
    team_games = find_team_games(games, team)
    if not team_games:
        raise GameSelectionError(f"No games found for the {team.name} on {day}")
    return select_game(team_games, game_number)


def required_capability(game: Game, media_type: MediaType) -> Capability:
    if media_type == MediaType.AUDIO:
        return Capability.AUDIO
    if game.status == GameStatus.FINAL:
        return Capability.ARCHIVE
    return Capability.LIVE


def day_options(f):
    """Shared --date/--yesterday options."""
    f = click.option("--yesterday", is_flag=True, help="Use yesterday's game")(f)
    f = click.option(
        "--date", "-d", "game_date", type=GAME_DATE, help="Game date (default: today)"
    )(f)
    return f


@click.command()
@click.argument("team", type=TEAM)
@day_options
@click.option("--feed", "-f", type=click.Choice(FEED_CHOICES), help="Feed to watch")
@click.option("--audio", is_flag=True, help="Listen to the radio broadcast")
@click.option("--game", "-g", "game_number", type=int, help="Doubleheader game number (1 or 2)")
@click.option("--url", "url_only", is_flag=True, help="Print the stream URL instead of playing")
@click.pass_context
@handle_errors
def play(
    ctx: click.Context,
    team: Team,
    game_date: Optional[date],
    yesterday: bool,
    feed: Optional[str],
    audio: bool,
    game_number: Optional[int],
    url_only: bool,
) -> None:
    """
    Watch (or listen to) a game on MLB.tv.

    The feed defaults to the chosen team's broadcast.

    \b
    Examples:
      mlbv play wsh                      # Today's Nationals game
      mlbv play nyy --feed national      # National broadcast
      mlbv play sea --yesterday --url    # Print the archive URL
      mlbv play bos --audio              # Radio
    """
    config = get_cli_context(ctx).config
    day = resolve_day(game_date, yesterday=yesterday)
    game = find_game(ctx, team, day, game_number)

    media_type = MediaType.AUDIO if audio else MediaType(config.media_type.lower())
    feed_type = team_side_feed(game, team, feed or config.feed_type)
    capability = required_capability(game, media_type)

    manager = get_session_manager(ctx)
    resolver = get_stream_resolver(ctx)

    feeds = manager.list_feeds(resolver, game.game_id, capability, preferred_type=feed_type)
    selected = select_feed(feeds, feed_type, media_type)
    if selected is None:
        raise FeedNotFoundError(
            f"No streams available for {game.matchup}; "
            f"your account may not have access to this content"
        )

    click.echo(f"{game.matchup}: {selected.label}", err=True)
    ref = manager.resolve_stream(
        resolver, game.game_id, selected.feed_id, capability, feeds=feeds
    )
    output_url(ctx, ref.url, url_only)


@click.command()
@click.argument("team", type=TEAM, required=False)
@day_options
@click.option(
    "--recap",
    "highlight_type",
    flag_value=FeedType.RECAP.value,
    help="Play the recap",
)
@click.option(
    "--condensed",
    "highlight_type",
    flag_value=FeedType.CONDENSED.value,
    default=True,
    help="Play the condensed game (default)",
)
@click.option("--game", "-g", "game_number", type=int, help="Doubleheader game number (1 or 2)")
@click.option("--url", "url_only", is_flag=True, help="Print the URL instead of playing")
@click.pass_context
@handle_errors
def highlight(
    ctx: click.Context,
    team: Optional[Team],
    game_date: Optional[date],
    yesterday: bool,
    highlight_type: str,
    game_number: Optional[int],
    url_only: bool,
) -> None:
    """
    Play a free condensed game or recap (no login needed).

    Without a team, --recap plays every recap of the day.

    \b
    Examples:
      mlbv highlight wsh --yesterday           # Condensed game
      mlbv highlight nym --recap -d 2023-07-04
      mlbv highlight --recap --yesterday       # All recaps
    """
    feed_type = FeedType(highlight_type)
    day = resolve_day(game_date, yesterday=yesterday)

    if team is not None:
        game = find_game(ctx, team, day, game_number)
        ref = resolve_highlight(game, feed_type)
        output_url(ctx, ref.url, url_only)
        return

    if feed_type != FeedType.RECAP:
        raise click.UsageError("A team is required for condensed games")

    games = get_schedule_client(ctx).get_games_for_date(day)
    if not games:
        raise GameSelectionError(f"No games scheduled for {day}")

    click.echo(f"Found {len(games)} game(s) for {day}:", err=True)
    for game in games:
        try:
            ref = resolve_highlight(game, feed_type)
        except NotYetAvailableError as e:
            print_warning(str(e))
            continue
        click.echo(f"Playing: {game.matchup}", err=True)
        output_url(ctx, ref.url, url_only)

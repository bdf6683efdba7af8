"""
CLI utility functions for mlbv.

This module provides output helpers, click parameter types, the mapping of
typed errors to exit codes, and lazy construction of the API clients kept
on the CLI context.
"""

import functools
import logging
from datetime import date
from typing import Callable, List, Optional

import click

from mlbv.api.exceptions import MlbvError, NetworkError
from mlbv.mediagateway.client import MediaGatewayClient
from mlbv.mediagateway.entitlement_client import EntitlementClient
from mlbv.mediagateway.exceptions import (
    BlackoutError,
    EntitlementExpiredError,
    EntitlementUnauthorizedError,
    FeedNotFoundError,
    NoSubscriptionError,
    NotYetAvailableError,
)
from mlbv.mediagateway.stream_resolver import StreamResolver
from mlbv.models import Feed, FeedType
from mlbv.oauth.exceptions import AuthError, ConfigurationError
from mlbv.oauth.identity_client import IdentityClient
from mlbv.oauth.login import build_login_handler
from mlbv.oauth.session_manager import SessionManager
from mlbv.player import PlayerError, play_url
from mlbv.stats.exceptions import GameSelectionError
from mlbv.stats.models import Game
from mlbv.stats.schedule_client import ScheduleClient
from mlbv.stats.teams import Team, find_by_code
from mlbv.utils.date_utils import parse_game_date

from .context import CLIContext

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_AUTH = 3
EXIT_NO_SUBSCRIPTION = 4
EXIT_BLACKOUT = 5
EXIT_NOT_YET_AVAILABLE = 6
EXIT_NETWORK = 7
EXIT_NOT_FOUND = 8
EXIT_PLAYER = 9

# Checked in order; the first matching class wins
EXIT_CODES = [
    (ConfigurationError, EXIT_ERROR),
    (NetworkError, EXIT_NETWORK),
    (NoSubscriptionError, EXIT_NO_SUBSCRIPTION),
    (EntitlementUnauthorizedError, EXIT_AUTH),
    (EntitlementExpiredError, EXIT_AUTH),
    (AuthError, EXIT_AUTH),
    (BlackoutError, EXIT_BLACKOUT),
    (NotYetAvailableError, EXIT_NOT_YET_AVAILABLE),
    (FeedNotFoundError, EXIT_NOT_FOUND),
    (GameSelectionError, EXIT_NOT_FOUND),
    (PlayerError, EXIT_PLAYER),
]


def exit_code_for(error: MlbvError) -> int:
    """Exit code for a typed error."""
    for error_class, code in EXIT_CODES:
        if isinstance(error, error_class):
            return code
    return EXIT_ERROR


def handle_errors(f: Callable) -> Callable:
    """Report MlbvError on stderr and exit with its mapped code."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except MlbvError as e:
            logger.debug("Command failed", exc_info=True)
            print_error(str(e))
            click.get_current_context().exit(exit_code_for(e))

    return wrapper


def print_error(message: str) -> None:
    """Print error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def print_success(message: str) -> None:
    """Print success message."""
    click.secho(message, fg="green")


def print_warning(message: str) -> None:
    """Print warning message."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


class TeamParamType(click.ParamType):
    """Team code argument (e.g. wsh, nyy)."""

    name = "team"

    def convert(self, value, param, ctx) -> Team:
        if isinstance(value, Team):
            return value
        try:
            return find_by_code(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


class GameDateParamType(click.ParamType):
    """Date in YYYY-MM-DD, MM-DD-YYYY or MM/DD/YYYY form."""

    name = "date"

    def convert(self, value, param, ctx) -> date:
        if isinstance(value, date):
            return value
        try:
            return parse_game_date(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


TEAM = TeamParamType()
GAME_DATE = GameDateParamType()


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Get the CLIContext from the click context."""
    return ctx.find_object(CLIContext)


def get_schedule_client(ctx: click.Context) -> ScheduleClient:
    cli_ctx = get_cli_context(ctx)
    if cli_ctx.schedule_client is None:
        cli_ctx.schedule_client = ScheduleClient(timeout=cli_ctx.config.timeout)
    return cli_ctx.schedule_client


def get_stream_resolver(ctx: click.Context) -> StreamResolver:
    cli_ctx = get_cli_context(ctx)
    if cli_ctx.stream_resolver is None:
        cli_ctx.stream_resolver = StreamResolver(
            MediaGatewayClient(timeout=cli_ctx.config.timeout),
            preferred_language=cli_ctx.config.language,
        )
    return cli_ctx.stream_resolver


def get_session_manager(ctx: click.Context) -> SessionManager:
    """
    Build the session manager from configuration.

    Raises:
        ConfigurationError: If the identity configuration is invalid
    """
    cli_ctx = get_cli_context(ctx)
    if cli_ctx.session_manager is None:
        config = cli_ctx.config
        identity_config = config.identity_config()
        identity = IdentityClient(identity_config)
        cli_ctx.session_manager = SessionManager(
            identity_config,
            identity,
            EntitlementClient(MediaGatewayClient(timeout=config.timeout)),
            login_handler=build_login_handler(
                identity_config, identity, config.username, config.password
            ),
        )
    return cli_ctx.session_manager


def format_feeds(feeds: List[Feed]) -> str:
    labels = sorted({feed.type.value for feed in feeds if not feed.type.is_highlight})
    return ", ".join(labels) or "-"


def format_highlights(feeds: List[Feed]) -> str:
    labels = sorted({feed.type.value for feed in feeds if feed.type.is_highlight})
    return ", ".join(labels) or "-"


def format_game(game: Game) -> str:
    """One schedule line for a game."""
    start = game.start_time.astimezone().strftime("%I:%M %p").lower()
    series = ""
    if game.series_game_number and game.games_in_series:
        series = f"{game.series_game_number}/{game.games_in_series}"

    matchup = game.matchup
    if game.is_doubleheader:
        matchup = f"{matchup} (game {game.game_number})"

    score = ""
    if game.home_score is not None and game.away_score is not None:
        score = f"{game.away_score}-{game.home_score}"

    status = game.status.value
    if game.detailed_state and game.detailed_state != status:
        status = f"{status} ({game.detailed_state})"

    return (
        f"{start} - {matchup:<45} {series:>5} {score:>5}  {status:<20} "
        f"feeds: {format_feeds(game.available_feeds)}  "
        f"highlights: {format_highlights(game.available_feeds)}"
    )


def print_games(day: date, games: List[Game]) -> None:
    """Print one day's schedule."""
    click.secho(f"{day.isoformat()} {day.strftime('%A')}", bold=True)
    if not games:
        click.echo(f"No games scheduled for {day}")
        return
    for game in games:
        click.echo(format_game(game))


def output_url(ctx: click.Context, url: str, url_only: bool) -> None:
    """Print the URL (--url) or hand it to the configured player."""
    if url_only:
        click.echo(url)
        return
    play_url(url, get_cli_context(ctx).config.media_player)


def team_side_feed(game: Game, team: Team, override: Optional[str]) -> FeedType:
    """Feed type to request: the override, else the team's side of the game."""
    if override:
        return FeedType.parse(override)
    return FeedType.HOME if game.home.id == team.id else FeedType.AWAY

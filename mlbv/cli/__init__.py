"""
Click CLI implementation for mlbv.

This module provides the `mlbv` command group: schedules and free
highlights without login, MLB.tv playback and session management with it.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from mlbv.config import MlbvConfig
from mlbv.oauth.exceptions import ConfigurationError

from .context import CLIContext
from .play_commands import highlight, play
from .schedule_commands import schedule
from .session_commands import login, logout, status
from .utils import EXIT_ERROR, print_error

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: int) -> None:
    """WARNING by default, INFO with -v, DEBUG with -vv."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


@click.group()
@click.option("--verbose", "-v", count=True, help="Verbose output (-vv for debug)")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file (default: ~/.mlbv/config.yaml)",
)
@click.option("--player", "-p", help="Media player command (overrides config)")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    config_file: Optional[str],
    player: Optional[str],
) -> None:
    """
    mlbv - watch MLB.tv games and highlights in your media player.
    """
    configure_logging(verbose)

    if not isinstance(ctx.obj, CLIContext):
        try:
            config = MlbvConfig.load_from_file(Path(config_file) if config_file else None)
        except ConfigurationError as e:
            print_error(str(e))
            ctx.exit(EXIT_ERROR)
        ctx.obj = CLIContext(config=config, verbose=verbose)

    if player:
        ctx.obj.config.media_player = player


# Register schedule commands
cli.add_command(schedule)

# Register playback commands
cli.add_command(play)
cli.add_command(highlight)

# Register session commands
cli.add_command(login)
cli.add_command(logout)
cli.add_command(status)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


__all__ = ["cli", "main", "CLIContext"]

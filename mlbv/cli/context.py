"""CLI context object shared by all mlbv commands."""

from dataclasses import dataclass
from typing import Optional

from mlbv.config import MlbvConfig
from mlbv.mediagateway.stream_resolver import StreamResolver
from mlbv.oauth.session_manager import SessionManager
from mlbv.stats.schedule_client import ScheduleClient


@dataclass
class CLIContext:
    """Context object passed to all CLI commands.

    Clients are built on first use (see cli.utils) so commands that need no
    login never touch the identity provider.

    Attributes:
        config: Configuration settings
        verbose: Verbosity level (-v count)
        schedule_client: Stats API client
        session_manager: Session lifecycle manager
        stream_resolver: Media gateway stream resolver
    """

    config: MlbvConfig
    verbose: int = 0
    schedule_client: Optional[ScheduleClient] = None
    session_manager: Optional[SessionManager] = None
    stream_resolver: Optional[StreamResolver] = None

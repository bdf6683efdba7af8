"""
MLB Stats API (statsapi.mlb.com) schedule access.

Public API:
    ScheduleClient: get_schedule, get_games_for_date
    find_team_games, select_game, resolve_highlight
    Game, GameStatus, ScheduleResult, Team

Exceptions:
    ScheduleError, ScheduleNetworkError, PartialDataError, GameSelectionError
"""

from .exceptions import (
    GameSelectionError,
    PartialDataError,
    ScheduleError,
    ScheduleNetworkError,
)
from .models import Game, GameStatus, ScheduleResult
from .schedule_client import ScheduleClient, find_team_games, resolve_highlight, select_game
from .teams import TEAMS, Team, find_by_code, find_by_name

__all__ = [
    # Client
    "ScheduleClient",
    "find_team_games",
    "select_game",
    "resolve_highlight",
    # Models
    "Game",
    "GameStatus",
    "ScheduleResult",
    "Team",
    "TEAMS",
    "find_by_code",
    "find_by_name",
    # Exceptions
    "ScheduleError",
    "ScheduleNetworkError",
    "PartialDataError",
    "GameSelectionError",
]

"""Exceptions for the MLB Stats API (schedule) client."""

from mlbv.api.exceptions import MlbvError, NetworkError


class ScheduleError(MlbvError):
    """Base exception for schedule errors (unparseable or invalid response)."""

    pass


class ScheduleNetworkError(ScheduleError, NetworkError):
    """Transport failure fetching the schedule."""

    pass


class PartialDataError(ScheduleError):
    """
    One schedule entry failed validation and was skipped.

    Not raised by get_schedule; instances are collected in
    ScheduleResult.skipped so callers can report them.

    Attributes:
        game_id: gamePk of the skipped entry, if it could be read
    """

    def __init__(self, message: str, game_id=None):
        super().__init__(message)
        self.game_id = game_id


class GameSelectionError(ScheduleError):
    """No game (or no unambiguous game) matches the request."""

    pass

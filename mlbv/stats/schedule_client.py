"""
MLB Stats API schedule client.

Unauthenticated; one GET per call and no caching. Each game entry is
validated on its own so that a malformed entry is skipped (and recorded)
rather than failing the whole schedule.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

import requests
from pydantic import ValidationError

from mlbv.api.base_client import BaseAPIClient
from mlbv.api.exceptions import NetworkError
from mlbv.mediagateway.exceptions import NotYetAvailableError
from mlbv.models import FeedType, MediaState, PlaybackManifestRef

from .exceptions import (
    GameSelectionError,
    PartialDataError,
    ScheduleError,
    ScheduleNetworkError,
)
from .models import Game, GameStatus, ScheduleResult
from .parsers import parse_game
from .schemas import GameData, ScheduleResponse
from .teams import Team

logger = logging.getLogger(__name__)

SCHEDULE_HYDRATE = (
    "broadcasts(all),game(content(media(epg)),editorial(preview,recap)),"
    "linescore,team,probablePitcher(note)"
)


class ScheduleClient(BaseAPIClient):
    """
    Client for statsapi.mlb.com schedules.

    Example:
        with ScheduleClient() as client:
            result = client.get_schedule(date(2023, 7, 4))
            for game in result.games:
                print(game.matchup, game.status.value)
    """

    BASE_URL = "https://statsapi.mlb.com"
    SCHEDULE_ENDPOINT = "/api/v1/schedule"

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None):
        super().__init__(timeout=timeout, session=session)

    def get_schedule(self, start: date, end: Optional[date] = None) -> ScheduleResult:
        """
        Fetch the schedule for a date range (inclusive).

        Args:
            start: First date
            end: Last date (default: start)

        Returns:
            ScheduleResult ordered by date then start time; entries that
            failed validation are listed in skipped

        Raises:
            ScheduleNetworkError: On transport failure
            ScheduleError: If the response is not a valid schedule
        """
        end = end or start
        if end < start:
            raise ValueError(f"End date {end} is before start date {start}")

        params = {
            "sportId": 1,
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "hydrate": SCHEDULE_HYDRATE,
        }

        try:
            response = self.get(self.SCHEDULE_ENDPOINT, params=params)
        except NetworkError as e:
            raise ScheduleNetworkError(f"Could not fetch schedule: {e}") from e

        if response.status_code != 200:
            raise ScheduleError(f"Schedule request failed with status {response.status_code}")

        try:
            body = ScheduleResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ScheduleError(f"Invalid schedule response: {e}") from e

        result = ScheduleResult()
        for day in body.dates:
            try:
                day_date = date.fromisoformat(day.date)
            except ValueError as e:
                raise ScheduleError(f"Invalid schedule date {day.date!r}") from e

            for raw_game in day.games:
                try:
                    game = parse_game(GameData.model_validate(raw_game), day_date)
                except (ValidationError, ValueError) as e:
                    game_id = raw_game.get("gamePk") if isinstance(raw_game, dict) else None
                    logger.warning(f"Skipping invalid schedule entry (gamePk={game_id}): {e}")
                    result.skipped.append(
                        PartialDataError(f"Invalid schedule entry: {e}", game_id=game_id)
                    )
                    continue
                result.games.append(game)

        # Stable sort keeps API order for identical start times
        result.games.sort(key=lambda g: (g.date, g.start_time))

        logger.info(
            f"Schedule {start} to {end}: {len(result.games)} games"
            + (f", {len(result.skipped)} skipped" if result.skipped else "")
        )
        return result

    def get_games_for_date(self, day: date) -> List[Game]:
        """All games on one date."""
        return self.get_schedule(day).on(day)


def find_team_games(games: Sequence[Game], team: Team) -> List[Game]:
    """Games (one, or two for a doubleheader) involving the given team."""
    return [game for game in games if game.involves(team)]


def select_game(games: Sequence[Game], game_number: Optional[int] = None) -> Game:
    """
    Pick one game from a team's games on a date.

    With a doubleheader and no game number, game 2 is chosen if it is live,
    otherwise game 1.

    Raises:
        GameSelectionError: If there are no games or the game number is not 1 or 2
    """
    if not games:
        raise GameSelectionError("No games found")

    if game_number is not None and game_number not in (1, 2):
        raise GameSelectionError(f"Invalid game number: {game_number}; expected 1 or 2")

    if len(games) == 1:
        return games[0]

    ordered = sorted(games, key=lambda g: (g.game_number, g.start_time))

    if game_number is not None:
        logger.debug(f"Game number {game_number} requested")
        return ordered[game_number - 1]

    logger.debug("Doubleheader detected but no game number specified")
    if ordered[1].status == GameStatus.LIVE:
        logger.info("Game 2 is currently live; defaulting to live broadcast")
        return ordered[1]

    logger.info("Defaulting to game 1")
    return ordered[0]


def resolve_highlight(game: Game, feed_type: FeedType) -> PlaybackManifestRef:
    """
    Playback reference for a free highlight feed (no login needed).

    Raises:
        ValueError: If feed_type is not Condensed or Recap
        NotYetAvailableError: If the game has no such highlight yet
    """
    if not feed_type.is_highlight:
        raise ValueError(f"{feed_type.value} is not a highlight feed type")

    for feed in game.feeds_of_type(feed_type):
        if feed.media_state == MediaState.AVAILABLE and feed.url:
            logger.info(f"Found {feed_type.value} for {game.matchup}")
            return PlaybackManifestRef(url=feed.url)

    raise NotYetAvailableError(
        f"No {feed_type.value} is available yet for {game.matchup}"
    )

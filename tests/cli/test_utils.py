"""Tests for CLI helpers."""

from datetime import date, datetime, timezone

import pytest

from mlbv.api.exceptions import ConnectionFailedError, MlbvError
from mlbv.cli.utils import (
    EXIT_AUTH,
    EXIT_BLACKOUT,
    EXIT_ERROR,
    EXIT_NETWORK,
    EXIT_NO_SUBSCRIPTION,
    EXIT_NOT_FOUND,
    EXIT_NOT_YET_AVAILABLE,
    EXIT_PLAYER,
    exit_code_for,
    format_game,
    team_side_feed,
)
from mlbv.mediagateway.exceptions import (
    BlackoutError,
    EntitlementExpiredError,
    FeedNotFoundError,
    NoSubscriptionError,
    NotYetAvailableError,
)
from mlbv.models import FeedType
from mlbv.oauth.exceptions import AuthNetworkError, ConfigurationError, LoginRequiredError
from mlbv.player import PlayerError
from mlbv.stats.exceptions import GameSelectionError, ScheduleNetworkError
from mlbv.stats.models import Game, GameStatus
from mlbv.stats.teams import find_by_code


class TestExitCodes:
    """Tests for exit_code_for function."""

    @pytest.mark.parametrize(
        "error, expected",
        [
            (ConfigurationError("bad"), EXIT_ERROR),
            (ConnectionFailedError("down"), EXIT_NETWORK),
            (AuthNetworkError("down"), EXIT_NETWORK),
            (ScheduleNetworkError("down"), EXIT_NETWORK),
            (LoginRequiredError("login"), EXIT_AUTH),
            (EntitlementExpiredError("expired"), EXIT_AUTH),
            (NoSubscriptionError("no"), EXIT_NO_SUBSCRIPTION),
            (BlackoutError("blackout"), EXIT_BLACKOUT),
            (NotYetAvailableError("later"), EXIT_NOT_YET_AVAILABLE),
            (FeedNotFoundError("none"), EXIT_NOT_FOUND),
            (GameSelectionError("none"), EXIT_NOT_FOUND),
            (PlayerError("crashed"), EXIT_PLAYER),
            (MlbvError("other"), EXIT_ERROR),
        ],
    )
    def test_mapping(self, error, expected):
        assert exit_code_for(error) == expected


class TestTeamSideFeed:
    """Tests for team_side_feed function."""

    @pytest.fixture
    def game(self):
        return Game(
            game_id=1,
            date=date(2023, 7, 4),
            start_time=datetime(2023, 7, 4, 23, 5, tzinfo=timezone.utc),
            status=GameStatus.SCHEDULED,
            home=find_by_code("nym"),
            away=find_by_code("wsh"),
        )

    def test_home_team(self, game):
        assert team_side_feed(game, find_by_code("nym"), None) == FeedType.HOME

    def test_away_team(self, game):
        assert team_side_feed(game, find_by_code("wsh"), None) == FeedType.AWAY

    def test_override(self, game):
        assert team_side_feed(game, find_by_code("wsh"), "national") == FeedType.NATIONAL


class TestFormatGame:
    """Tests for format_game function."""

    def make_game(self, **kwargs):
        return Game(
            game_id=1,
            date=date(2023, 7, 4),
            start_time=datetime(2023, 7, 4, 17, 5, tzinfo=timezone.utc),
            status=GameStatus.SCHEDULED,
            home=find_by_code("bal"),
            away=find_by_code("nyy"),
            **kwargs,
        )

    def test_single_game(self):
        line = format_game(self.make_game())

        assert "New York Yankees at Baltimore Orioles" in line
        assert "(game" not in line

    def test_doubleheader_shows_game_number(self):
        line = format_game(self.make_game(game_number=2, double_header="S"))

        assert "New York Yankees at Baltimore Orioles (game 2)" in line

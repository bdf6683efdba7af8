"""Tests for date utility functions."""

from datetime import date

import pytest

from mlbv.utils.date_utils import date_range, parse_game_date, resolve_day

TODAY = date(2023, 7, 4)


class TestParseGameDate:
    """Tests for parse_game_date function."""

    @pytest.mark.parametrize("value", ["2023-07-04", "07-04-2023", "07/04/2023", " 2023-07-04 "])
    def test_accepted_formats(self, value):
        assert parse_game_date(value) == TODAY

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Invalid date format"):
            parse_game_date("July 4th")

    def test_before_archive(self):
        with pytest.raises(ValueError, match="2022"):
            parse_game_date("2019-07-04")


class TestResolveDay:
    """Tests for resolve_day function."""

    def test_explicit_date_wins(self):
        assert resolve_day(date(2023, 5, 1), today=TODAY) == date(2023, 5, 1)

    def test_today(self):
        assert resolve_day(today=TODAY) == TODAY

    def test_yesterday_and_tomorrow(self):
        assert resolve_day(yesterday=True, today=TODAY) == date(2023, 7, 3)
        assert resolve_day(tomorrow=True, today=TODAY) == date(2023, 7, 5)

    def test_both_flags(self):
        with pytest.raises(ValueError):
            resolve_day(yesterday=True, tomorrow=True, today=TODAY)


class TestDateRange:
    """Tests for date_range function."""

    def test_single_day(self):
        assert date_range(TODAY) == (TODAY, TODAY)
        assert date_range(TODAY, 0) == (TODAY, TODAY)

    def test_forward_offset_includes_both_ends(self):
        assert date_range(TODAY, 7) == (TODAY, date(2023, 7, 11))

    def test_backward_offset(self):
        assert date_range(TODAY, -3) == (date(2023, 7, 1), TODAY)

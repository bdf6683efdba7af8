"""Date utility functions."""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

GAME_DATE_FORMATS = ("%Y-%m-%d", "%m-%d-%Y", "%m/%d/%Y")

# MLB.tv archives only go back to the start of the 2022 season
ARCHIVE_START_YEAR = 2022


def parse_game_date(value: str) -> date:
    """
    Parse a date given on the command line.

    Accepts YYYY-MM-DD, MM-DD-YYYY and MM/DD/YYYY.

    Args:
        value: Date string

    Returns:
        Parsed date

    Raises:
        ValueError: If the format is not recognized or the date predates
                    the MLB.tv archive
    """
    for fmt in GAME_DATE_FORMATS:
        try:
            parsed = datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue

        if parsed.year < ARCHIVE_START_YEAR:
            raise ValueError(
                f"MLB.tv archives only go back to the start of {ARCHIVE_START_YEAR}."
            )
        return parsed

    raise ValueError(f"Invalid date format: '{value}'; expected YYYY-MM-DD")


def resolve_day(
    value: Optional[date] = None,
    yesterday: bool = False,
    tomorrow: bool = False,
    today: Optional[date] = None,
) -> date:
    """
    Pick the date a command applies to.

    An explicit date wins; otherwise --yesterday/--tomorrow shift today.

    Raises:
        ValueError: If both yesterday and tomorrow are set
    """
    if yesterday and tomorrow:
        raise ValueError("--yesterday and --tomorrow are mutually exclusive")

    if value is not None:
        return value

    base = today or date.today()
    if yesterday:
        return base - timedelta(days=1)
    if tomorrow:
        return base + timedelta(days=1)
    return base


def date_range(start: date, days: int = 0) -> Tuple[date, date]:
    """
    Inclusive (start, end) range from start to start + days.

    `days` is an offset, so --days 7 shows eight schedule days. A negative
    offset extends backwards from start; 0 is start alone.
    """
    offset_date = start + timedelta(days=days)
    return min(start, offset_date), max(start, offset_date)

"""
Schedule data models.

Game is an immutable snapshot built from one validated schedule entry.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from mlbv.models import Feed, FeedType

from .exceptions import PartialDataError
from .teams import Team


class GameStatus(str, Enum):
    SCHEDULED = "Scheduled"
    LIVE = "Live"
    FINAL = "Final"
    POSTPONED = "Postponed"
    SUSPENDED = "Suspended"


@dataclass(frozen=True)
class Game:
    """
    One scheduled game.

    Attributes:
        game_id: Stats API gamePk
        date: Official (local) game date
        start_time: Scheduled first pitch (UTC)
        status: Scheduled, Live, Final, Postponed or Suspended
        home: Home club
        away: Away club
        available_feeds: Streamable broadcasts plus free highlight feeds
        game_number: 1, or 2 for the second game of a doubleheader
        double_header: "N", "Y" (traditional) or "S" (split)
        games_in_series: Length of the series, if known
        series_game_number: Position within the series, if known
        home_score: Runs for the home club, if started
        away_score: Runs for the away club, if started
        detailed_state: Stats API detailed state (e.g. "Rain delay")
    """

    game_id: int
    date: date
    start_time: datetime
    status: GameStatus
    home: Team
    away: Team
    available_feeds: List[Feed] = field(default_factory=list)
    game_number: int = 1
    double_header: str = "N"
    games_in_series: Optional[int] = None
    series_game_number: Optional[int] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    detailed_state: str = ""

    @property
    def is_doubleheader(self) -> bool:
        return self.double_header in ("Y", "S")

    @property
    def matchup(self) -> str:
        return f"{self.away.name} at {self.home.name}"

    def involves(self, team: Team) -> bool:
        return team.id in (self.home.id, self.away.id)

    def feeds_of_type(self, feed_type: FeedType) -> List[Feed]:
        return [f for f in self.available_feeds if f.type == feed_type]


@dataclass
class ScheduleResult:
    """
    Games for a date range, ordered by date then start time.

    Attributes:
        games: Successfully parsed games
        skipped: One PartialDataError per entry that failed validation
    """

    games: List[Game] = field(default_factory=list)
    skipped: List[PartialDataError] = field(default_factory=list)

    def __iter__(self):
        return iter(self.games)

    def __len__(self) -> int:
        return len(self.games)

    def on(self, day: date) -> List[Game]:
        """Games played on the given date."""
        return [g for g in self.games if g.date == day]

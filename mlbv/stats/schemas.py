"""Pydantic models for the Stats API schedule response.

Games are validated one at a time so a single malformed entry can be
skipped without losing the rest of the day.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StatsModel(BaseModel):
    """Base model: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GameStatusData(StatsModel):
    abstract_game_state: str = Field(..., alias="abstractGameState")
    detailed_state: str = Field(default="", alias="detailedState")
    reason: Optional[str] = None


class TeamRef(StatsModel):
    id: int
    name: str
    abbreviation: Optional[str] = None


class GameTeamData(StatsModel):
    team: TeamRef
    score: Optional[int] = None


class Matchup(StatsModel):
    home: GameTeamData
    away: GameTeamData


class LinescoreTeam(StatsModel):
    runs: Optional[int] = None


class LinescoreTeams(StatsModel):
    home: LinescoreTeam = Field(default_factory=LinescoreTeam)
    away: LinescoreTeam = Field(default_factory=LinescoreTeam)


class Linescore(StatsModel):
    teams: LinescoreTeams = Field(default_factory=LinescoreTeams)


class BroadcastMediaState(StatsModel):
    media_state_code: str = Field(default="", alias="mediaStateCode")


class Broadcast(StatsModel):
    kind: str = Field(default="", alias="type")
    language: str = "en"
    is_national: bool = Field(default=False, alias="isNational")
    call_sign: str = Field(default="", alias="callSign")
    media_id: Optional[str] = Field(default=None, alias="mediaId")
    home_away: str = Field(default="", alias="homeAway")
    available_for_streaming: bool = Field(default=False, alias="availableForStreaming")
    media_state: BroadcastMediaState = Field(
        default_factory=BroadcastMediaState, alias="mediaState"
    )


class HighlightPlayback(StatsModel):
    name: str = ""
    url: str = ""


class HighlightItem(StatsModel):
    kind: str = Field(default="", alias="type")
    id: Optional[str] = None
    title: str = ""
    playbacks: List[HighlightPlayback] = Field(default_factory=list)


class EpgAlternate(StatsModel):
    title: str = ""
    items: List[HighlightItem] = Field(default_factory=list)


class Media(StatsModel):
    epg_alternate: Optional[List[EpgAlternate]] = Field(default=None, alias="epgAlternate")


class Content(StatsModel):
    media: Optional[Media] = None


class GameData(StatsModel):
    """One entry of dates[].games[]."""

    game_pk: int = Field(..., alias="gamePk")
    game_date: str = Field(..., alias="gameDate")
    official_date: Optional[str] = Field(default=None, alias="officialDate")
    status: GameStatusData
    teams: Matchup
    linescore: Optional[Linescore] = None
    broadcasts: List[Broadcast] = Field(default_factory=list)
    content: Optional[Content] = None
    game_number: int = Field(default=1, alias="gameNumber")
    double_header: str = Field(default="N", alias="doubleHeader")
    games_in_series: Optional[int] = Field(default=None, alias="gamesInSeries")
    series_game_number: Optional[int] = Field(default=None, alias="seriesGameNumber")


class DaySchedule(StatsModel):
    """One entry of dates[]; games stay raw until validated individually."""

    date: str
    games: List[Dict[str, Any]] = Field(default_factory=list)


class ScheduleResponse(StatsModel):
    dates: List[DaySchedule] = Field(default_factory=list)
    total_games: Optional[int] = Field(default=None, alias="totalGames")

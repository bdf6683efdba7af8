"""
Stats API schedule parsers.

This module converts validated schedule entries (see schemas) into the
internal Game/Feed models used by the CLI and the stream resolver.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from mlbv.models import Feed, FeedType, MediaState, MediaType

from .models import Game, GameStatus
from .schemas import Broadcast, GameData, GameTeamData, HighlightItem
from .teams import Team, find_by_id

logger = logging.getLogger(__name__)

# Playback names in order of preference for highlight videos
HIGHLIGHT_PLAYBACK_PREFERENCE = ("mp4Avc", "hlsCloud")

UNAVAILABLE_MEDIA_STATES = ("MEDIA_OFF",)


def parse_game_status(abstract_state: str, detailed_state: str) -> GameStatus:
    """Map the Stats API abstract/detailed states onto GameStatus."""
    detailed = detailed_state.lower()
    if "postponed" in detailed:
        return GameStatus.POSTPONED
    if "suspended" in detailed:
        return GameStatus.SUSPENDED
    if abstract_state == "Live":
        return GameStatus.LIVE
    if abstract_state == "Final":
        return GameStatus.FINAL
    return GameStatus.SCHEDULED


def parse_team(data: GameTeamData) -> Team:
    """Known clubs come from the static table; others (e.g. All-Star teams) are built ad hoc."""
    team = find_by_id(data.team.id)
    if team is not None:
        return team
    return Team(id=data.team.id, code=(data.team.abbreviation or "").lower(), name=data.team.name)


def parse_broadcast(broadcast: Broadcast) -> Optional[Feed]:
    """
    Build a Feed from a TV broadcast that is available for streaming.

    Returns:
        Feed, or None for radio/non-streaming broadcasts
    """
    if broadcast.kind != "TV" or not broadcast.available_for_streaming or not broadcast.media_id:
        return None

    if broadcast.is_national:
        feed_type = FeedType.NATIONAL
    else:
        try:
            feed_type = FeedType.parse(broadcast.home_away)
        except ValueError:
            logger.debug(f"Skipping broadcast with homeAway={broadcast.home_away!r}")
            return None

    state = broadcast.media_state.media_state_code.upper()
    media_state = (
        MediaState.NOT_YET_AVAILABLE
        if state in UNAVAILABLE_MEDIA_STATES
        else MediaState.AVAILABLE
    )

    return Feed(
        feed_id=broadcast.media_id,
        type=feed_type,
        media_state=media_state,
        media_type=MediaType.VIDEO,
        language=broadcast.language or "en",
        call_sign=broadcast.call_sign,
    )


def highlight_type_for(title: str) -> Optional[FeedType]:
    """Map an epgAlternate group title to Condensed/Recap."""
    lowered = title.lower()
    if "condensed" in lowered or "extended" in lowered:
        return FeedType.CONDENSED
    if "recap" in lowered:
        return FeedType.RECAP
    return None


def pick_highlight_url(item: HighlightItem) -> Optional[str]:
    """Prefer mp4Avc, then hlsCloud, then the first playback with a URL."""
    playbacks = [p for p in item.playbacks if p.url]
    for name in HIGHLIGHT_PLAYBACK_PREFERENCE:
        for playback in playbacks:
            if playback.name == name:
                return playback.url
    return playbacks[0].url if playbacks else None


def parse_highlights(game: GameData) -> List[Feed]:
    """Free highlight feeds (condensed game, recap) from content.media.epgAlternate."""
    if not game.content or not game.content.media or not game.content.media.epg_alternate:
        return []

    feeds = []
    for group in game.content.media.epg_alternate:
        feed_type = highlight_type_for(group.title)
        if feed_type is None:
            continue
        for item in group.items:
            url = pick_highlight_url(item)
            feeds.append(
                Feed(
                    feed_id=item.id or f"{game.game_pk}-{feed_type.value}",
                    type=feed_type,
                    media_state=MediaState.AVAILABLE if url else MediaState.NOT_YET_AVAILABLE,
                    media_type=MediaType.VIDEO,
                    url=url,
                    title=item.title or group.title,
                )
            )
    return feeds


def parse_start_time(value: str) -> datetime:
    """
    Parse gameDate (e.g. "2023-07-04T17:05:00Z") as an aware UTC datetime.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_game(data: GameData, day: date) -> Game:
    """
    Convert one validated schedule entry into a Game.

    Args:
        data: Validated schedule entry
        day: Date of the schedule day the entry was listed under

    Raises:
        ValueError: If gameDate or officialDate cannot be parsed
    """
    feeds = [f for f in map(parse_broadcast, data.broadcasts) if f is not None]
    feeds.extend(parse_highlights(data))

    home_score = data.teams.home.score
    away_score = data.teams.away.score
    if data.linescore is not None:
        if home_score is None:
            home_score = data.linescore.teams.home.runs
        if away_score is None:
            away_score = data.linescore.teams.away.runs

    official = date.fromisoformat(data.official_date) if data.official_date else day

    return Game(
        game_id=data.game_pk,
        date=official,
        start_time=parse_start_time(data.game_date),
        status=parse_game_status(
            data.status.abstract_game_state, data.status.detailed_state
        ),
        home=parse_team(data.teams.home),
        away=parse_team(data.teams.away),
        available_feeds=feeds,
        game_number=data.game_number,
        double_header=data.double_header,
        games_in_series=data.games_in_series,
        series_game_number=data.series_game_number,
        home_score=home_score,
        away_score=away_score,
        detailed_state=data.status.detailed_state,
    )

"""
Stream resolution: game -> feeds -> signed playback URL.

Resolved URLs are short-lived and are never cached; resolve immediately
before handing the URL to the player.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from mlbv.api.exceptions import MlbvError
from mlbv.models import (
    FEED_TYPE_RANK,
    ContentSession,
    Feed,
    FeedType,
    MediaState,
    MediaType,
    PlaybackManifestRef,
)

from . import endpoints
from .client import MediaGatewayClient
from .exceptions import (
    BlackoutError,
    EntitlementExpiredError,
    FeedNotFoundError,
    GatewayAuthError,
    GatewayError,
    NoSubscriptionError,
    NotYetAvailableError,
    StreamError,
)
from .schemas import ContentSearchResults, InitPlaybackSessionResults, StreamData

logger = logging.getLogger(__name__)

UNAVAILABLE_STATES = ("OFF", "MEDIA_OFF", "PRE_GAME")

ResolveRequest = Tuple[int, str]
ResolveOutcome = Union[PlaybackManifestRef, MlbvError]


def _translate_gateway_error(error: GatewayError) -> MlbvError:
    """Map a gateway error onto the stream exception hierarchy."""
    if isinstance(error, GatewayAuthError):
        return EntitlementExpiredError(str(error))
    if error.has_code("BLACKOUT"):
        return BlackoutError(str(error))
    if error.has_code("NOT_ENTITLED"):
        return NoSubscriptionError(str(error))
    return StreamError(str(error))


def feed_from_stream_data(stream: StreamData) -> Optional[Feed]:
    """
    Build a Feed from one contentSearch entry.

    Returns:
        Feed, or None if the entry's feed type is not one mlbv plays
    """
    try:
        feed_type = FeedType.parse(stream.feed_type)
    except ValueError:
        logger.debug(f"Skipping feed {stream.media_id} with type {stream.feed_type!r}")
        return None

    if any("BLACKOUT" in r.upper() for r in stream.content_restrictions):
        media_state = MediaState.BLACKOUT
    elif stream.media_state.state.upper() in UNAVAILABLE_STATES:
        media_state = MediaState.NOT_YET_AVAILABLE
    else:
        media_state = MediaState.AVAILABLE

    media_type = (
        MediaType.AUDIO
        if stream.media_state.media_type.upper() == "AUDIO"
        else MediaType.VIDEO
    )

    return Feed(
        feed_id=stream.media_id,
        type=feed_type,
        media_state=media_state,
        media_type=media_type,
        language=(stream.language or "en").lower(),
        call_sign=stream.call_sign or "",
    )


def order_feeds(
    feeds: Sequence[Feed],
    preferred_type: Optional[FeedType] = None,
    preferred_language: str = "en",
) -> List[Feed]:
    """
    Order feeds for presentation and selection.

    Preferred type first, then Home > Away > National > Condensed > Recap,
    then preferred language, then video before audio. Remaining ties keep
    their original order.
    """

    def key(feed: Feed) -> Tuple[int, int, int, int]:
        return (
            0 if feed.type == preferred_type else 1,
            FEED_TYPE_RANK[feed.type],
            0 if feed.language == preferred_language else 1,
            0 if feed.media_type == MediaType.VIDEO else 1,
        )

    return sorted(feeds, key=key)


def _first(feeds: Sequence[Feed], predicate: Callable[[Feed], bool]) -> Optional[Feed]:
    return next((f for f in feeds if predicate(f)), None)


def select_feed(
    feeds: Sequence[Feed],
    feed_type: FeedType,
    media_type: MediaType = MediaType.VIDEO,
    language: Optional[str] = None,
) -> Optional[Feed]:
    """
    Pick the best feed for the requested type.

    Search order:
    1. Requested type and media type (a blacked-out match is still returned
       so the blackout is reported rather than silently substituted)
    2. National feed of the requested media type
    3. Audio feed of the requested type
    4. Any playable feed

    If nothing is playable, a not-yet-available match of the requested type
    is returned so the caller can report it; otherwise None.
    """

    def matches(f: Feed, t: FeedType, m: MediaType) -> bool:
        return (
            f.type == t
            and f.media_type == m
            and (language is None or f.language == language)
        )

    exact = [f for f in feeds if matches(f, feed_type, media_type)]
    candidate = _first(exact, lambda f: f.media_state == MediaState.AVAILABLE) or _first(
        exact, lambda f: f.media_state == MediaState.BLACKOUT
    )
    if candidate:
        logger.info(f"Found feed matching preferences: {candidate.label}")
        return candidate

    fallbacks = (
        ("falling back to national", lambda f: matches(f, FeedType.NATIONAL, media_type)),
        ("trying audio", lambda f: matches(f, feed_type, MediaType.AUDIO)),
        ("using any available feed", lambda f: not f.type.is_highlight),
    )
    for description, predicate in fallbacks:
        candidate = _first(
            feeds, lambda f: predicate(f) and f.media_state == MediaState.AVAILABLE
        )
        if candidate:
            logger.info(f"Requested feed not available; {description}: {candidate.label}")
            return candidate

    return exact[0] if exact else None


class StreamResolver:
    """
    Lists a game's feeds and resolves a feed to a playback URL.

    Example:
        resolver = StreamResolver()
        feeds = resolver.list_feeds(game_id, content_session)
        ref = resolver.resolve(game_id, feeds[0].feed_id, content_session, feeds=feeds)
    """

    def __init__(
        self,
        gateway: Optional[MediaGatewayClient] = None,
        preferred_language: str = "en",
        max_workers: int = 4,
    ):
        self.gateway = gateway or MediaGatewayClient()
        self.preferred_language = preferred_language
        self.max_workers = max_workers

    def list_feeds(
        self,
        game_id: int,
        content_session: ContentSession,
        preferred_type: Optional[FeedType] = None,
    ) -> List[Feed]:
        """
        List the feeds of a game, ordered by preference.

        Raises:
            EntitlementExpiredError: If the session was rejected
            StreamError: For any other gateway failure
            NetworkError: On transport failure
        """
        try:
            data = self.gateway.execute(
                endpoints.CONTENT_SEARCH,
                endpoints.CONTENT_SEARCH_QUERY,
                {
                    "query": endpoints.content_search_expression(game_id),
                    "limit": endpoints.CONTENT_SEARCH_LIMIT,
                },
                content_session.content_token,
            )
        except GatewayError as e:
            raise _translate_gateway_error(e) from e

        try:
            results = ContentSearchResults.model_validate(data)
        except ValidationError as e:
            raise StreamError(f"Invalid contentSearch response: {e}") from e

        feeds = [f for f in map(feed_from_stream_data, results.content) if f is not None]
        logger.debug(f"Game {game_id}: {len(feeds)} feeds")
        return order_feeds(feeds, preferred_type, self.preferred_language)

    def resolve(
        self,
        game_id: int,
        feed_id: str,
        content_session: ContentSession,
        feeds: Optional[Sequence[Feed]] = None,
    ) -> PlaybackManifestRef:
        """
        Resolve a feed to a signed playback URL.

        Args:
            game_id: Game the feed belongs to
            feed_id: Feed (media) ID
            content_session: Current content session
            feeds: Already-listed feeds (avoids a second contentSearch)

        Returns:
            PlaybackManifestRef to hand to the player right away

        Raises:
            FeedNotFoundError: If the feed does not belong to the game
            BlackoutError: If the feed is blacked out
            NotYetAvailableError: If the feed cannot be played yet
            EntitlementExpiredError: If the session was rejected
            NoSubscriptionError: If the account is not entitled to the feed
            StreamError: For any other gateway failure
            NetworkError: On transport failure
        """
        if feeds is None:
            feeds = self.list_feeds(game_id, content_session)

        feed = _first(feeds, lambda f: f.feed_id == feed_id)
        if feed is None:
            raise FeedNotFoundError(f"Feed {feed_id} not found for game {game_id}")

        if feed.media_state == MediaState.BLACKOUT:
            raise BlackoutError(f"The {feed.label} feed is blacked out in your area")
        if feed.media_state == MediaState.NOT_YET_AVAILABLE:
            raise NotYetAvailableError(f"The {feed.label} feed is not available yet")

        if feed.url:
            return PlaybackManifestRef(url=feed.url)

        try:
            data = self.gateway.execute(
                endpoints.INIT_PLAYBACK_SESSION,
                endpoints.INIT_PLAYBACK_SESSION_QUERY,
                {
                    "adCapabilities": endpoints.AD_CAPABILITIES,
                    "deviceId": content_session.device_id,
                    "mediaId": feed_id,
                    "quality": endpoints.PLAYBACK_QUALITY,
                    "sessionId": content_session.session_id,
                },
                content_session.content_token,
            )
        except GatewayError as e:
            raise _translate_gateway_error(e) from e

        try:
            results = InitPlaybackSessionResults.model_validate(data)
        except ValidationError as e:
            raise StreamError(f"Invalid initPlaybackSession response: {e}") from e

        logger.info(f"Resolved playback URL for {feed.label} (game {game_id})")
        return PlaybackManifestRef(
            url=results.playback.url,
            valid_until=_parse_expiration(results.playback.expiration),
            cdn_token=results.playback.token,
        )

    def resolve_many(
        self,
        requests: Sequence[ResolveRequest],
        content_session: ContentSession,
    ) -> List[ResolveOutcome]:
        """
        Resolve several (game_id, feed_id) pairs concurrently.

        Returns:
            One entry per request, in input order: a PlaybackManifestRef or
            the MlbvError that request raised
        """

        def resolve_one(request: ResolveRequest) -> ResolveOutcome:
            game_id, feed_id = request
            try:
                return self.resolve(game_id, feed_id, content_session)
            except MlbvError as e:
                logger.debug(f"Could not resolve {feed_id} for game {game_id}: {e}")
                return e

        if not requests:
            return []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(requests))) as pool:
            return list(pool.map(resolve_one, requests))


def _parse_expiration(value: Optional[str]) -> Optional[datetime]:
    """Parse the gateway's ISO-8601 expiration, if present and well-formed."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable playback expiration: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

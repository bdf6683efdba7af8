"""
Domain models shared across the mlbv packages.

These are plain dataclasses/enums built from validated API responses
(see the per-package schemas modules). None of them is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import FrozenSet, Optional


class Capability(str, Enum):
    """Account capability granted by an entitlement."""

    LIVE = "live"
    ARCHIVE = "archive"
    AUDIO = "audio"


class FeedType(str, Enum):
    """Kind of feed for a game."""

    HOME = "home"
    AWAY = "away"
    NATIONAL = "national"
    CONDENSED = "condensed"
    RECAP = "recap"

    @property
    def is_highlight(self) -> bool:
        return self in (FeedType.CONDENSED, FeedType.RECAP)

    @classmethod
    def parse(cls, value: str) -> "FeedType":
        """
        Parse a user- or API-supplied feed type.

        Accepts the API spellings (HOME, AWAY, NETWORK, NATIONAL) as well as
        the CLI ones.

        Raises:
            ValueError: If the value is not a known feed type
        """
        normalized = value.strip().lower()
        if normalized == "network":
            return cls.NATIONAL
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Invalid feed type: {value!r}; expected home, away or national"
            ) from None


class MediaState(str, Enum):
    """Whether a feed can be played right now."""

    AVAILABLE = "available"
    BLACKOUT = "blackout"
    NOT_YET_AVAILABLE = "not_yet_available"


class MediaType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"


# Deterministic tie-break order when ranking feeds
FEED_TYPE_RANK = {
    FeedType.HOME: 0,
    FeedType.AWAY: 1,
    FeedType.NATIONAL: 2,
    FeedType.CONDENSED: 3,
    FeedType.RECAP: 4,
}


@dataclass(frozen=True)
class Feed:
    """
    One playable (or not yet playable) feed of a game.

    Attributes:
        feed_id: Media ID used to request playback
        type: Home, Away, National, Condensed or Recap
        media_state: Available, Blackout or NotYetAvailable
        media_type: Video or Audio
        language: Broadcast language code
        call_sign: Broadcaster call letters (e.g. "MASN")
        url: Direct playback URL (free highlight feeds only)
        title: Human-readable title (highlights)
    """

    feed_id: str
    type: FeedType
    media_state: MediaState
    media_type: MediaType = MediaType.VIDEO
    language: str = "en"
    call_sign: str = ""
    url: Optional[str] = None
    title: str = ""

    @property
    def label(self) -> str:
        """Short display label, e.g. "home (MASN)"."""
        label = self.type.value
        if self.media_type == MediaType.AUDIO:
            label += " audio"
        if self.call_sign:
            label += f" ({self.call_sign})"
        return label


@dataclass(frozen=True)
class ContentSession:
    """
    Media gateway session derived from the identity credentials.

    Attributes:
        content_token: Bearer token accepted by the media gateway
        content_token_expires_at: When content_token stops being accepted
        entitlement_flags: Capabilities the account holds
        session_id: Media gateway session ID
        device_id: Media gateway device ID
    """

    content_token: str = field(repr=False)
    content_token_expires_at: datetime
    entitlement_flags: FrozenSet[Capability]
    session_id: str
    device_id: str

    def expires_within(self, seconds: int) -> bool:
        """True if the session expires within the given number of seconds."""
        buffer_time = datetime.now(timezone.utc) + timedelta(seconds=seconds)
        return buffer_time >= self.content_token_expires_at

    def has_capability(self, capability: Capability) -> bool:
        return capability in self.entitlement_flags


@dataclass(frozen=True)
class PlaybackManifestRef:
    """
    Signed, short-lived playback URL. Resolve immediately before playback.

    Attributes:
        url: Manifest URL (typically HLS) or direct media URL
        valid_until: Expiry reported by the gateway, if any
        cdn_token: CDN token some players must send as x-cdn-token
    """

    url: str
    valid_until: Optional[datetime] = None
    cdn_token: Optional[str] = field(default=None, repr=False)

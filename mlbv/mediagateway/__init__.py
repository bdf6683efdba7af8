"""
MLB media gateway (media-gateway.mlb.com) clients.

Public API:
    MediaGatewayClient: GraphQL transport with error classification
    EntitlementClient: identity token -> ContentSession
    StreamResolver: feeds for a game, feed -> PlaybackManifestRef
    select_feed: feed fallback selection

Exceptions:
    EntitlementError, NoSubscriptionError, EntitlementUnauthorizedError
    StreamError, BlackoutError, NotYetAvailableError,
    EntitlementExpiredError, FeedNotFoundError
"""

from .client import MediaGatewayClient
from .entitlement_client import EntitlementClient, capabilities_for
from .exceptions import (
    BlackoutError,
    EntitlementError,
    EntitlementExpiredError,
    EntitlementUnauthorizedError,
    FeedNotFoundError,
    NoSubscriptionError,
    NotYetAvailableError,
    StreamError,
)
from .stream_resolver import StreamResolver, order_feeds, select_feed

__all__ = [
    # Clients
    "MediaGatewayClient",
    "EntitlementClient",
    "StreamResolver",
    # Helpers
    "capabilities_for",
    "order_feeds",
    "select_feed",
    # Exceptions
    "EntitlementError",
    "NoSubscriptionError",
    "EntitlementUnauthorizedError",
    "StreamError",
    "BlackoutError",
    "NotYetAvailableError",
    "EntitlementExpiredError",
    "FeedNotFoundError",
]

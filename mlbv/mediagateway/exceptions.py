"""Exceptions for the MLB media gateway (entitlements and playback)."""

from typing import Optional, Sequence

from mlbv.api.exceptions import MlbvError


class EntitlementError(MlbvError):
    """Base exception for entitlement (content session) failures."""

    pass


class NoSubscriptionError(EntitlementError):
    """
    The account is valid but lacks the capability required for the content.

    Resolution:
        An MLB.tv subscription (or the audio add-on) is required.
    """

    pass


class EntitlementUnauthorizedError(EntitlementError):
    """The media gateway rejected the identity token outright."""

    pass


class StreamError(MlbvError):
    """Base exception for stream resolution failures."""

    pass


class BlackoutError(StreamError):
    """The feed is blacked out in the viewer's location."""

    pass


class NotYetAvailableError(StreamError):
    """The feed exists but cannot be played yet (game not started, archive pending)."""

    pass


class EntitlementExpiredError(StreamError):
    """
    The content session stopped being accepted mid-use.

    SessionManager refreshes once and retries when it sees this.
    """

    pass


class FeedNotFoundError(StreamError):
    """No feed with the requested ID (or matching the requested type) exists."""

    pass


class GatewayError(MlbvError):
    """
    Media gateway returned an error envelope or an unexpected response.

    Attributes:
        codes: Upper-cased error codes/messages reported by the gateway
        status_code: HTTP status code, if any
    """

    def __init__(
        self,
        message: str,
        codes: Optional[Sequence[str]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.codes = list(codes or [])
        self.status_code = status_code

    def has_code(self, fragment: str) -> bool:
        """True if any reported code/message contains the given fragment."""
        return any(fragment in code for code in self.codes)


class GatewayAuthError(GatewayError):
    """Media gateway rejected the bearer token (401/403 or UNAUTHENTICATED)."""

    pass

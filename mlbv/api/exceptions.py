"""
Root exception classes for mlbv.

Every error raised by the package derives from MlbvError so the CLI can
catch the whole family in one place. Transport failures derive from
NetworkError; package-specific network errors (AuthNetworkError,
ScheduleNetworkError) inherit from both their package base and
NetworkError.
"""


class MlbvError(Exception):
    """Base exception for all mlbv errors."""

    pass


class NetworkError(MlbvError):
    """Transport-level failure talking to an MLB endpoint."""

    pass


class NetworkTimeoutError(NetworkError):
    """Request did not complete within the configured timeout."""

    pass


class ConnectionFailedError(NetworkError):
    """Could not connect to the remote host (DNS, refused, TLS, reset)."""

    pass

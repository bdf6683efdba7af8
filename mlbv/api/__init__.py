"""
Shared HTTP plumbing for the MLB API clients.

- BaseAPIClient: requests session, timeouts, transport error mapping
- NetworkError hierarchy: NetworkTimeoutError, ConnectionFailedError
"""

from .base_client import BaseAPIClient
from .exceptions import (
    ConnectionFailedError,
    MlbvError,
    NetworkError,
    NetworkTimeoutError,
)

__all__ = [
    "BaseAPIClient",
    "MlbvError",
    "NetworkError",
    "NetworkTimeoutError",
    "ConnectionFailedError",
]

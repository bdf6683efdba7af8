"""
OAuth exception classes for the MLB identity provider.

This module defines the exception hierarchy for all login, token and
session errors, providing clear error messages and recovery guidance.
"""

from mlbv.api.exceptions import MlbvError, NetworkError


class AuthError(MlbvError):
    """Base exception for all identity/session errors."""

    pass


class ConfigurationError(AuthError):
    """OAuth configuration error (missing or invalid configuration)."""

    pass


class InvalidGrantError(AuthError):
    """
    The identity provider rejected the grant.

    Raised for a rejected authorization code, a code/verifier mismatch, or
    rejected username/password during password login.
    """

    pass


class RefreshExpiredError(AuthError):
    """
    The refresh token itself was rejected (or none is held).

    Resolution:
        Run `mlbv login` to sign in again.
    """

    pass


class AuthNetworkError(AuthError, NetworkError):
    """Transport failure talking to the identity provider."""

    pass


class AuthorizationError(AuthError):
    """Authorization step failed (no code returned, state mismatch, provider error)."""

    pass


class LoginTimeoutError(AuthorizationError):
    """No authorization code arrived within the bounded login wait."""

    pass


class LoginCancelledError(AuthorizationError):
    """The login was aborted before it completed (e.g. Ctrl-C)."""

    pass


class LoginRequiredError(AuthError):
    """
    No usable session exists and one cannot be obtained without the user.

    Raised when stored credentials are missing/expired and no interactive
    login is available, or when a refresh was irrecoverably rejected.

    Resolution:
        Run `mlbv login`.
    """

    pass


class CredentialStoreError(AuthError):
    """Credential storage operation failed (file I/O error or invalid data)."""

    pass

"""
OAuth 2.0 (Authorization Code + PKCE) session lifecycle for MLB.tv.

Public API:
    IdentityConfig: identity provider configuration
    Credentials / CredentialStore: persisted identity tokens
    IdentityClient: begin_login, complete_login, refresh
    PasswordLoginHandler / BrowserLoginHandler: obtain an authorization code
    SessionManager: ContentSession state machine with single-flight acquisition

Exceptions:
    AuthError: Base exception
    ConfigurationError, InvalidGrantError, RefreshExpiredError,
    AuthNetworkError, AuthorizationError, LoginTimeoutError,
    LoginCancelledError, LoginRequiredError, CredentialStoreError
"""

from .auth_server import AuthorizationResult, BrowserLoginHandler, OAuthCallbackServer
from .config import IdentityConfig
from .credential_store import CredentialStore, Credentials
from .exceptions import (
    AuthError,
    AuthNetworkError,
    AuthorizationError,
    ConfigurationError,
    CredentialStoreError,
    InvalidGrantError,
    LoginCancelledError,
    LoginRequiredError,
    LoginTimeoutError,
    RefreshExpiredError,
)
from .identity_client import IdentityClient
from .login import LoginHandler, PasswordLoginHandler, build_login_handler
from .pkce import AuthorizationRequest
from .session_manager import SessionManager, SessionState

__all__ = [
    # Configuration
    "IdentityConfig",
    # Credential storage
    "Credentials",
    "CredentialStore",
    # Identity provider
    "IdentityClient",
    "AuthorizationRequest",
    # Login handlers
    "LoginHandler",
    "PasswordLoginHandler",
    "BrowserLoginHandler",
    "OAuthCallbackServer",
    "AuthorizationResult",
    "build_login_handler",
    # Session
    "SessionManager",
    "SessionState",
    # Exceptions
    "AuthError",
    "ConfigurationError",
    "InvalidGrantError",
    "RefreshExpiredError",
    "AuthNetworkError",
    "AuthorizationError",
    "LoginTimeoutError",
    "LoginCancelledError",
    "LoginRequiredError",
    "CredentialStoreError",
]

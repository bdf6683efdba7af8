"""
Login handlers.

A login handler turns an AuthorizationRequest into an authorization code.
SessionManager calls it when no usable credentials exist; it is the only
interactive suspension point in the session lifecycle.

Handlers:
    PasswordLoginHandler: headless, using the account username/password
    BrowserLoginHandler: interactive, via a local callback server (auth_server)
"""

import logging
from typing import Callable, Optional

from .auth_server import BrowserLoginHandler
from .config import IdentityConfig
from .exceptions import ConfigurationError
from .identity_client import IdentityClient
from .pkce import AuthorizationRequest

logger = logging.getLogger(__name__)

LoginHandler = Callable[[AuthorizationRequest], str]


class PasswordLoginHandler:
    """Obtain the authorization code with an Okta session token."""

    def __init__(self, identity: IdentityClient, username: str, password: str):
        if not username or not password:
            raise ConfigurationError("Password login requires a username and password")
        self.identity = identity
        self.username = username
        self.password = password

    def __call__(self, auth_request: AuthorizationRequest) -> str:
        session_token = self.identity.authenticate_password(self.username, self.password)
        return self.identity.authorize_with_session_token(auth_request, session_token)


def build_login_handler(
    config: IdentityConfig,
    identity: IdentityClient,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> Optional[LoginHandler]:
    """
    Pick the login handler for the configured login mode.

    Returns:
        A handler, or None when password mode lacks credentials (the session
        manager then reports "login required" instead of prompting)
    """
    if config.login_mode == "browser":
        return BrowserLoginHandler(config)

    if username and password:
        return PasswordLoginHandler(identity, username, password)

    logger.debug("No username/password configured; interactive login unavailable")
    return None

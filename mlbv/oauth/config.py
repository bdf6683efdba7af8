"""
OAuth configuration for the MLB identity provider.

This module provides configuration management for OAuth 2.0 (Authorization
Code + PKCE) against MLB's Okta tenant. The CLI builds it from the
application configuration (see mlbv.config.MlbvConfig.identity_config).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

OKTA_ISSUER = "https://ids.mlb.com/oauth2/aus1m088yK07noBfh356"
DEFAULT_CREDENTIALS_FILE = str(Path.home() / ".mlbv" / "session.json")
VALID_LOGIN_MODES = ("password", "browser")


@dataclass
class IdentityConfig:
    """
    Configuration for MLB OAuth 2.0.

    Attributes:
        client_id: Okta client ID (discovered from the Okta bootstrap script if empty)
        authorization_url: Okta authorization endpoint
        token_url: Okta token endpoint
        authn_url: Okta primary authentication endpoint (password login)
        okta_script_url: Script that embeds the production client ID
        redirect_uri: Redirect URI registered for the client
        scope: Requested scopes (offline_access yields a refresh token)
        credentials_file: Absolute path to the session file
        login_mode: "password" (headless) or "browser" (local callback server)
        callback_port: Port for the local callback server (browser mode)
        login_timeout_seconds: Upper bound on waiting for an authorization code
        timeout_seconds: Per-request network timeout
        safety_margin_seconds: Treat tokens as expiring this long before expiry
        default_token_lifetime_seconds: Lifetime assumed when the provider omits expires_in
    """

    client_id: Optional[str] = None

    # Okta endpoints
    authorization_url: str = f"{OKTA_ISSUER}/v1/authorize"
    token_url: str = f"{OKTA_ISSUER}/v1/token"
    authn_url: str = "https://ids.mlb.com/api/v1/authn"
    okta_script_url: str = "https://www.mlbstatic.com/mlb.com/vendor/mlb-okta/mlb-okta.js"

    redirect_uri: str = "https://www.mlb.com/login"
    scope: str = "openid profile email offline_access"

    credentials_file: str = DEFAULT_CREDENTIALS_FILE

    # Login flow
    login_mode: str = "password"
    callback_port: int = 8765
    login_timeout_seconds: int = 300

    # Network / expiry
    timeout_seconds: float = 30
    safety_margin_seconds: int = 60
    default_token_lifetime_seconds: int = 300

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.login_mode not in VALID_LOGIN_MODES:
            raise ConfigurationError(
                f"login_mode must be one of: {', '.join(VALID_LOGIN_MODES)}, "
                f"got {self.login_mode!r}"
            )

        if not isinstance(self.callback_port, int) or not (
            1 <= self.callback_port <= 65535
        ):
            raise ConfigurationError(
                f"callback_port must be between 1 and 65535, got {self.callback_port}"
            )

        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive")

        if self.login_timeout_seconds <= 0:
            raise ConfigurationError("login_timeout_seconds must be positive")

        if self.safety_margin_seconds < 0:
            raise ConfigurationError("safety_margin_seconds cannot be negative")

        if self.default_token_lifetime_seconds <= 0:
            raise ConfigurationError("default_token_lifetime_seconds must be positive")

    @property
    def callback_url(self) -> str:
        """
        Loopback redirect URI used by the browser login.

        Returns:
            Local callback URL (e.g., http://localhost:8765/oauth/callback)
        """
        return f"http://localhost:{self.callback_port}/oauth/callback"

    @property
    def effective_redirect_uri(self) -> str:
        """Redirect URI actually sent to the provider for the configured login mode."""
        if self.login_mode == "browser":
            return self.callback_url
        return self.redirect_uri

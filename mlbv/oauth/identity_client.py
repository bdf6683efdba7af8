"""
Identity client for MLB's Okta tenant.

This module implements the OAuth token lifecycle against the identity
provider:
- PKCE authorization request (verifier/challenge, state, nonce)
- Token exchange (authorization code + verifier -> access/refresh tokens)
- Token refresh (refresh token -> new access token)
- Headless authorization via an Okta session token (username/password)
"""

import codecs
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

import requests
from pydantic import BaseModel

from mlbv.api.base_client import BaseAPIClient
from mlbv.api.exceptions import NetworkError

from .config import IdentityConfig
from .credential_store import Credentials
from .exceptions import (
    AuthError,
    AuthNetworkError,
    AuthorizationError,
    InvalidGrantError,
    RefreshExpiredError,
)
from .pkce import (
    AuthorizationRequest,
    derive_code_challenge,
    generate_code_verifier,
    generate_state,
)

logger = logging.getLogger(__name__)

CLIENT_ID_PATTERN = re.compile(r'production:\{clientId:"([^"]+)",')
POST_MESSAGE_CODE_PATTERN = re.compile(r"data\.code\s*=\s*'([^']+)'")
POST_MESSAGE_STATE_PATTERN = re.compile(r"data\.state\s*=\s*'([^']+)'")
POST_MESSAGE_ERROR_PATTERN = re.compile(r"data\.error_description\s*=\s*'([^']+)'")


class TokenResponse(BaseModel):
    """Token endpoint response body."""

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    scope: str = ""
    id_token: Optional[str] = None


class AuthnResponse(BaseModel):
    """Okta primary authentication response body."""

    status: str
    sessionToken: Optional[str] = None


def _js_unescape(value: str) -> str:
    """Undo JavaScript string escaping (e.g. \\x2D) in scraped values."""
    return codecs.decode(value, "unicode_escape")


def _error_detail(response: requests.Response) -> str:
    """Best-effort "error: description" from an OAuth error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if not isinstance(body, dict):
        return str(body)[:200]
    error = body.get("error") or body.get("errorCode") or "unknown_error"
    description = body.get("error_description") or body.get("errorSummary") or ""
    return f"{error}: {description}".rstrip(": ")


class IdentityClient(BaseAPIClient):
    """
    OAuth 2.0 Authorization Code + PKCE client for the MLB identity provider.

    Responsibilities:
    - Build authorization requests (begin_login)
    - Exchange authorization codes for tokens (complete_login)
    - Refresh access tokens (refresh)
    - Obtain an authorization code headlessly from a username/password

    The client holds no session state of its own; SessionManager owns the
    Credentials it returns.
    """

    def __init__(
        self,
        config: IdentityConfig,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize identity client.

        Args:
            config: OAuth configuration
            session: Optional shared requests session
        """
        super().__init__(timeout=config.timeout_seconds, session=session)
        self.config = config
        self._client_id: Optional[str] = config.client_id

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        """Issue a request, reporting transport failures as AuthNetworkError."""
        try:
            return self._request(method, url, **kwargs)
        except NetworkError as e:
            raise AuthNetworkError(f"Network error talking to identity provider: {e}") from e

    def get_client_id(self) -> str:
        """
        Get the OAuth client ID, discovering it if not configured.

        The production client ID is embedded in MLB's Okta bootstrap script;
        it is fetched once and cached for the life of the client.

        Returns:
            Client ID string

        Raises:
            AuthorizationError: If the script does not contain a client ID
            AuthNetworkError: On transport failure
        """
        if self._client_id:
            return self._client_id

        logger.debug("Discovering Okta client ID")
        response = self._send("GET", self.config.okta_script_url)
        if response.status_code != 200:
            raise AuthorizationError(
                f"Could not fetch Okta bootstrap script (status {response.status_code})"
            )

        match = CLIENT_ID_PATTERN.search(response.text)
        if not match:
            raise AuthorizationError("clientId not found in Okta bootstrap script")

        self._client_id = match.group(1)
        logger.debug("Discovered Okta client ID")
        return self._client_id

    def begin_login(self, response_mode: Optional[str] = None) -> AuthorizationRequest:
        """
        Start a PKCE login.

        Generates a fresh verifier, its S256 challenge, and state/nonce
        values, and builds the authorization URL.

        Args:
            response_mode: OAuth response_mode (default: okta_post_message for
                           password login, query for browser login)

        Returns:
            AuthorizationRequest holding the URL and (in memory) the verifier
        """
        client_id = self.get_client_id()
        verifier = generate_code_verifier()
        challenge = derive_code_challenge(verifier)
        state = generate_state()
        nonce = generate_state()
        redirect_uri = self.config.effective_redirect_uri

        if response_mode is None:
            response_mode = (
                "query" if self.config.login_mode == "browser" else "okta_post_message"
            )

        params = {
            "client_id": client_id,
            "response_type": "code",
            "response_mode": response_mode,
            "scope": self.config.scope,
            "redirect_uri": redirect_uri,
            "state": state,
            "nonce": nonce,
            "code_challenge": challenge,
            "code_challenge_method": "S256",
        }
        url = f"{self.config.authorization_url}?{urlencode(params)}"
        logger.info("Prepared authorization request")

        return AuthorizationRequest(
            url=url,
            state=state,
            nonce=nonce,
            code_verifier=verifier,
            code_challenge=challenge,
            redirect_uri=redirect_uri,
            client_id=client_id,
        )

    def complete_login(
        self,
        authorization_code: str,
        verifier: str,
        redirect_uri: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> Credentials:
        """
        Exchange authorization code for access and refresh tokens.

        Args:
            authorization_code: Code received from the authorization step
            verifier: PKCE verifier from the matching AuthorizationRequest
            redirect_uri: Redirect URI used in the request (default: configured)
            device_id: Device identifier to carry into the credentials

        Returns:
            Credentials with access and refresh tokens

        Raises:
            InvalidGrantError: If the code or verifier is rejected
            AuthNetworkError: On transport failure
            AuthError: For any other unexpected response
        """
        logger.info("Exchanging authorization code for tokens")

        response = self._send(
            "POST",
            self.config.token_url,
            data={
                "client_id": self.get_client_id(),
                "grant_type": "authorization_code",
                "code": authorization_code,
                "code_verifier": verifier,
                "redirect_uri": redirect_uri or self.config.effective_redirect_uri,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        if response.status_code in (400, 401):
            detail = _error_detail(response)
            logger.error(f"Token exchange rejected: {response.status_code} - {detail}")
            raise InvalidGrantError(f"Authorization code was rejected ({detail})")

        if response.status_code != 200:
            logger.error(f"Token exchange failed: {response.status_code}")
            raise AuthError(f"Token exchange failed with status {response.status_code}")

        credentials = self._credentials_from_response(response, device_id=device_id)
        logger.info("Successfully obtained tokens")
        return credentials

    def refresh(self, credentials: Credentials) -> Credentials:
        """
        Refresh access token using refresh token.

        Args:
            credentials: Current credentials (must hold a refresh token)

        Returns:
            New Credentials with a fresh access token

        Raises:
            RefreshExpiredError: If the refresh token is missing or rejected
            AuthNetworkError: On transport failure
            AuthError: For any other unexpected response
        """
        if not credentials.refresh_token:
            raise RefreshExpiredError("No refresh token available. Log in again.")

        logger.info("Refreshing access token")

        response = self._send(
            "POST",
            self.config.token_url,
            data={
                "client_id": self.get_client_id(),
                "grant_type": "refresh_token",
                "refresh_token": credentials.refresh_token,
                "scope": credentials.scope or self.config.scope,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        if response.status_code in (400, 401):
            detail = _error_detail(response)
            logger.error(f"Token refresh rejected: {response.status_code} - {detail}")
            raise RefreshExpiredError(
                f"Refresh token was rejected ({detail}). Log in again."
            )

        if response.status_code != 200:
            logger.error(f"Token refresh failed: {response.status_code}")
            raise AuthError(f"Token refresh failed with status {response.status_code}")

        refreshed = self._credentials_from_response(
            response, device_id=credentials.device_id, previous=credentials
        )
        logger.info("Successfully refreshed tokens")
        return refreshed

    def authenticate_password(self, username: str, password: str) -> str:
        """
        Trade a username/password for an Okta session token.

        Args:
            username: MLB.tv account email
            password: MLB.tv account password

        Returns:
            Single-use Okta session token

        Raises:
            InvalidGrantError: If the credentials are rejected
            AuthorizationError: If Okta requires an extra step (e.g. MFA)
            AuthNetworkError: On transport failure
        """
        logger.info("Authenticating with username and password")

        response = self._send(
            "POST",
            self.config.authn_url,
            json_data={
                "username": username,
                "password": password,
                "options": {
                    "multiOptionalFactorEnroll": False,
                    "warnBeforePasswordExpired": True,
                },
            },
            headers={"Content-Type": "application/json"},
        )

        if response.status_code in (400, 401, 403):
            raise InvalidGrantError("MLB.tv username or password was rejected")

        if response.status_code != 200:
            raise AuthError(f"Authentication failed with status {response.status_code}")

        try:
            authn = AuthnResponse.model_validate(response.json())
        except ValueError as e:
            raise AuthError(f"Invalid response from authentication endpoint: {e}") from e

        if authn.status != "SUCCESS" or not authn.sessionToken:
            raise AuthorizationError(
                f"Login requires an additional step ({authn.status}); "
                f"use browser login instead"
            )

        return authn.sessionToken

    def authorize_with_session_token(
        self, request: AuthorizationRequest, session_token: str
    ) -> str:
        """
        Complete the authorization step headlessly.

        Okta answers an okta_post_message authorization request with a small
        HTML page that posts the code back to the opener; the code and state
        are scraped from that page.

        Args:
            request: Pending authorization request
            session_token: Token from authenticate_password

        Returns:
            Authorization code

        Raises:
            AuthorizationError: If no code is returned or the state does not match
            AuthNetworkError: On transport failure
        """
        response = self._send(
            "GET",
            request.url,
            params={"sessionToken": session_token},
        )

        if response.status_code != 200:
            raise AuthorizationError(
                f"Authorization request failed with status {response.status_code}"
            )

        body = response.text

        code_match = POST_MESSAGE_CODE_PATTERN.search(body)
        if not code_match:
            error_match = POST_MESSAGE_ERROR_PATTERN.search(body)
            if error_match:
                raise AuthorizationError(
                    f"Authorization failed: {_js_unescape(error_match.group(1))}"
                )
            raise AuthorizationError(
                "Authorization code not found in okta_post_message response"
            )

        state_match = POST_MESSAGE_STATE_PATTERN.search(body)
        if state_match and _js_unescape(state_match.group(1)) != request.state:
            raise AuthorizationError("Authorization response state does not match request")

        return _js_unescape(code_match.group(1))

    def _credentials_from_response(
        self,
        response: requests.Response,
        device_id: Optional[str] = None,
        previous: Optional[Credentials] = None,
    ) -> Credentials:
        """
        Build Credentials from a successful token endpoint response.

        Raises:
            AuthError: If the body is not a valid token response
        """
        try:
            token = TokenResponse.model_validate(response.json())
        except ValueError as e:
            logger.error(f"Invalid response from token endpoint: {e}")
            raise AuthError(f"Invalid response from token endpoint: {e}") from e

        expires_in = token.expires_in
        if expires_in is None:
            expires_in = self.config.default_token_lifetime_seconds
            logger.warning(
                f"Token endpoint omitted expires_in; assuming {expires_in}s lifetime"
            )

        refresh_token = token.refresh_token
        if refresh_token is None and previous is not None:
            # Provider did not rotate the refresh token
            refresh_token = previous.refresh_token

        return Credentials(
            access_token=token.access_token,
            refresh_token=refresh_token,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
            device_id=device_id,
            token_type=token.token_type,
            scope=token.scope or (previous.scope if previous else ""),
        )

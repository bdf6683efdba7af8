"""
OAuth callback server for browser-based login.

This module provides a loopback HTTP server that receives the authorization
code redirect during an interactive login. It runs only for the duration of
one login and shuts down after the first callback, the bounded wait
expiring, or an explicit stop().
"""

import logging
import threading
import webbrowser
from dataclasses import dataclass
from typing import Optional

import click
from flask import Flask, Response, request
from werkzeug.serving import make_server

from .config import IdentityConfig
from .exceptions import AuthorizationError, LoginCancelledError, LoginTimeoutError
from .pkce import AuthorizationRequest

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/oauth/callback"

_PAGE = """<html>
<head><title>{title}</title></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px;">
    <h1>{title}</h1>
    <p>{message}</p>
    <p style="margin-top: 30px; color: #666;">You can close this window and return to the terminal.</p>
</body>
</html>"""


@dataclass
class AuthorizationResult:
    """
    Result of the browser authorization step.

    Attributes:
        success: Whether authorization succeeded
        authorization_code: Authorization code from callback (if successful)
        error: Error code from OAuth provider (if failed)
        error_description: Human-readable error description (if failed)
    """

    success: bool
    authorization_code: Optional[str] = None
    error: Optional[str] = None
    error_description: Optional[str] = None


class OAuthCallbackServer:
    """
    Local HTTP server to handle the OAuth redirect.

    The server:
    1. Listens on localhost at the configured port
    2. Accepts exactly one callback carrying code (or error) and state
    3. Rejects callbacks whose state does not match the pending request
    4. Signals waiters through a threading.Event
    """

    def __init__(self, config: IdentityConfig, expected_state: str):
        """
        Initialize callback server.

        Args:
            config: OAuth configuration (callback port)
            expected_state: State value of the pending AuthorizationRequest
        """
        self.config = config
        self.expected_state = expected_state
        self.app = Flask(__name__)
        self.app.logger.setLevel(logging.WARNING)
        self.result: Optional[AuthorizationResult] = None
        self._server = None
        self._thread: Optional[threading.Thread] = None
        self._done = threading.Event()
        self._cancelled = False

        self.app.add_url_rule(
            CALLBACK_PATH,
            "oauth_callback",
            self._handle_callback,
            methods=["GET"],
        )

    def _finish(self, result: AuthorizationResult) -> None:
        self.result = result
        self._done.set()

    def _handle_callback(self) -> Response:
        """Handle the OAuth redirect."""
        logger.info("Received OAuth callback")

        if request.args.get("state") != self.expected_state:
            logger.warning("Ignoring callback with mismatched state")
            return Response(
                _PAGE.format(title="Authorization Failed", message="State mismatch."),
                status=400,
                content_type="text/html",
            )

        error = request.args.get("error")
        if error:
            error_desc = request.args.get("error_description", "Unknown error")
            logger.error(f"OAuth error: {error} - {error_desc}")
            self._finish(
                AuthorizationResult(success=False, error=error, error_description=error_desc)
            )
            return Response(
                _PAGE.format(title="Authorization Failed", message=f"{error}: {error_desc}"),
                status=400,
                content_type="text/html",
            )

        code = request.args.get("code")
        if not code:
            logger.error("No authorization code in callback")
            self._finish(
                AuthorizationResult(
                    success=False,
                    error="missing_code",
                    error_description="No authorization code received",
                )
            )
            return Response(
                _PAGE.format(
                    title="Authorization Failed",
                    message="No authorization code received from MLB.",
                ),
                status=400,
                content_type="text/html",
            )

        logger.info("Authorization code received successfully")
        self._finish(AuthorizationResult(success=True, authorization_code=code))
        return Response(
            _PAGE.format(title="Login Successful", message="mlbv is now signed in."),
            status=200,
            content_type="text/html",
        )

    def start(self) -> None:
        """
        Start the callback server in a background thread.

        Raises:
            AuthorizationError: If the callback port cannot be bound
        """
        try:
            self._server = make_server("127.0.0.1", self.config.callback_port, self.app)
        except OSError as e:
            logger.error(f"Cannot bind OAuth callback server: {e}")
            raise AuthorizationError(
                f"Cannot listen on callback_port {self.config.callback_port}: {e}. "
                "Choose another port in the mlbv configuration."
            ) from e
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info(f"OAuth callback server listening on {self.config.callback_url}")

    def wait_for_callback(self, timeout: float) -> AuthorizationResult:
        """
        Block until a callback arrives, the wait times out, or stop() is called.

        Args:
            timeout: Maximum seconds to wait

        Returns:
            AuthorizationResult with code or error

        Raises:
            LoginTimeoutError: If nothing arrived within timeout
            LoginCancelledError: If stop() was called while waiting
        """
        logger.info(f"Waiting for OAuth callback (timeout: {timeout}s)")

        if not self._done.wait(timeout=timeout):
            logger.warning(f"Timeout waiting for callback after {timeout}s")
            raise LoginTimeoutError(
                f"No login callback received within {timeout} seconds"
            )

        if self._cancelled or self.result is None:
            raise LoginCancelledError("Login was cancelled")

        return self.result

    def stop(self) -> None:
        """Stop the server and release any waiter."""
        if not self._done.is_set():
            self._cancelled = True
            self._done.set()
        if self._server is not None:
            self._server.shutdown()
            self._server = None
            logger.info("OAuth callback server stopped")


class BrowserLoginHandler:
    """
    Interactive login: the user signs in through their own browser.

    Call with an AuthorizationRequest; returns the authorization code.
    """

    def __init__(self, config: IdentityConfig, open_browser: bool = True):
        self.config = config
        self.open_browser = open_browser

    def __call__(self, auth_request: AuthorizationRequest) -> str:
        """
        Run the browser authorization step.

        Raises:
            AuthorizationError: If the provider reported an error
            LoginTimeoutError: If the bounded wait expired
            LoginCancelledError: If interrupted
        """
        server = OAuthCallbackServer(self.config, expected_state=auth_request.state)
        try:
            server.start()

            click.echo("\nSign in to MLB.tv by visiting:\n")
            click.echo(f"  {auth_request.url}\n")
            if self.open_browser:
                try:
                    webbrowser.open(auth_request.url)
                except webbrowser.Error as e:
                    logger.warning(f"Could not open browser automatically: {e}")

            try:
                result = server.wait_for_callback(self.config.login_timeout_seconds)
            except KeyboardInterrupt as e:
                raise LoginCancelledError("Login was cancelled") from e

            if not result.success:
                raise AuthorizationError(
                    f"Authorization failed: {result.error} - {result.error_description}"
                )
            return result.authorization_code
        finally:
            server.stop()

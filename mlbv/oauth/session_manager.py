"""
Session lifecycle management.

SessionManager owns the identity Credentials and the derived media gateway
ContentSession. It decides when to reuse, refresh, re-exchange or log in,
and guarantees that concurrent callers share a single acquisition.

State machine over the ContentSession:

    ABSENT   --(load/login + exchange)-->  VALID
    VALID    --(now + margin >= expiry)--> EXPIRING
    EXPIRING --(refresh + exchange)------> VALID
    any      --(non-expiry failure)------> ABSENT
"""

import dataclasses
import logging
import threading
from concurrent.futures import Future, wait
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from mlbv.mediagateway.entitlement_client import EntitlementClient
from mlbv.mediagateway.exceptions import (
    EntitlementExpiredError,
    EntitlementUnauthorizedError,
    NoSubscriptionError,
)
from mlbv.mediagateway.stream_resolver import StreamResolver
from mlbv.models import Capability, ContentSession, Feed, FeedType, PlaybackManifestRef

from .config import IdentityConfig
from .credential_store import CredentialStore, Credentials
from .exceptions import (
    AuthError,
    AuthNetworkError,
    LoginCancelledError,
    LoginRequiredError,
    RefreshExpiredError,
)
from .identity_client import IdentityClient
from .login import LoginHandler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionState(str, Enum):
    ABSENT = "absent"
    VALID = "valid"
    EXPIRING = "expiring"


class _Mode(str, Enum):
    """How an acquisition obtains its credentials."""

    AUTO = "auto"  # stored credentials, refresh if expiring, login if absent
    REFRESH = "refresh"  # force one refresh of the stored credentials
    LOGIN = "login"  # force a fresh interactive login


class SessionManager:
    """
    High-level session interface used by the CLI.

    Example:
        manager = SessionManager(config, identity, entitlements, login_handler=handler)
        session = manager.ensure_valid_session(Capability.LIVE)
        ref = manager.resolve_stream(resolver, game_id, feed_id, Capability.LIVE)
    """

    def __init__(
        self,
        config: IdentityConfig,
        identity: IdentityClient,
        entitlements: EntitlementClient,
        store: Optional[CredentialStore] = None,
        login_handler: Optional[LoginHandler] = None,
    ):
        """
        Initialize session manager.

        Args:
            config: Identity configuration (safety margin, session file)
            identity: Identity provider client
            entitlements: Media gateway entitlement client
            store: Credential store (default: config.credentials_file)
            login_handler: Obtains an authorization code interactively;
                           None means "report login required" instead
        """
        self.config = config
        self.identity = identity
        self.entitlements = entitlements
        self.store = store or CredentialStore(config.credentials_file)
        self.login_handler = login_handler

        self._lock = threading.Lock()
        self._pending: Optional[Future] = None
        self._pending_mode: Optional[_Mode] = None
        self._session: Optional[ContentSession] = None
        self._credentials: Optional[Credentials] = None

    @property
    def state(self) -> SessionState:
        session = self._session
        if session is None:
            return SessionState.ABSENT
        if session.expires_within(self.config.safety_margin_seconds):
            return SessionState.EXPIRING
        return SessionState.VALID

    def _valid_session(self) -> Optional[ContentSession]:
        session = self._session
        if session is None or session.expires_within(self.config.safety_margin_seconds):
            return None
        return session

    def ensure_valid_session(
        self, required_capability: Optional[Capability] = None
    ) -> ContentSession:
        """
        Return a usable ContentSession, acquiring one if needed.

        A VALID session is returned without any network call. Otherwise the
        stored credentials are loaded (refreshed when expiring) or a login is
        run, then exchanged for a new content session. Concurrent callers
        share one acquisition.

        Args:
            required_capability: Capability the caller needs

        Returns:
            A ContentSession that is not within the safety margin of expiry

        Raises:
            LoginRequiredError: If no usable credentials exist and none can be
                                obtained without the user
            NoSubscriptionError: If required_capability is not held
            AuthError: If login failed
            NetworkError: On transport failure
        """
        session = self._valid_session()
        if session is None:
            session = self._acquire(_Mode.AUTO)
        self._check_capability(session, required_capability)
        return session

    def resolve_stream(
        self,
        resolver: StreamResolver,
        game_id: int,
        feed_id: str,
        required_capability: Optional[Capability] = None,
        feeds: Optional[Sequence[Feed]] = None,
    ) -> PlaybackManifestRef:
        """
        Ensure a session and resolve a feed, retrying once on session expiry.

        Raises:
            Everything ensure_valid_session and StreamResolver.resolve raise;
            EntitlementExpiredError only if the retry fails the same way
        """
        return self._with_session(
            required_capability,
            lambda session: resolver.resolve(game_id, feed_id, session, feeds=feeds),
        )

    def list_feeds(
        self,
        resolver: StreamResolver,
        game_id: int,
        required_capability: Optional[Capability] = None,
        preferred_type: Optional[FeedType] = None,
    ) -> List[Feed]:
        """List a game's feeds, with the same one-shot retry as resolve_stream."""
        return self._with_session(
            required_capability,
            lambda session: resolver.list_feeds(game_id, session, preferred_type),
        )

    def _with_session(
        self,
        required_capability: Optional[Capability],
        action: Callable[[ContentSession], T],
    ) -> T:
        session = self.ensure_valid_session(required_capability)
        try:
            return action(session)
        except EntitlementExpiredError:
            logger.info("Content session expired; refreshing once")
            self.invalidate(session)

        session = self._acquire(_Mode.REFRESH)
        self._check_capability(session, required_capability)
        return action(session)

    def login(self) -> ContentSession:
        """
        Run a fresh interactive login, replacing any stored credentials.

        Raises:
            LoginRequiredError: If no login handler is configured
            InvalidGrantError: If the provider rejected the login
            AuthError: For other login failures
        """
        self.invalidate()
        return self._acquire(_Mode.LOGIN)

    def logout(self) -> bool:
        """
        Forget the session and delete the stored tokens.

        The device ID is kept (as anonymous credentials) so the media gateway
        keeps seeing the same device after the next login.

        Returns:
            True if tokens were stored, False if already logged out
        """
        with self._lock:
            self._session = None
            credentials = self._credentials or self.store.load()
            self._credentials = None

            had_tokens = credentials is not None and credentials.has_tokens
            self.store.delete()
            if credentials is not None and credentials.device_id:
                self.store.save(Credentials.anonymous_for(credentials.device_id))

        if had_tokens:
            logger.info("Logged out")
        return had_tokens

    def invalidate(self, session: Optional[ContentSession] = None) -> None:
        """Discard the content session (only if it is still `session`, when given)."""
        with self._lock:
            if session is None or self._session is session:
                self._session = None

    def status(self) -> Dict[str, Any]:
        """
        Get current session status for diagnostics. Never includes tokens.

        Returns:
            Dictionary with:
            - logged_in: bool
            - state: absent / valid / expiring
            - session_file: path of the credentials file
            - expires_at / expires_in_seconds / expired (if logged in)
            - has_device_id: bool
            - capabilities: list (if a content session is active)
        """
        credentials = self._credentials or self.store.load()
        status: Dict[str, Any] = {
            "logged_in": credentials is not None and credentials.has_tokens,
            "state": self.state.value,
            "session_file": str(self.store.credentials_file),
            "has_device_id": bool(credentials and credentials.device_id),
        }

        if credentials is not None and credentials.has_tokens and credentials.expires_at:
            remaining = (credentials.expires_at - datetime.now(timezone.utc)).total_seconds()
            status.update({
                "expires_at": credentials.expires_at.isoformat(),
                "expires_in_seconds": max(0, int(remaining)),
                "expired": credentials.is_expired,
            })

        session = self._session
        if session is not None:
            status["capabilities"] = sorted(c.value for c in session.entitlement_flags)

        return status

    def _check_capability(
        self, session: ContentSession, required_capability: Optional[Capability]
    ) -> None:
        if required_capability is not None and not session.has_capability(required_capability):
            raise NoSubscriptionError(
                f"Your MLB.tv account does not include {required_capability.value} access"
            )

    def _acquire(self, mode: "_Mode") -> ContentSession:
        """
        Single-flight acquisition.

        The first caller runs the acquisition; callers arriving while it is
        pending wait on the same Future and get the same session or error.
        A forced login does not join a pending refresh or automatic
        acquisition: it waits for it to finish and then runs its own.
        """
        while True:
            with self._lock:
                if mode == _Mode.AUTO:
                    session = self._valid_session()
                    if session is not None:
                        return session

                pending = self._pending
                if pending is None:
                    pending = Future()
                    self._pending = pending
                    self._pending_mode = mode
                    break
                join = mode != _Mode.LOGIN or self._pending_mode == _Mode.LOGIN

            if join:
                logger.debug("Waiting for in-flight session acquisition")
                return pending.result()

            logger.debug("Waiting for in-flight acquisition before logging in")
            wait([pending])

        try:
            session = self._run_acquisition(mode)
        except Exception as e:
            self._release(pending)
            pending.set_exception(e)
            raise
        except BaseException:
            self._release(pending)
            pending.set_exception(LoginCancelledError("Login was cancelled"))
            raise

        self._release(pending)
        pending.set_result(session)
        return session

    def _release(self, pending: Future) -> None:
        with self._lock:
            if self._pending is pending:
                self._pending = None
                self._pending_mode = None

    def _run_acquisition(self, mode: "_Mode") -> ContentSession:
        self._session = None
        credentials = self._credentials or self.store.load()

        if mode == _Mode.LOGIN or credentials is None or not credentials.has_tokens:
            device_id = credentials.device_id if credentials else None
            credentials = self._interactive_login(device_id)
            return self._exchange(credentials, fresh=True)

        refreshed = False
        if mode == _Mode.REFRESH or credentials.expires_within(
            self.config.safety_margin_seconds
        ):
            credentials = self._refresh(credentials)
            refreshed = True

        return self._exchange(credentials, fresh=refreshed)

    def _interactive_login(self, device_id: Optional[str]) -> Credentials:
        if self.login_handler is None:
            raise LoginRequiredError("Not logged in. Run `mlbv login` first.")

        logger.info("Starting login")
        auth_request = self.identity.begin_login()
        code = self.login_handler(auth_request)
        credentials = self.identity.complete_login(
            code,
            auth_request.code_verifier,
            redirect_uri=auth_request.redirect_uri,
            device_id=device_id,
        )
        self.store.save(credentials)
        self._credentials = credentials
        logger.info("Login complete")
        return credentials

    def _refresh(self, credentials: Credentials) -> Credentials:
        try:
            refreshed = self.identity.refresh(credentials)
        except RefreshExpiredError as e:
            logger.warning("Refresh token rejected; stored session discarded")
            self._credentials = None
            self.store.delete()
            if credentials.device_id:
                self.store.save(Credentials.anonymous_for(credentials.device_id))
            raise LoginRequiredError(
                "Your MLB.tv session has expired. Run `mlbv login`."
            ) from e
        except AuthNetworkError:
            raise
        except AuthError as e:
            logger.warning(f"Token refresh failed: {e}")
            raise LoginRequiredError(
                f"Could not refresh your MLB.tv session ({e}). Run `mlbv login`."
            ) from e

        self.store.save(refreshed)
        self._credentials = refreshed
        return refreshed

    def _exchange(self, credentials: Credentials, fresh: bool) -> ContentSession:
        """
        Exchange credentials for a content session.

        A rejection of credentials that were not just obtained triggers one
        refresh and a second exchange; a second rejection needs a new login.
        """
        try:
            session = self.entitlements.exchange(
                credentials.access_token,
                device_id=credentials.device_id,
                token_expires_at=credentials.expires_at,
            )
        except EntitlementUnauthorizedError as e:
            if fresh:
                raise LoginRequiredError(
                    "MLB.tv rejected your session. Run `mlbv login`."
                ) from e
            logger.info("Content session rejected; refreshing once")
            return self._exchange(self._refresh(credentials), fresh=True)

        if session.device_id and session.device_id != credentials.device_id:
            credentials = dataclasses.replace(credentials, device_id=session.device_id)
            self.store.save(credentials)
            self._credentials = credentials

        self._session = session
        return session

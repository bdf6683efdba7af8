"""
Credential storage for the MLB identity session.

This module provides file-based persistence of the identity tokens with
expiry tracking. The file is written atomically (temp file + rename) so an
interrupted login never corrupts a previously stored session, and an
unreadable file is treated exactly like a missing one.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from .exceptions import CredentialStoreError

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """
    Identity provider tokens for one signed-in user.

    Attributes:
        access_token: Short-lived identity access token
        refresh_token: Long-lived token for obtaining new access tokens
        expires_at: When the access token expires (timezone-aware UTC)
        device_id: Media gateway device identifier
        token_type: Token type (typically "Bearer")
        scope: Granted OAuth scopes
        anonymous: True for a device-only record with no tokens
    """

    access_token: Optional[str] = field(default=None, repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    expires_at: Optional[datetime] = None
    device_id: Optional[str] = None
    token_type: str = "Bearer"
    scope: str = ""
    anonymous: bool = False

    @classmethod
    def anonymous_for(cls, device_id: Optional[str]) -> "Credentials":
        """Device-only credentials kept across logout."""
        return cls(device_id=device_id, anonymous=True)

    @property
    def has_tokens(self) -> bool:
        """True if both access and refresh tokens are present."""
        return bool(self.access_token) and bool(self.refresh_token)

    @property
    def is_persistable(self) -> bool:
        """Credentials may be written only with both tokens or when anonymous."""
        if self.anonymous:
            return True
        return self.has_tokens and self.expires_at is not None

    @property
    def is_expired(self) -> bool:
        """
        Check if access token is expired.

        Returns:
            True if token has expired (or there is none), False otherwise
        """
        if self.anonymous or self.expires_at is None:
            return True
        return datetime.now(timezone.utc) >= self.expires_at

    def expires_within(self, seconds: int) -> bool:
        """
        Check if token expires within given seconds.

        Args:
            seconds: Number of seconds to check

        Returns:
            True if token will expire within the specified time, False otherwise
        """
        if self.anonymous or self.expires_at is None:
            return True
        buffer_time = datetime.now(timezone.utc) + timedelta(seconds=seconds)
        return buffer_time >= self.expires_at

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the credentials
        """
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "device_id": self.device_id,
            "token_type": self.token_type,
            "scope": self.scope,
            "anonymous": self.anonymous,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Credentials":
        """
        Create Credentials from dictionary.

        Args:
            data: Dictionary with credential fields

        Returns:
            Credentials instance

        Raises:
            KeyError: If required fields are missing
            TypeError: If fields have wrong types
            ValueError: If expires_at is not an ISO timestamp, or tokens are
                        missing on non-anonymous credentials
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")

        anonymous = bool(data.get("anonymous", False))
        expires_at = None
        if data.get("expires_at"):
            expires_at = datetime.fromisoformat(data["expires_at"])
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)

        credentials = cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=expires_at,
            device_id=data.get("device_id"),
            token_type=data.get("token_type", "Bearer"),
            scope=data.get("scope", ""),
            anonymous=anonymous,
        )

        if not credentials.is_persistable:
            raise ValueError("Stored credentials are missing tokens or expiry")

        return credentials


class CredentialStore:
    """
    File-based credential storage (plaintext JSON, mode 600).

    Absence of the file means "not logged in". A truncated or otherwise
    unparseable file is logged and reported as absent; it never raises.
    """

    def __init__(self, credentials_file: str):
        """
        Initialize credential storage.

        Args:
            credentials_file: Path to the session file
                              (e.g., ~/.mlbv/session.json)
        """
        self.credentials_file = Path(credentials_file).expanduser()

    def _ensure_directory(self) -> None:
        """Create parent directory if needed."""
        self.credentials_file.parent.mkdir(parents=True, exist_ok=True)

    def save(self, credentials: Credentials) -> None:
        """
        Save credentials atomically.

        The JSON document is written to a temporary file in the same
        directory, flushed to disk, restricted to mode 600 and renamed over
        the target.

        Args:
            credentials: Credentials to save

        Raises:
            CredentialStoreError: If credentials lack tokens or the write fails
        """
        if not credentials.is_persistable:
            raise CredentialStoreError(
                "Refusing to store credentials without both tokens and an expiry"
            )

        tmp_path = None
        try:
            self._ensure_directory()
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.credentials_file.parent),
                prefix=f".{self.credentials_file.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w") as f:
                json.dump(credentials.to_dict(), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.credentials_file)
            tmp_path = None

            logger.info(f"Session saved to {self.credentials_file}")
        except OSError as e:
            logger.error(f"Failed to save session: {e}")
            raise CredentialStoreError(f"Failed to save session: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    def load(self) -> Optional[Credentials]:
        """
        Load credentials from file.

        Returns:
            Credentials if file exists and is valid, None otherwise

        Notes:
            - Returns None if file doesn't exist (normal on first run)
            - Returns None if file is corrupted (logs warning)
        """
        if not self.credentials_file.exists():
            logger.debug(f"No session file found at {self.credentials_file}")
            return None

        try:
            with open(self.credentials_file, "r") as f:
                data = json.load(f)

            credentials = Credentials.from_dict(data)
            logger.debug(f"Session loaded from {self.credentials_file}")
            return credentials

        except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Invalid session file at {self.credentials_file}, "
                f"will need to log in again: {e}"
            )
            return None
        except OSError as e:
            logger.warning(f"Could not read session file: {e}")
            return None

    def delete(self) -> bool:
        """
        Delete the session file.

        Returns:
            True if file was deleted, False if file didn't exist

        Raises:
            CredentialStoreError: If the file exists but cannot be removed
        """
        if self.credentials_file.exists():
            try:
                self.credentials_file.unlink()
                logger.info(f"Session file deleted: {self.credentials_file}")
                return True
            except OSError as e:
                logger.error(f"Failed to delete session file: {e}")
                raise CredentialStoreError(f"Failed to delete session file: {e}") from e

        logger.debug(f"Session file does not exist: {self.credentials_file}")
        return False

"""Configuration management for the mlbv CLI.

This module provides configuration loading, validation, and management
for mlbv: account credentials, login mode, player and stream preferences,
network timeout and the session file location.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from mlbv.models import FeedType, MediaType
from mlbv.oauth.config import DEFAULT_CREDENTIALS_FILE, VALID_LOGIN_MODES, IdentityConfig
from mlbv.oauth.exceptions import ConfigurationError
from mlbv.player import DEFAULT_PLAYER

logger = logging.getLogger(__name__)


class MlbvConfig:
    """Configuration for the mlbv CLI.

    Attributes:
        username: MLB.tv account email (password login)
        password: MLB.tv account password (password login)
        client_id: Okta client ID override
        login_mode: "password" or "browser"
        callback_port: Local port for browser login
        media_player: Player command (e.g. "mpv", "vlc")
        feed_type: Default feed type when no team side can be inferred
        media_type: Default media type ("video" or "audio")
        language: Preferred broadcast language
        timeout: Network timeout in seconds
        session_file: Path of the stored session
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: Optional[str] = None,
        login_mode: str = "password",
        callback_port: int = 8765,
        media_player: str = DEFAULT_PLAYER,
        feed_type: Optional[str] = None,
        media_type: str = "video",
        language: str = "en",
        timeout: float = 30,
        session_file: str = DEFAULT_CREDENTIALS_FILE,
    ):
        """Initialize configuration.

        Example:
            >>> config = MlbvConfig(media_player="vlc", login_mode="browser")
        """
        self.username = username
        self.password = password
        self.client_id = client_id
        self.login_mode = login_mode
        self.callback_port = callback_port
        self.media_player = media_player
        self.feed_type = feed_type
        self.media_type = media_type
        self.language = language
        self.timeout = timeout
        self.session_file = session_file

        self._validate()

    def _validate(self):
        """Validate configuration values.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.login_mode not in VALID_LOGIN_MODES:
            raise ConfigurationError(
                f"login_mode must be one of: {', '.join(VALID_LOGIN_MODES)}"
            )

        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

        if self.feed_type is not None:
            try:
                FeedType.parse(self.feed_type)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e

        try:
            MediaType(self.media_type.lower())
        except ValueError:
            raise ConfigurationError("media_type must be video or audio") from None

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get default configuration file path.

        Returns:
            Path to default config file (~/.mlbv/config.yaml)
        """
        return Path.home() / ".mlbv" / "config.yaml"

    @classmethod
    def load_from_file(cls, path: Optional[Path] = None) -> "MlbvConfig":
        """Load configuration from YAML file.

        If the file doesn't exist, returns default configuration.
        Merges file configuration with environment variable overrides.

        Args:
            path: Optional path to config file (default: ~/.mlbv/config.yaml)

        Returns:
            Configuration instance

        Raises:
            ConfigurationError: If configuration file is invalid
        """
        config_path = path or cls.get_default_config_path()

        config_dict: dict[str, Any] = {}

        if config_path.exists():
            try:
                with open(config_path) as f:
                    file_config = yaml.safe_load(f)
                    if file_config:
                        config_dict = file_config
                logger.debug(f"Loaded configuration from {config_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in configuration file: {e}"
                ) from e
            except OSError as e:
                raise ConfigurationError(
                    f"Failed to load configuration file: {e}"
                ) from e
        else:
            logger.debug(f"Configuration file not found at {config_path}, using defaults")

        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        return cls.merge_with_defaults(config_dict)

    @classmethod
    def merge_with_defaults(cls, config_dict: dict[str, Any]) -> "MlbvConfig":
        """Merge configuration dictionary with defaults and environment variables.

        Precedence order (highest to lowest):
        1. Environment variables
        2. Config file values
        3. Default values

        Args:
            config_dict: Configuration dictionary from file

        Returns:
            Configuration instance

        Raises:
            ConfigurationError: If configuration is invalid

        Example:
            >>> config = MlbvConfig.merge_with_defaults({
            ...     "stream": {"media_player": "vlc"}
            ... })
        """
        credentials_config = config_dict.get("credentials") or {}
        identity_config = config_dict.get("identity") or {}
        stream_config = config_dict.get("stream") or {}
        network_config = config_dict.get("network") or {}
        session_config = config_dict.get("session") or {}

        try:
            return cls(
                username=os.getenv("MLBV_USERNAME", credentials_config.get("username")),
                password=os.getenv("MLBV_PASSWORD", credentials_config.get("password")),
                client_id=os.getenv("MLBV_CLIENT_ID", identity_config.get("client_id")),
                login_mode=os.getenv(
                    "MLBV_LOGIN_MODE", identity_config.get("login_mode", "password")
                ),
                callback_port=int(
                    os.getenv("MLBV_CALLBACK_PORT", identity_config.get("callback_port", 8765))
                ),
                media_player=os.getenv(
                    "MLBV_MEDIA_PLAYER", stream_config.get("media_player", DEFAULT_PLAYER)
                ),
                feed_type=os.getenv("MLBV_FEED_TYPE", stream_config.get("feed_type")),
                media_type=os.getenv("MLBV_MEDIA_TYPE", stream_config.get("media_type", "video")),
                language=os.getenv("MLBV_LANGUAGE", stream_config.get("language", "en")),
                timeout=float(os.getenv("MLBV_TIMEOUT", network_config.get("timeout", 30))),
                session_file=os.getenv(
                    "MLBV_SESSION_FILE", session_config.get("file", DEFAULT_CREDENTIALS_FILE)
                ),
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def identity_config(self) -> IdentityConfig:
        """Build the identity provider configuration.

        Raises:
            ConfigurationError: If a value is invalid
        """
        return IdentityConfig(
            client_id=self.client_id,
            credentials_file=str(Path(self.session_file).expanduser()),
            login_mode=self.login_mode,
            callback_port=self.callback_port,
            timeout_seconds=self.timeout,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary (password omitted)."""
        return {
            "credentials": {
                "username": self.username,
            },
            "identity": {
                "client_id": self.client_id,
                "login_mode": self.login_mode,
                "callback_port": self.callback_port,
            },
            "stream": {
                "media_player": self.media_player,
                "feed_type": self.feed_type,
                "media_type": self.media_type,
                "language": self.language,
            },
            "network": {
                "timeout": self.timeout,
            },
            "session": {
                "file": self.session_file,
            },
        }

    def __repr__(self) -> str:
        return (
            f"MlbvConfig("
            f"username={self.username!r}, "
            f"login_mode={self.login_mode!r}, "
            f"media_player={self.media_player!r}, "
            f"timeout={self.timeout}, "
            f"session_file={self.session_file!r})"
        )

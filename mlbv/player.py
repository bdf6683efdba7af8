"""
Hand a playback URL to an external media player.

The configured player is looked up on PATH; if it cannot be found the
operating system's default opener is used instead.
"""

import logging
import shutil
import subprocess
import sys
from typing import List, Optional, Tuple

from mlbv.api.exceptions import MlbvError

logger = logging.getLogger(__name__)

DEFAULT_PLAYER = "mpv"


class PlayerError(MlbvError):
    """The media player could not be started or exited with an error."""

    pass


def _system_opener() -> Tuple[str, List[str]]:
    if sys.platform.startswith("win"):
        return "cmd", ["/C", "start", ""]
    if sys.platform == "darwin":
        return "open", []
    return "xdg-open", []


def resolve_media_player(media_player: Optional[str] = None) -> Tuple[str, List[str]]:
    """
    Find the player command.

    Args:
        media_player: Player name or path (e.g. "mpv", "vlc")

    Returns:
        (executable, leading arguments); the URL is appended by the caller
    """
    if media_player:
        path = shutil.which(media_player)
        if path:
            logger.debug(f"Found {media_player} at {path}")
            return path, []
        logger.warning(f"Command '{media_player}' not found in PATH")

    logger.warning("No valid media player; falling back to system default player")
    return _system_opener()


def play_url(url: str, media_player: Optional[str] = None) -> None:
    """
    Launch the player on the URL and wait for it to exit.

    Raises:
        PlayerError: If the player cannot be started or exits non-zero
    """
    command, args = resolve_media_player(media_player)
    logger.info(f"Launching {command}")

    try:
        completed = subprocess.run([command, *args, url], check=False)
    except OSError as e:
        raise PlayerError(f"Could not start {command}: {e}") from e

    if completed.returncode != 0:
        raise PlayerError(f"Media player exited with status {completed.returncode}")

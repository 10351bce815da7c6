"""
Identity marker file.

While a watchdog is supervising a validator, its PID lives in a
well-known file under the system temp directory. External tooling can
check the file's existence to learn that a watchdog is active, and read
the PID to signal it directly.

The file is written once at start and removed once on exit, whichever
way the process exits. Both operations are best effort: failures are
logged at debug level and never raised.
"""

import atexit
import os
from pathlib import Path
from typing import Optional, Union

import structlog

from validator_watchdog.config import default_marker_path

logger = structlog.get_logger(__name__)


class IdentityMarker:
    """
    PID file owned by the running watchdog.

    Usage:
        with IdentityMarker() as marker:
            ...  # file exists for the duration of the block
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else default_marker_path()
        self.pid = os.getpid()
        self._created = False
        self._destroyed = False

    def create(self) -> None:
        """Write our PID to the marker path, overwriting any stale content."""
        try:
            self.path.write_text(str(self.pid))
            logger.debug("marker_written", path=str(self.path), pid=self.pid)
        except OSError as e:
            logger.debug("marker_write_failed", path=str(self.path), error=str(e))
        self._created = True

    def destroy(self) -> None:
        """Remove the marker file. Safe to call more than once."""
        if not self._created or self._destroyed:
            return
        self._destroyed = True

        try:
            self.path.unlink()
            logger.debug("marker_removed", path=str(self.path))
        except OSError as e:
            logger.debug("marker_remove_failed", path=str(self.path), error=str(e))

    def register_exit_handler(self) -> None:
        """Remove the marker at interpreter exit, even outside the context block."""
        atexit.register(self.destroy)

    def __enter__(self) -> "IdentityMarker":
        self.create()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()


def read_pid(path: Optional[Union[str, Path]] = None) -> Optional[int]:
    """Read the PID of the active watchdog, or None if there is none."""
    marker_path = Path(path) if path else default_marker_path()
    try:
        return int(marker_path.read_text().strip())
    except (ValueError, OSError):
        return None


def is_active(path: Optional[Union[str, Path]] = None) -> bool:
    """True while a watchdog's marker file exists."""
    marker_path = Path(path) if path else default_marker_path()
    return marker_path.exists()

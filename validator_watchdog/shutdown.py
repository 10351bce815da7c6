"""
Signal handling for the watchdog process.

Python's default SIGTERM disposition kills the interpreter without
running `finally` blocks or atexit handlers, which would leave the
identity marker behind. This handler turns SIGTERM and SIGINT into a
regular `sys.exit(0)` after running registered cleanups.
"""

import signal
import sys
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


class SignalExitHandler:
    """
    Exits cleanly on SIGTERM / SIGINT.

    Usage:
        handler = SignalExitHandler()
        handler.register_cleanup(marker.destroy)
        handler.install()
    """

    def __init__(self):
        self.shutdown_requested = False
        self._cleanup_callbacks: list[Callable[[], None]] = []

    def register_cleanup(self, callback: Callable[[], None]) -> None:
        """
        Register a callback to run before exiting.

        Callbacks run in reverse order of registration (LIFO).
        """
        self._cleanup_callbacks.append(callback)

    def install(self) -> None:
        for name in ("SIGTERM", "SIGINT"):
            signum = getattr(signal, name, None)
            if signum is not None:
                signal.signal(signum, self._handle_signal)

        logger.debug("signal_handlers_installed")

    def _handle_signal(self, signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        logger.debug("shutdown_signal_received", signal=signal_name)

        self.shutdown_requested = True

        for callback in reversed(self._cleanup_callbacks):
            try:
                callback()
            except Exception as e:
                logger.error("cleanup_callback_error", error=str(e))

        sys.exit(0)

"""
Tests for SIGTERM / SIGINT handling.
"""

import signal

import pytest

from validator_watchdog.marker import IdentityMarker
from validator_watchdog.shutdown import SignalExitHandler


@pytest.fixture
def restore_signal_handlers():
    saved = {s: signal.getsignal(s) for s in (signal.SIGTERM, signal.SIGINT)}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)


class TestSignalExitHandler:
    """Signal handling for the watchdog process."""

    def test_install_registers_handlers(self, restore_signal_handlers):
        handler = SignalExitHandler()

        handler.install()

        assert signal.getsignal(signal.SIGTERM) == handler._handle_signal
        assert signal.getsignal(signal.SIGINT) == handler._handle_signal

    def test_signal_exits_with_success(self):
        handler = SignalExitHandler()

        with pytest.raises(SystemExit) as exc_info:
            handler._handle_signal(signal.SIGTERM, None)

        assert exc_info.value.code == 0
        assert handler.shutdown_requested is True

    def test_cleanups_run_lifo(self):
        handler = SignalExitHandler()
        calls = []
        handler.register_cleanup(lambda: calls.append("first"))
        handler.register_cleanup(lambda: calls.append("second"))

        with pytest.raises(SystemExit):
            handler._handle_signal(signal.SIGINT, None)

        assert calls == ["second", "first"]

    def test_failing_cleanup_does_not_block_exit(self):
        handler = SignalExitHandler()
        calls = []

        def broken():
            raise RuntimeError("cleanup failed")

        handler.register_cleanup(lambda: calls.append("ran"))
        handler.register_cleanup(broken)

        with pytest.raises(SystemExit):
            handler._handle_signal(signal.SIGTERM, None)

        assert calls == ["ran"]

    def test_signal_removes_marker(self, marker_path):
        marker = IdentityMarker(marker_path)
        handler = SignalExitHandler()
        handler.register_cleanup(marker.destroy)

        with pytest.raises(SystemExit):
            with marker:
                handler._handle_signal(signal.SIGTERM, None)

        assert not marker_path.exists()

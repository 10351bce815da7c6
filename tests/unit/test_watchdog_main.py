"""
Tests for the watchdog process entry point.
"""

import pytest
from structlog.testing import capture_logs

from validator_watchdog import daemon as daemon_module
from validator_watchdog.daemon import WatchdogDaemon, main
from validator_watchdog.shutdown import SignalExitHandler


@pytest.fixture
def quiet_entry_point(monkeypatch):
    """Run main() in-process without touching global logging or signals."""
    monkeypatch.setattr(daemon_module, "load_dotenv", lambda: None)
    monkeypatch.setattr(daemon_module, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(SignalExitHandler, "install", lambda self: None)
    monkeypatch.setattr(daemon_module.IdentityMarker, "register_exit_handler", lambda self: None)


def argv(kill_script, marker_path):
    return ["4000", "500", "true", "--kill-script", str(kill_script), "--marker-path", str(marker_path)]


class TestMain:
    """Exit codes and crash logging."""

    def test_returns_zero_after_kill(self, quiet_entry_point, monkeypatch, kill_script, marker_path):
        seen = []

        async def finished(self):
            seen.append(marker_path.exists())

        monkeypatch.setattr(WatchdogDaemon, "run", finished)

        assert main(argv(kill_script, marker_path)) == 0
        assert seen == [True]
        assert not marker_path.exists()

    def test_unexpected_fault_logged(self, quiet_entry_point, monkeypatch, kill_script, marker_path):
        async def crash(self):
            raise RuntimeError("stream broke")

        monkeypatch.setattr(WatchdogDaemon, "run", crash)

        with capture_logs() as logs:
            returncode = main(argv(kill_script, marker_path))

        assert returncode == 1
        crashes = [e for e in logs if e["event"] == "watchdog_crashed"]
        assert len(crashes) == 1
        assert crashes[0]["log_level"] == "error"
        assert crashes[0]["error"] == "stream broke"
        assert logs[-1]["event"] == "watchdog_exiting"
        assert not marker_path.exists()

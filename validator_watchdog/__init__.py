"""
Validator watchdog.

A separate process that keeps the dev server's validator from outliving
the app it supports. It pings the app on an interval and, once the app
stops answering, runs the kill program for the validator and exits.

While it runs, its PID is recorded in a marker file under the system
temp directory so external tooling can find it.
"""

from validator_watchdog.config import WatchdogConfig
from validator_watchdog.daemon import WatchdogDaemon, WatchdogState
from validator_watchdog.marker import IdentityMarker

__all__ = ["WatchdogConfig", "WatchdogDaemon", "WatchdogState", "IdentityMarker"]

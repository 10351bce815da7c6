"""
Startup configuration for the validator watchdog.

The launching dev server passes three positional arguments:

    <app_port> <timeout_ms> <verbose>

Everything else (kill script location, marker path, log file) has a
default and can be overridden from the environment or a `.env` file.
"""

import argparse
import os
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

MARKER_FILE_NAME = "roosevelt_validator_pid.txt"
PING_PATH = "/roosevelt-dev-mode-ping"

KILL_SCRIPT_ENV = "VALIDATOR_WATCHDOG_KILL_SCRIPT"
LOG_FILE_ENV = "VALIDATOR_WATCHDOG_LOG_FILE"

DEFAULT_KILL_SCRIPT = Path(__file__).parent / "kill_validator.py"


def default_marker_path() -> Path:
    """Well-known location external tooling polls for a running watchdog."""
    return Path(tempfile.gettempdir()) / MARKER_FILE_NAME


def default_kill_command(script: Optional[str] = None) -> tuple[str, ...]:
    """Run the kill script with the current interpreter and no extra arguments."""
    script = script or os.environ.get(KILL_SCRIPT_ENV) or str(DEFAULT_KILL_SCRIPT)
    return (sys.executable, script)


@dataclass(frozen=True)
class WatchdogConfig:
    """
    Watchdog settings. FROZEN - fixed for the lifetime of the process.

    Attributes:
        app_port: Port of the parent app's HTTP listener on localhost
        timeout_ms: Idle window before probing, also the probe interval
        verbose: Emit diagnostic (debug) log lines
        kill_command: argv of the program that terminates the validator
        marker_path: File holding this watchdog's PID while it runs
        log_file: Optional extra log sink
    """

    app_port: int
    timeout_ms: int
    verbose: bool = False
    kill_command: tuple[str, ...] = field(default_factory=default_kill_command)
    marker_path: Path = field(default_factory=default_marker_path)
    log_file: Optional[str] = None

    def __post_init__(self):
        if not 0 < self.app_port < 65536:
            raise ValueError(f"app_port must be in 1..65535, got {self.app_port}")
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if not self.kill_command:
            raise ValueError("kill_command must not be empty")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def ping_url(self) -> str:
        return f"http://localhost:{self.app_port}{PING_PATH}"


def _parse_verbose(value: str) -> bool:
    # The launcher passes the literal strings "true" / "false"
    return value.strip().lower() == "true"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validator-watchdog",
        description="Kill the validator once the dev server stops answering pings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Probe port 4000 every 30 seconds, quietly
    validator-watchdog 4000 30000 false

    # Verbose, with an explicit kill script
    validator-watchdog 4000 30000 true --kill-script ./kill_validator.py
        """,
    )
    parser.add_argument("app_port", type=int, help="Port of the app's HTTP server")
    parser.add_argument("timeout_ms", type=int, help="Idle window / probe interval in milliseconds")
    parser.add_argument(
        "verbose",
        nargs="?",
        default="false",
        help="'true' to enable diagnostic logging",
    )
    parser.add_argument(
        "--kill-script",
        default=os.environ.get(KILL_SCRIPT_ENV),
        help=f"Program that terminates the validator (env: {KILL_SCRIPT_ENV})",
    )
    parser.add_argument(
        "--marker-path",
        default=None,
        help="Where to write this watchdog's PID",
    )
    parser.add_argument(
        "--log-file",
        default=os.environ.get(LOG_FILE_ENV),
        help=f"Also write JSON logs to this file (env: {LOG_FILE_ENV})",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> WatchdogConfig:
    """
    Parse startup parameters into a WatchdogConfig.

    Invalid values are reported as usage errors (exit status 2).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = WatchdogConfig(
            app_port=args.app_port,
            timeout_ms=args.timeout_ms,
            verbose=_parse_verbose(args.verbose),
            kill_command=default_kill_command(args.kill_script),
            marker_path=Path(args.marker_path) if args.marker_path else default_marker_path(),
            log_file=args.log_file,
        )
    except ValueError as e:
        parser.error(str(e))

    kill_script = config.kill_command[-1]
    if not Path(kill_script).is_file():
        parser.error(
            f"kill script not found: {kill_script} "
            f"(pass --kill-script or set {KILL_SCRIPT_ENV})"
        )

    return config

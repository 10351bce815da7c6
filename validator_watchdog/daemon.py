"""
Validator watchdog daemon.

Runs beside the dev server's validator and makes sure the validator does
not outlive the app it serves:

1. Wait `timeout_ms` milliseconds
2. Ping the app's /roosevelt-dev-mode-ping endpoint
3. Any HTTP response: the app is still in use, wait again
4. Connection failure: run the kill program, wait for it, exit

The whole thing is a single sequential coroutine. At any moment exactly
one thing is pending: the countdown, the ping, or the kill program.
"""

import asyncio
import sys
from enum import Enum
from typing import Optional, Sequence

import structlog
from dotenv import load_dotenv

from validator_watchdog.collaborator import KillCollaborator
from validator_watchdog.config import WatchdogConfig, parse_args
from validator_watchdog.logging_setup import configure_logging
from validator_watchdog.marker import IdentityMarker
from validator_watchdog.probe import LivenessProbe, ProbeOutcome
from validator_watchdog.shutdown import SignalExitHandler

logger = structlog.get_logger(__name__)


class WatchdogState(Enum):
    """Watchdog loop states."""
    ARMED = "armed"
    PROBING = "probing"
    KILLING = "killing"
    TERMINATED = "terminated"


class WatchdogDaemon:
    """
    Probe-and-kill loop.

    The countdown is re-armed only after the previous ping resolved, so
    pings never overlap. There is no stop method: the loop ends when the
    app stops answering and the kill program has exited.
    """

    def __init__(
        self,
        config: WatchdogConfig,
        probe: Optional[LivenessProbe] = None,
        collaborator: Optional[KillCollaborator] = None,
    ):
        """
        Initialize the daemon.

        Args:
            config: Startup settings
            probe: Liveness probe (defaults to pinging config.ping_url)
            collaborator: Kill program handle (defaults to config.kill_command)
        """
        self.config = config
        self.probe = probe or LivenessProbe(config.ping_url)
        self.collaborator = collaborator or KillCollaborator(config.kill_command)

        self.state = WatchdogState.ARMED
        self.probe_count = 0

    async def run(self) -> None:
        """Loop until the app is unreachable and the kill program has exited."""
        logger.debug(
            "watchdog_starting",
            app_port=self.config.app_port,
            kill_window_seconds=self.config.timeout_seconds,
        )

        while True:
            self._transition(WatchdogState.ARMED)
            await asyncio.sleep(self.config.timeout_seconds)

            self._transition(WatchdogState.PROBING)
            self.probe_count += 1
            outcome = await self.probe.check()

            if outcome is ProbeOutcome.DEAD:
                break

            logger.debug("app_still_active_resetting_timer", probes=self.probe_count)

        logger.debug("app_unreachable_killing_validator", url=self.config.ping_url)
        self._transition(WatchdogState.KILLING)

        try:
            returncode = await self.collaborator.run()
        except OSError as e:
            # No fallback: without the kill program we stay put
            logger.error(
                "kill_collaborator_spawn_failed",
                command=list(self.collaborator.command),
                error=str(e),
            )
            await asyncio.Event().wait()
        else:
            if returncode != 0:
                logger.error(
                    "kill_collaborator_failed",
                    command=list(self.collaborator.command),
                    returncode=returncode,
                )

        self._transition(WatchdogState.TERMINATED)

    def _transition(self, new_state: WatchdogState) -> None:
        if new_state is not self.state:
            logger.debug("watchdog_state_changed", old=self.state.value, new=new_state.value)
        self.state = new_state


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the watchdog process."""
    load_dotenv()

    config = parse_args(argv)
    configure_logging(config.verbose, config.log_file)

    marker = IdentityMarker(config.marker_path)
    marker.register_exit_handler()

    shutdown = SignalExitHandler()
    shutdown.register_cleanup(marker.destroy)
    shutdown.install()

    try:
        with marker:
            asyncio.run(WatchdogDaemon(config).run())
    except Exception as e:
        logger.exception("watchdog_crashed", error=str(e))
        return 1
    finally:
        logger.debug("watchdog_exiting")

    return 0


if __name__ == "__main__":
    sys.exit(main())

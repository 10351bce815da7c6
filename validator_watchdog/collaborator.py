"""
Kill collaborator: the external program that terminates the validator.

How the program finds the validator is its own business. The watchdog
only spawns it, relays its output to the log, and waits for it to exit.
"""

import asyncio
import subprocess
import sys
from typing import Optional, Sequence

import structlog

logger = structlog.get_logger(__name__)

OUTPUT_CHUNK_SIZE = 4096


class KillCollaborator:
    """Supervised child handle for the kill program."""

    def __init__(self, command: Sequence[str]):
        """
        Args:
            command: argv of the kill program, run without a shell
        """
        self.command = tuple(command)
        self.spawn_count = 0
        self.returncode: Optional[int] = None

    async def run(self) -> int:
        """
        Spawn the kill program and wait for it to exit.

        Returns the child's exit status. Raises OSError if the program
        cannot be started.
        """
        kwargs = {}
        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

        self.spawn_count += 1
        process = await asyncio.create_subprocess_exec(
            *self.command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            **kwargs,
        )
        logger.debug("kill_collaborator_spawned", pid=process.pid, command=list(self.command))

        # Fixed-size reads: a newline-free burst must not overflow a line buffer
        pending = b""
        while True:
            chunk = await process.stdout.read(OUTPUT_CHUNK_SIZE)
            if not chunk:
                break
            *lines, pending = (pending + chunk).split(b"\n")
            for line in lines:
                self._log_output(line)
            if len(pending) >= OUTPUT_CHUNK_SIZE:
                self._log_output(pending)
                pending = b""
        if pending:
            self._log_output(pending)

        self.returncode = await process.wait()
        logger.debug("kill_collaborator_exited", returncode=self.returncode)
        return self.returncode

    def _log_output(self, data: bytes) -> None:
        logger.debug(
            "kill_collaborator_output",
            stdout=data.decode(errors="replace").rstrip(),
        )

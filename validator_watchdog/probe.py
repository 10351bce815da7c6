"""
Liveness probe for the parent application.

The probe only answers one question: is anything still listening on the
app's port? Any HTTP response counts as alive, whatever its status code.
Only a transport-level failure counts as dead.
"""

from enum import Enum
from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

USER_AGENT = "request"


class ProbeOutcome(Enum):
    """Result of a single ping."""
    ALIVE = "alive"
    DEAD = "dead"


class LivenessProbe:
    """
    Sends GET /roosevelt-dev-mode-ping to the app.

    No request timeout: the probe waits as long as the connection stays
    open. A peer that never answers and never closes stalls the probe.
    """

    def __init__(
        self,
        url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            url: Full ping URL, e.g. http://localhost:4000/roosevelt-dev-mode-ping
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.url = url
        self._transport = transport

    async def check(self) -> ProbeOutcome:
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=None,
            # Proxy env vars must not reroute a localhost ping
            trust_env=False,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            try:
                # Body is read in full and discarded
                response = await client.get(self.url)
            except httpx.TransportError as e:
                logger.debug(
                    "probe_transport_error",
                    url=self.url,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return ProbeOutcome.DEAD

        logger.debug("probe_response", url=self.url, status_code=response.status_code)
        return ProbeOutcome.ALIVE

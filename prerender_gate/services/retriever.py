"""
Prerender Gate - Snapshot Retriever
====================================

What:  Fetches a snapshot from the rendering backend over HTTP.
How:   One GET through a shared httpx.AsyncClient. The body is read as text
       whatever the status code; only a missing response counts as an error.
Who:   PrerenderService on a cache miss.

Failure handling:
    Every exception raised by the call (connection refused, DNS failure,
    aborted read, invalid client options) is logged and returned as
    RetrievalResult(error=<message>, body=None). Nothing escapes fetch_snapshot.

Not done here:
    - Retries: a failed call is reported once.
    - Timeouts: httpx's default applies unless request_options sets "timeout".
    - Status inspection: a 404/500 page from the backend is returned as the
      snapshot body.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from prerender_gate.schemas.snapshot import RetrievalResult

logger = logging.getLogger(__name__)


class SnapshotRetriever:
    """
    Rendering backend client.

    The AsyncClient is created on first use and reused for every request so
    connections to the backend are pooled. Call aclose() on shutdown.

    Args:
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport)
        return self._client

    async def fetch_snapshot(
        self,
        url: str,
        headers: Mapping[str, str],
        options: Optional[Dict[str, Any]] = None,
    ) -> RetrievalResult:
        logger.info("Invoking rendering service: %s", url)
        start_time = time.perf_counter()

        try:
            response = await self.client.request("GET", url, headers=headers, **(options or {}))
            body = response.text
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            message = str(e) or type(e).__name__
            logger.warning(
                "Rendering service call failed after %.0fms: %s", duration_ms, message
            )
            return RetrievalResult(error=message, body=None)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Rendering service answered %d in %.0fms (%d chars)",
            response.status_code,
            duration_ms,
            len(body),
        )
        return RetrievalResult(error=None, body=body)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

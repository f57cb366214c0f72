"""
Prerender Gate - In-Memory Snapshot Cache
==========================================

What:  Process-local SnapshotCache keyed by the full request URL.
How:   Successful retrievals are stored in a dict; failed ones are not.
       With cancel_on_error=True a failed retrieval asks the orchestrator to
       fall back to the live page instead of surfacing a 502.

Limitations:
    Entries live until clear() or process exit; there is no expiry or size
    bound. Each worker process has its own copy. Concurrent misses for the
    same URL each reach the rendering backend.
"""

import logging
from typing import Dict, Optional

from prerender_gate.schemas.snapshot import CacheOutcome, RequestDescriptor, WriteOutcome
from prerender_gate.services.cache_base import SnapshotCache

logger = logging.getLogger(__name__)


class InMemorySnapshotCache(SnapshotCache):
    """
    Dict-backed snapshot store keyed by RequestDescriptor.url.

    Args:
        cancel_on_error: When True, a failed retrieval cancels the snapshot
            path and the request falls through to the live handler.
    """

    def __init__(self, cancel_on_error: bool = False):
        self.cancel_on_error = cancel_on_error
        self._snapshots: Dict[str, str] = {}

    async def read(self, request: RequestDescriptor) -> CacheOutcome:
        return CacheOutcome(body=self._snapshots.get(request.url, ""))

    async def write(
        self,
        request: RequestDescriptor,
        error: Optional[str],
        body: Optional[str],
    ) -> Optional[WriteOutcome]:
        if error:
            return WriteOutcome(cancel_render=self.cancel_on_error)
        if body:
            self._snapshots[request.url] = body
            logger.debug("Cached snapshot for %s (%d chars)", request.url, len(body))
        return WriteOutcome()

    def clear(self) -> None:
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)

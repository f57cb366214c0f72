"""
Prerender Gate - Snapshot Cache Interface
==========================================

What:  Abstract contract between the orchestrator and a snapshot store.
How:   Concrete stores inherit from SnapshotCache and implement read() and
       write(). NullSnapshotCache is the default when a host wires no store.
Who:   PrerenderService calls read() before retrieval and write() after it.

Contract:
    read(request)               once per eligible request, before retrieval.
                                A hit (no error, non-empty body) is returned
                                to the client as-is; the retriever and write()
                                are then skipped.
    write(request, error, body) once after every retrieval attempt, with the
                                RetrievalResult fields. Returning
                                WriteOutcome(cancel_render=True) sends the
                                request on to the live handler instead.
                                Returning None means cancel_render=False.

Storage, expiry and eviction are entirely the store's business.
"""

from abc import ABC, abstractmethod
from typing import Optional

from prerender_gate.schemas.snapshot import CacheOutcome, RequestDescriptor, WriteOutcome


class SnapshotCache(ABC):
    """Read/write hooks around the rendering backend call."""

    @abstractmethod
    async def read(self, request: RequestDescriptor) -> CacheOutcome:
        """
        Look up a stored snapshot for the request.

        Returns:
            CacheOutcome with a non-empty body on a hit. An empty body or a
            set error is a miss; the orchestrator also treats an exception
            raised here as a miss.
        """
        ...

    @abstractmethod
    async def write(
        self,
        request: RequestDescriptor,
        error: Optional[str],
        body: Optional[str],
    ) -> Optional[WriteOutcome]:
        """
        Record the outcome of a fresh retrieval.

        Args:
            request: The request that was sent to the rendering backend.
            error:   Transport error message, or None on success.
            body:    Snapshot HTML, or None when error is set.
        """
        ...


class NullSnapshotCache(SnapshotCache):
    """No storage: every read misses, every write keeps the snapshot path."""

    async def read(self, request: RequestDescriptor) -> CacheOutcome:
        return CacheOutcome()

    async def write(
        self,
        request: RequestDescriptor,
        error: Optional[str],
        body: Optional[str],
    ) -> Optional[WriteOutcome]:
        return WriteOutcome()

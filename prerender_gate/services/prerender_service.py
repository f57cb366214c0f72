"""
Prerender Gate - Prerender Service (Orchestrator)
==================================================

What:  Runs one request through classify → cache read → retrieve → cache write.
How:   Composes RequestClassifier, a SnapshotCache and a SnapshotRetriever.
Who:   PrerenderMiddleware, once per HTTP request.

Orchestration Flow:
    ┌──────────┐  no   ┌──────────────────┐
    │ Eligible?│──────▶│ call_next()      │
    └────┬─────┘       └──────────────────┘
         │ yes
    ┌────▼─────┐  hit  ┌──────────────────┐
    │ cache    │──────▶│ cached body      │
    │ read     │       └──────────────────┘
    └────┬─────┘
         │ miss
    ┌────▼─────┐   ┌───────────┐  cancel_render  ┌─────────────┐
    │ retrieve │──▶│ cache     │────────────────▶│ call_next() │
    └──────────┘   │ write     │                 └─────────────┘
                   └────┬──────┘
                        ├── error → SnapshotDeliveryError
                        └── body  → snapshot body

Every step is awaited in sequence; nothing is shared between requests except
the settings, the rule lists and whatever the cache store keeps.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from prerender_gate.config import PrerenderSettings
from prerender_gate.exceptions import SnapshotDeliveryError
from prerender_gate.schemas.snapshot import RequestDescriptor, WriteOutcome
from prerender_gate.services.cache_base import NullSnapshotCache, SnapshotCache
from prerender_gate.services.classifier import RequestClassifier
from prerender_gate.services.retriever import SnapshotRetriever
from prerender_gate.services.upstream import (
    build_upstream_headers,
    build_upstream_options,
    build_upstream_url,
)

logger = logging.getLogger(__name__)

# Continuation into the host's normal request handling.
CallNext = Callable[[], Awaitable[Any]]


class PrerenderService:
    """
    Snapshot pipeline for one PrerenderSettings value.

    handle() returns either the snapshot body (str) or whatever call_next()
    returned, and raises SnapshotDeliveryError when the rendering backend
    could not be reached and the cache did not cancel the snapshot path.
    """

    def __init__(
        self,
        settings: PrerenderSettings,
        cache: Optional[SnapshotCache] = None,
        retriever: Optional[SnapshotRetriever] = None,
        classifier: Optional[RequestClassifier] = None,
    ):
        self.settings = settings
        self.cache = cache if cache is not None else NullSnapshotCache()
        self.retriever = retriever if retriever is not None else SnapshotRetriever()
        self.classifier = classifier if classifier is not None else RequestClassifier(settings)

    async def handle(self, request: RequestDescriptor, call_next: CallNext) -> Any:
        if not self.classifier.is_eligible(request):
            return await call_next()

        # ── Step 1: Cache read ────────────────────────────────────────────
        cached = await self._read_cache(request)
        if cached is not None:
            return cached

        # ── Step 2: Rendering backend ─────────────────────────────────────
        upstream_url = build_upstream_url(request, self.settings)
        result = await self.retriever.fetch_snapshot(
            upstream_url,
            build_upstream_headers(request, self.settings),
            build_upstream_options(self.settings),
        )

        # ── Step 3: Cache write ───────────────────────────────────────────
        outcome = await self.cache.write(request, result.error, result.body) or WriteOutcome()
        if outcome.cancel_render:
            logger.info("Snapshot cancelled by cache for %s, serving live page", request.url)
            return await call_next()

        if result.error:
            logger.error("Snapshot delivery failed for %s: %s", request.url, result.error)
            raise SnapshotDeliveryError(
                message=result.error,
                upstream_url=upstream_url,
                context={"url": request.url},
            )

        return result.body or ""

    async def _read_cache(self, request: RequestDescriptor) -> Optional[str]:
        """Cached body on a hit; None on a miss, a reported error or a raised one."""
        logger.debug("Resolving cached snapshot for %s", request.url)
        try:
            cached = await self.cache.read(request)
        except Exception as e:
            logger.warning("Snapshot cache read failed for %s: %s", request.url, str(e))
            return None

        if cached.error:
            logger.warning("Snapshot cache reported an error for %s: %s", request.url, cached.error)
            return None
        if cached.is_hit:
            logger.info("Serving cached snapshot for %s", request.url)
            return cached.body
        return None

    async def aclose(self) -> None:
        await self.retriever.aclose()

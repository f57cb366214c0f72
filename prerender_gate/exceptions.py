"""
Prerender Gate - Exception Hierarchy
=====================================

What:  Application-specific exceptions raised by the snapshot pipeline.
How:   Each exception carries a message and an optional context dict. The
       context is logged server-side and never copied into a response body.

Exception Hierarchy:
    PrerenderError (base)
    └── SnapshotDeliveryError  → 502 Bad Gateway (rendering backend unreachable)

Failures that are deliberately NOT represented here:
    - Transport failures inside the retriever are converted to a
      RetrievalResult error string and never raised.
    - Upstream 4xx/5xx responses are treated as snapshot content.
    - Malformed whitelist/blacklist patterns raise re.error when the
      classifier is constructed (a deployment bug, not a runtime condition).
"""

from typing import Any, Dict, Optional


class PrerenderError(Exception):
    """
    Base exception for all snapshot pipeline errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected prerender error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class SnapshotDeliveryError(PrerenderError):
    """
    Raised when a snapshot retrieval failed and the cache write hook did not
    cancel the snapshot path.

    When:    The rendering backend could not be reached (connection refused,
             DNS failure, aborted read) for an eligible request.
    HTTP:    502 Bad Gateway (decided by PrerenderMiddleware, the host adapter)

    The message is the transport error string produced by the retriever.
    """

    def __init__(
        self,
        message: str = "Snapshot could not be retrieved from the rendering service",
        upstream_url: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if upstream_url:
            ctx["upstream_url"] = upstream_url
        super().__init__(message=message, context=ctx)
        self.upstream_url = upstream_url

"""
Prerender Gate - Snapshot Pipeline Schemas
===========================================

What:  Pydantic models passed between the classifier, the cache adapter,
       the retriever and the orchestrator.
How:   RequestDescriptor is a frozen snapshot of the incoming request; the
       outcome models are the return values of the cache hooks and of the
       retriever.

Data flow:
    Starlette Request
        → RequestDescriptor (classifier, builder, cache hooks)
        → CacheOutcome      (SnapshotCache.read)
        → RetrievalResult   (SnapshotRetriever.fetch_snapshot)
        → WriteOutcome      (SnapshotCache.write)
"""

from typing import Dict, Optional
from urllib.parse import parse_qsl

from pydantic import BaseModel, Field
from starlette.requests import Request


# ══════════════════════════════════════════════════════════════════════════
# Request Descriptor
# ══════════════════════════════════════════════════════════════════════════


class RequestDescriptor(BaseModel):
    """
    What:  Immutable view of one incoming request.
    Who:   Built once per request by PrerenderMiddleware; read by every
           pipeline stage and handed to the cache hooks.

    Header names are stored lower-cased so lookups through header() are
    case-insensitive.
    """
    method: str = Field(description="HTTP method, upper-case")
    url: str = Field(description="Full request URL (scheme, host, path, query)")
    scheme: str = Field(default="http", description="Scheme the request arrived on")
    host: str = Field(default="", description="Host (and port) the request was addressed to")
    path: str = Field(default="/", description="URL path")
    query: str = Field(default="", description="Raw query string without the leading '?'")
    headers: Dict[str, str] = Field(default_factory=dict, description="Lower-cased header map")

    model_config = {"frozen": True}

    @classmethod
    def from_starlette(cls, request: Request) -> "RequestDescriptor":
        """
        Capture a Starlette/FastAPI request.

        The path is taken from scope["raw_path"] when the server provides it,
        so percent-escapes such as %3F and %2F survive into url and path.
        """
        url = request.url
        raw_path = request.scope.get("raw_path")
        if raw_path:
            path = raw_path.split(b"?", 1)[0].decode("latin-1")
        else:
            path = url.path or "/"
        full_url = f"{url.scheme}://{url.netloc}{path}"
        if url.query:
            full_url += f"?{url.query}"
        return cls(
            method=request.method.upper(),
            url=full_url,
            scheme=url.scheme,
            host=url.netloc,
            path=path,
            query=url.query,
            headers={name.lower(): value for name, value in request.headers.items()},
        )

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    @property
    def user_agent(self) -> Optional[str]:
        return self.header("user-agent")

    @property
    def referer(self) -> Optional[str]:
        return self.header("referer")

    @property
    def path_with_query(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path

    def query_param(self, name: str) -> Optional[str]:
        """First value of a query parameter, or None when it is absent."""
        for key, value in parse_qsl(self.query, keep_blank_values=True):
            if key == name:
                return value
        return None


# ══════════════════════════════════════════════════════════════════════════
# Pipeline Outcomes
# ══════════════════════════════════════════════════════════════════════════


class CacheOutcome(BaseModel):
    """
    What:  Result of SnapshotCache.read().
    Hit:   no error and a non-empty body. Anything else is a miss.
    """
    body: str = Field(default="", description="Cached snapshot HTML")
    error: Optional[str] = Field(default=None, description="Cache lookup failure, if any")

    @property
    def is_hit(self) -> bool:
        return not self.error and bool(self.body)


class WriteOutcome(BaseModel):
    """Result of SnapshotCache.write(). cancel_render diverts to the live handler."""
    cancel_render: bool = Field(default=False)


class RetrievalResult(BaseModel):
    """
    What:  Result of one call to the rendering backend.

    On success error is None and body holds the response text, whatever the
    upstream status code was. On transport failure body is None and error
    holds the failure message.
    """
    error: Optional[str] = None
    body: Optional[str] = None


class ErrorResponse(BaseModel):
    """JSON body returned when a snapshot could not be delivered."""
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")

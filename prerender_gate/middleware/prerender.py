"""
Prerender Gate - Prerender Middleware
======================================

What:  Starlette middleware that exposes PrerenderService as a request step.
How:   Wraps the incoming request in a RequestDescriptor and hands
       PrerenderService a continuation that runs the rest of the app.
Who:   Registered by main.create_app(), or by any Starlette/FastAPI host:

    service = PrerenderService(PrerenderSettings(token="..."), cache=my_cache)
    app.add_middleware(PrerenderMiddleware, service=service)

Outcomes:
    str snapshot body       → 200 text/html
    continuation Response   → passed through untouched
    SnapshotDeliveryError   → 502 JSON error body
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response

from prerender_gate.exceptions import SnapshotDeliveryError
from prerender_gate.schemas.snapshot import ErrorResponse, RequestDescriptor
from prerender_gate.services.prerender_service import PrerenderService

logger = logging.getLogger(__name__)


class PrerenderMiddleware(BaseHTTPMiddleware):
    """
    Serves rendered snapshots to crawlers and lets everyone else through.

    Sets request.state.prerendered to True when a snapshot body was served,
    for the access log.
    """

    def __init__(self, app, service: PrerenderService, **kwargs):
        super().__init__(app, **kwargs)
        self.service = service

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        descriptor = RequestDescriptor.from_starlette(request)

        async def continue_request() -> Response:
            return await call_next(request)

        try:
            outcome = await self.service.handle(descriptor, continue_request)
        except SnapshotDeliveryError as exc:
            logger.error(
                "Rendering service unavailable for %s: %s | Context: %s",
                descriptor.url,
                exc.message,
                exc.context,
            )
            body = ErrorResponse(error="snapshot_unavailable", message=exc.message)
            return JSONResponse(status_code=502, content=body.model_dump(exclude_none=True))

        if isinstance(outcome, Response):
            return outcome

        request.state.prerendered = True
        return HTMLResponse(content=outcome)

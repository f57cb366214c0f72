"""
Prerender Gate - Reference Host Application
============================================

What:  FastAPI application factory wiring the snapshot pipeline into a host.
How:   create_app() builds a PrerenderService from the given settings, cache
       and retriever, registers the middleware chain, a catch-all exception
       handler and the health route.
Who:   uvicorn (uvicorn prerender_gate.main:app) or a host that mounts its own
       routes on the returned app.

Lifecycle:
    Startup:  configure logging, log the rendering service in use
    Shutdown: close the rendering service HTTP client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from prerender_gate import __version__
from prerender_gate.config import PrerenderSettings, settings as default_settings
from prerender_gate.middleware.logging import RequestLoggingMiddleware
from prerender_gate.middleware.prerender import PrerenderMiddleware
from prerender_gate.routes import health
from prerender_gate.services.cache_base import SnapshotCache
from prerender_gate.services.prerender_service import PrerenderService
from prerender_gate.services.retriever import SnapshotRetriever

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the host process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # One line per outbound call is already logged by the retriever
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    service: PrerenderService = app.state.prerender_service

    setup_logging(service.settings.log_level)
    logger.info("Prerender Gate %s starting up", __version__)
    logger.info("Rendering service: %s", service.settings.service_url)
    if not service.settings.token:
        logger.warning("PRERENDER_TOKEN is not set; upstream calls are unauthenticated")

    yield

    logger.info("Prerender Gate shutting down...")
    await service.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Generic 500; the stack trace stays in the server log."""
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[PrerenderSettings] = None,
    cache: Optional[SnapshotCache] = None,
    retriever: Optional[SnapshotRetriever] = None,
) -> FastAPI:
    """
    Create a FastAPI app with the snapshot pipeline in front of every route.

    Args:
        settings:  Pipeline settings (defaults to the PRERENDER_* environment).
        cache:     Snapshot store (defaults to NullSnapshotCache).
        retriever: Rendering backend client (defaults to a fresh SnapshotRetriever).
    """
    service = PrerenderService(settings or default_settings, cache=cache, retriever=retriever)

    app = FastAPI(
        title="Prerender Gate",
        description="Serves pre-rendered HTML snapshots to crawlers.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.prerender_service = service

    # Last added runs first: Logging → Prerender → routes
    app.add_middleware(PrerenderMiddleware, service=service)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)

    return app


app = create_app()

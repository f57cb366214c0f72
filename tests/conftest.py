"""
Prerender Gate - Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    make_request:      Factory for RequestDescriptor instances
    make_settings:     Factory for PrerenderSettings that ignores the environment
    render_transport:  httpx.MockTransport standing in for the rendering service
    crawler_app:       create_app() host with a /products/{id} page
    test_client:       HTTPX AsyncClient talking to crawler_app over ASGI
"""

import os
from typing import Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi.responses import HTMLResponse
from httpx import AsyncClient, ASGITransport

# Keep developer PRERENDER_* variables out of the tests
for _name in list(os.environ):
    if _name.startswith("PRERENDER_"):
        del os.environ[_name]
os.environ["PRERENDER_LOG_LEVEL"] = "WARNING"

from prerender_gate.config import PrerenderSettings  # noqa: E402
from prerender_gate.main import create_app  # noqa: E402
from prerender_gate.schemas.snapshot import RequestDescriptor  # noqa: E402
from prerender_gate.services.memory_cache import InMemorySnapshotCache  # noqa: E402
from prerender_gate.services.retriever import SnapshotRetriever  # noqa: E402

GOOGLEBOT_UA = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
BROWSER_UA = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/120.0 Safari/537.36"

RENDER_SERVICE_URL = "http://render.test"
SNAPSHOT_HTML = "<html><body>rendered</body></html>"
LIVE_HTML = "<html><body>live</body></html>"


@pytest.fixture
def make_request():
    """
    Build a RequestDescriptor the way PrerenderMiddleware would.

    Usage:
        request = make_request("/products/42", user_agent=GOOGLEBOT_UA)
    """

    def _make(
        path: str = "/",
        method: str = "GET",
        query: str = "",
        user_agent: Optional[str] = GOOGLEBOT_UA,
        host: str = "example.com",
        scheme: str = "https",
        headers: Optional[Dict[str, str]] = None,
    ) -> RequestDescriptor:
        all_headers = {"host": host}
        if user_agent is not None:
            all_headers["user-agent"] = user_agent
        for name, value in (headers or {}).items():
            all_headers[name.lower()] = value
        url = f"{scheme}://{host}{path}" + (f"?{query}" if query else "")
        return RequestDescriptor(
            method=method,
            url=url,
            scheme=scheme,
            host=host,
            path=path,
            query=query,
            headers=all_headers,
        )

    return _make


@pytest.fixture
def make_settings():
    """PrerenderSettings built only from keyword arguments (no .env file)."""

    def _make(**kwargs) -> PrerenderSettings:
        kwargs.setdefault("service_url", RENDER_SERVICE_URL)
        return PrerenderSettings(_env_file=None, **kwargs)

    return _make


@pytest.fixture
def render_calls() -> List[httpx.Request]:
    """Requests received by render_transport, in order."""
    return []


@pytest.fixture
def render_transport(render_calls):
    """Rendering service that answers every GET with SNAPSHOT_HTML."""

    def handler(request: httpx.Request) -> httpx.Response:
        render_calls.append(request)
        return httpx.Response(200, text=SNAPSHOT_HTML)

    return httpx.MockTransport(handler)


@pytest.fixture
def snapshot_cache():
    return InMemorySnapshotCache()


@pytest.fixture
def crawler_app(make_settings, render_transport, snapshot_cache):
    app = create_app(
        settings=make_settings(token="secret-token"),
        cache=snapshot_cache,
        retriever=SnapshotRetriever(transport=render_transport),
    )

    @app.get("/products/{product_id}", response_class=HTMLResponse)
    async def product_page(product_id: str):
        return LIVE_HTML

    return app


@pytest_asyncio.fixture
async def test_client(crawler_app):
    """
    HTTPX AsyncClient routed straight into crawler_app.

    Usage:
        async def test_page(test_client):
            response = await test_client.get("/products/42")
    """
    transport = ASGITransport(app=crawler_app)
    async with AsyncClient(transport=transport, base_url="http://shop.test") as client:
        yield client

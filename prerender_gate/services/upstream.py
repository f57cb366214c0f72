"""
Prerender Gate - Snapshot Request Builder
==========================================

What:  Builds the URL, headers and client options of the rendering backend call.
How:   The page URL the visitor asked for is rebuilt from the externally
       visible host and appended to the configured service base URL.

Example:
    service_url = "http://svc"
    request     = GET /a?b=1, X-Forwarded-Host: host
    upstream    = "http://svc/https://host/a?b=1"

Outbound scheme:
    Always OUTBOUND_SCHEME. X-Forwarded-Proto / CF-Visitor are not consulted.
"""

import copy
from typing import Any, Dict

import httpx

from prerender_gate.config import PrerenderSettings
from prerender_gate.schemas.snapshot import RequestDescriptor

OUTBOUND_SCHEME = "https"

# httpx decodes gzip bodies transparently.
ACCEPT_ENCODING = "gzip"
TOKEN_HEADER = "X-Prerender-Token"
RESERVED_OPTIONS = ("headers", "method", "url")


def build_page_url(request: RequestDescriptor) -> str:
    """The page URL as seen from outside any reverse proxy."""
    host = request.header("x-forwarded-host") or request.header("host") or request.host
    path = request.path or "/"
    query = f"?{request.query}" if request.query else ""
    return f"{OUTBOUND_SCHEME}://{host}{path}{query}"


def build_upstream_url(request: RequestDescriptor, settings: PrerenderSettings) -> str:
    base = settings.service_url
    separator = "" if base.endswith("/") else "/"
    return base + separator + build_page_url(request)


def build_upstream_headers(
    request: RequestDescriptor, settings: PrerenderSettings
) -> httpx.Headers:
    """
    Header set for the rendering backend call.

    Order of precedence (last wins, names compared case-insensitively):
        1. request_options["headers"] (deep copy)
        2. incoming headers except Host, when forward_headers is on
        3. User-Agent, Accept-Encoding and X-Prerender-Token
    """
    headers = httpx.Headers(copy.deepcopy(settings.request_options.get("headers") or {}))

    if settings.forward_headers:
        for name, value in request.headers.items():
            # A forwarded Host would not match the rendering service URL.
            if name == "host":
                continue
            headers[name] = value

    headers["User-Agent"] = request.user_agent or ""
    headers["Accept-Encoding"] = ACCEPT_ENCODING
    if settings.token:
        headers[TOKEN_HEADER] = settings.token
    return headers


def build_upstream_options(settings: PrerenderSettings) -> Dict[str, Any]:
    """
    request_options deep-copied for one call, minus the keys the retriever
    sets itself: "headers", plus "method" and "url" (the call is always a GET
    of the upstream URL).
    """
    options = copy.deepcopy(settings.request_options)
    for key in RESERVED_OPTIONS:
        options.pop(key, None)
    return options

"""
Prerender Gate - Snapshot Request Builder Tests
================================================

What we test:
    ✅ Upstream URL: forwarded host, Host fallback, separator handling
    ✅ Header precedence: configured → forwarded → always-set
    ✅ Configured options are copied, never aliased
"""

from prerender_gate.schemas.snapshot import RequestDescriptor
from prerender_gate.services.upstream import (
    build_page_url,
    build_upstream_headers,
    build_upstream_options,
    build_upstream_url,
)

from conftest import BROWSER_UA, GOOGLEBOT_UA


class TestUpstreamUrl:

    def test_forwarded_host_and_separator(self, make_request, make_settings):
        request = make_request(
            "/a", query="b=1", host="internal:8000", headers={"X-Forwarded-Host": "host"}
        )
        url = build_upstream_url(request, make_settings(service_url="http://svc"))
        assert url == "http://svc/https://host/a?b=1"

    def test_base_with_trailing_slash(self, make_request, make_settings):
        request = make_request("/a", query="b=1", host="host")
        url = build_upstream_url(request, make_settings(service_url="http://svc/"))
        assert url == "http://svc/https://host/a?b=1"

    def test_host_header_without_forwarding(self, make_request):
        assert build_page_url(make_request("/products/42", host="shop.test")) == (
            "https://shop.test/products/42"
        )

    def test_server_host_without_host_header(self):
        request = RequestDescriptor(
            method="GET",
            url="https://internal:8000/x",
            host="internal:8000",
            path="/x",
            headers={"user-agent": GOOGLEBOT_UA},
        )
        assert build_page_url(request) == "https://internal:8000/x"

    def test_percent_escapes_are_kept(self, make_request):
        request = make_request("/products/what%3Fx", query="a=1", host="shop.test")
        assert build_page_url(request) == "https://shop.test/products/what%3Fx?a=1"

    def test_scheme_is_always_https(self, make_request):
        request = make_request("/", scheme="http", headers={"X-Forwarded-Proto": "http"})
        assert build_page_url(request) == "https://example.com/"

    def test_default_service_url(self, make_request):
        from prerender_gate.config import PrerenderSettings

        url = build_upstream_url(make_request("/x"), PrerenderSettings(_env_file=None))
        assert url == "http://service.prerender.io/https://example.com/x"


class TestUpstreamHeaders:

    def test_always_set_headers(self, make_request, make_settings):
        headers = build_upstream_headers(make_request("/"), make_settings())
        assert headers["User-Agent"] == GOOGLEBOT_UA
        assert headers["Accept-Encoding"] == "gzip"
        assert "X-Prerender-Token" not in headers

    def test_token_header(self, make_request, make_settings):
        headers = build_upstream_headers(make_request("/"), make_settings(token="abc"))
        assert headers["X-Prerender-Token"] == "abc"

    def test_incoming_headers_not_forwarded_by_default(self, make_request, make_settings):
        request = make_request("/", headers={"Cookie": "session=1"})
        headers = build_upstream_headers(request, make_settings())
        assert "cookie" not in headers

    def test_forward_headers_skips_host(self, make_request, make_settings):
        request = make_request("/", host="shop.test", headers={"Cookie": "session=1"})
        headers = build_upstream_headers(request, make_settings(forward_headers=True))
        assert headers["cookie"] == "session=1"
        assert "host" not in headers
        assert headers.get_list("user-agent") == [GOOGLEBOT_UA]

    def test_configured_headers_lose_to_always_set(self, make_request, make_settings):
        settings = make_settings(
            token="real",
            request_options={
                "headers": {
                    "X-Custom": "1",
                    "user-agent": "configured",
                    "x-prerender-token": "stale",
                }
            },
        )
        headers = build_upstream_headers(make_request("/", user_agent=BROWSER_UA), settings)
        assert headers["X-Custom"] == "1"
        assert headers.get_list("User-Agent") == [BROWSER_UA]
        assert headers.get_list("X-Prerender-Token") == ["real"]

    def test_configured_headers_not_mutated(self, make_request, make_settings):
        settings = make_settings(request_options={"headers": {"X-Custom": "1"}})
        headers = build_upstream_headers(make_request("/"), settings)
        headers["X-Custom"] = "changed"
        assert settings.request_options["headers"] == {"X-Custom": "1"}


class TestUpstreamOptions:

    def test_headers_are_removed(self, make_settings):
        settings = make_settings(request_options={"headers": {"A": "1"}, "timeout": 20.0})
        assert build_upstream_options(settings) == {"timeout": 20.0}

    def test_options_are_deep_copied(self, make_settings):
        settings = make_settings(request_options={"params": {"render": "1"}})
        options = build_upstream_options(settings)
        options["params"]["render"] = "0"
        assert settings.request_options["params"] == {"render": "1"}

    def test_method_and_url_are_removed(self, make_settings):
        settings = make_settings(request_options={"method": "POST", "url": "x", "timeout": 5})
        assert build_upstream_options(settings) == {"timeout": 5}

"""Tests for switchyard.http.request — RoutingRequest and RequestContext."""

import pytest

from switchyard.http.request import RequestContext, RoutingRequest
from switchyard.media import MediaType


def _scope(**overrides: object) -> dict:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/app/users/42",
        "root_path": "/app",
        "scheme": "https",
        "query_string": b"page=2",
        "headers": [
            (b"host", b"example.com"),
            (b"accept", b"application/json, text/html;q=0.9"),
        ],
    }
    scope.update(overrides)
    return scope


class TestFromAsgi:
    def test_fields(self) -> None:
        request = RoutingRequest.from_asgi(_scope())
        assert request.method == "GET"
        assert request.path == "/app/users/42"
        assert request.querystring == "page=2"
        assert request.host == "example.com"
        assert request.context_path == "/app"
        assert request.secure is True
        assert request.format == MediaType("application", "json")

    def test_no_accept(self) -> None:
        request = RoutingRequest.from_asgi(_scope(headers=[(b"host", b"example.com")]))
        assert request.format is None

    def test_malformed_accept(self) -> None:
        request = RoutingRequest.from_asgi(_scope(headers=[(b"accept", b"garbage")]))
        assert request.format is None
        assert request.host is None


class TestRoutingRequest:
    def test_defaults(self) -> None:
        request = RoutingRequest("GET", "/")
        assert request.route_args == {}
        assert request.action is None
        assert request.format is None

    def test_base(self) -> None:
        assert RoutingRequest("GET", "/", host="example.com").base == "http://example.com"
        assert RoutingRequest("GET", "/", host="example.com", secure=True).base == "https://example.com"

    def test_set_format(self) -> None:
        request = RoutingRequest("GET", "/")
        request.set_format("json")
        assert request.format == MediaType("application", "json")

    def test_set_unknown_format_keeps_current(self) -> None:
        request = RoutingRequest("GET", "/", format=MediaType("text", "html"))
        request.set_format("nosuchformat")
        assert request.format == MediaType("text", "html")

    def test_context(self) -> None:
        request = RoutingRequest(
            "GET",
            "/",
            host="example.com",
            context_path="/app",
            servlet_path="/api",
            secure=True,
            format=MediaType("application", "json"),
        )
        assert request.context() == RequestContext(
            base="https://example.com",
            context_path="/app",
            servlet_path="/api",
            secure=True,
            format=MediaType("application", "json"),
        )


class TestRequestContext:
    def test_frozen(self) -> None:
        context = RequestContext()
        with pytest.raises(AttributeError):
            context.secure = True  # type: ignore[misc]

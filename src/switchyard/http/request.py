"""The request as the router sees it.

``RoutingRequest`` is the adapter boundary: whatever server or
framework receives the request fills one in, hands it to
``Router.route()``, and reads back ``route_args`` and ``action``.
Unlike most request objects it is mutable. The router may override
the method, retry HEAD as GET, and replace the negotiated format.

``RequestContext`` is the frozen slice of a request that reverse
resolution and URL finishing need. It is passed explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from switchyard.errors import ConfigurationError
from switchyard.media import MediaType, find_format


@dataclass(frozen=True, slots=True)
class RequestContext:
    """What reverse resolution needs to know about the current request."""

    base: str = ""
    context_path: str = ""
    servlet_path: str = ""
    secure: bool = False
    format: MediaType | None = None


@dataclass(slots=True)
class RoutingRequest:
    """A request being routed. Fields are mutated by ``Router.route()``."""

    method: str
    path: str
    querystring: str = ""
    format: MediaType | None = None
    host: str | None = None
    context_path: str = ""
    servlet_path: str = ""
    secure: bool = False
    route_args: dict[str, str] = field(default_factory=dict)
    action: str | None = None

    @property
    def base(self) -> str:
        """Scheme and authority, e.g. ``https://example.com:8443``."""
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.host or 'localhost'}"

    def set_format(self, name: str) -> None:
        """Replace the negotiated format by short name or media type.

        Unknown names leave the current format in place.
        """
        media_type = find_format(name)
        if media_type is not None:
            self.format = media_type

    def context(self) -> RequestContext:
        return RequestContext(
            base=self.base,
            context_path=self.context_path,
            servlet_path=self.servlet_path,
            secure=self.secure,
            format=self.format,
        )

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> RoutingRequest:
        """Create a RoutingRequest from an ASGI HTTP scope.

        ``root_path`` becomes the context path, the ``Host`` header the
        host, and the first ``Accept`` entry the negotiated format.
        """
        host: str | None = None
        accept: str | None = None
        for name, value in scope.get("headers", ()):
            key = name.decode("latin-1").lower()
            if key == "host" and host is None:
                host = value.decode("latin-1")
            elif key == "accept" and accept is None:
                accept = value.decode("latin-1")

        format: MediaType | None = None
        if accept:
            first = accept.split(",", 1)[0]
            try:
                format = MediaType.parse(first)
            except ConfigurationError:
                format = None

        return cls(
            method=scope["method"],
            path=scope["path"],
            querystring=scope.get("query_string", b"").decode("latin-1"),
            format=format,
            host=host,
            context_path=scope.get("root_path", ""),
            secure=scope.get("scheme", "http") in ("https", "wss"),
        )

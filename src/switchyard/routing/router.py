"""Ordered route table with forward dispatch and reverse resolution.

The table is an immutable tuple. Writers build a new tuple under a
lock and publish it with a single assignment, so a request being
routed while the table reloads sees either the old table or the new
one, never a mix. Readers never take the lock.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, TypeAlias
from urllib.parse import quote, quote_plus

from switchyard.config import RouterConfig
from switchyard.errors import NoHandlerFound, NoRouteFound, RouteFileParsingError
from switchyard.http.request import RequestContext, RoutingRequest
from switchyard.loaders import parse
from switchyard.media import MediaType, find_format
from switchyard.routing.action import ActionDefinition
from switchyard.routing.route import Route
from switchyard.sources import RouteSource, as_source

logger = logging.getLogger("switchyard.routing")

_METHOD_OVERRIDE = re.compile(r"x-http-method-override=(?P<method>GET|PUT|POST|DELETE|PATCH)")

SourceLike: TypeAlias = str | Path | RouteSource


def _encode(value: str, *, query: bool = False) -> str:
    """Percent-encode a path or host value; form-encode query keys and values."""
    try:
        if query:
            return quote_plus(value, encoding="utf-8", errors="strict")
        return quote(value, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as exc:
        msg = f"Route value encoding error for {value!r}"
        raise RouteFileParsingError(msg) from exc


def _substitute(template: str, name: str, value: str) -> str:
    """Replace ``{name}`` or ``{<constraint>name}`` in *template* with *value*."""
    pattern = r"\{(<[^>]+>)?" + re.escape(name) + r"\}"
    return re.sub(pattern, lambda _: value, template)


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _host_is_regex(host: str, name: str) -> bool:
    """Host templates like ``{(.*)}.example.com`` may be reversed without a value."""
    stripped = host.replace("{", "").replace("}", "")
    if stripped == name:
        return True
    try:
        return re.fullmatch(name, stripped) is not None
    except re.error:
        return False


def _prefix(prefix: str, path: str) -> str:
    if not prefix or prefix == "/":
        return path
    return (prefix if prefix.startswith("/") else "/" + prefix) + path


class Router:
    """Ordered route table. First matching route wins.

    Usage::

        router = Router()
        router.load(["conf/routes"])
        route = router.route(request)
        url = router.reverse("Users.show", {"id": 42}).url
    """

    __slots__ = ("_config", "_lock", "_routes", "last_loading")

    def __init__(self, routes: Iterable[Route] = (), *, config: RouterConfig | None = None) -> None:
        self._config = config or RouterConfig()
        self._lock = threading.Lock()
        self._routes: tuple[Route, ...] = tuple(routes)
        self.last_loading: float = -1.0

    @classmethod
    def from_config(cls, config: RouterConfig) -> Router:
        """Create a router and load ``config.route_files`` into it."""
        router = cls(config=config)
        if config.route_files:
            router.load(config.route_files)
        return router

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def routes(self) -> tuple[Route, ...]:
        """The current table snapshot, in precedence order."""
        return self._routes

    # -- Writers --

    def load(self, sources: Iterable[SourceLike]) -> None:
        """Replace the whole table with the routes parsed from *sources*.

        Every source is read and parsed before the table is swapped. A
        parsing error leaves the current table untouched.
        """
        started = time.time()
        routes: list[Route] = []
        for source in sources:
            routes.extend(parse(as_source(source)))

        with self._lock:
            self._routes = tuple(routes)
            self.last_loading = started

        logger.info(
            "Loaded routes: \n\t%s",
            "\n\t".join(route.to_fixed_length_string() for route in routes),
        )

    def detect_changes(self, sources: Iterable[SourceLike]) -> bool:
        """Reload everything if any source changed since the last load.

        Returns True when a reload happened.
        """
        resolved = [as_source(source) for source in sources]
        for source in resolved:
            if source.last_modified() > self.last_loading:
                logger.debug("Route source %s changed, reloading", source.name)
                self.load(resolved)
                return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._routes = ()

    def add_route(self, route: Route, position: int | None = None) -> None:
        """Insert *route* at *position*, or append it.

        Positions past the end of the table append.
        """
        with self._lock:
            routes = list(self._routes)
            if position is None or position >= len(routes):
                routes.append(route)
            else:
                routes.insert(max(position, 0), route)
            self._routes = tuple(routes)

    def append_route(self, route: Route) -> None:
        self.add_route(route)

    def prepend_route(self, route: Route) -> None:
        self.add_route(route, 0)

    # -- Forward dispatch --

    def route(self, request: RoutingRequest) -> Route:
        """Find the route for *request* and record the result on it.

        Sets ``request.route_args`` and ``request.action``. A captured
        ``format`` argument replaces the negotiated format. Unmatched
        HEAD requests are retried as GET.

        Raises ``NoRouteFound`` when no route matches.
        """
        if self._config.detect_changes and self._config.route_files:
            self.detect_changes(self._config.route_files)

        logger.debug("Route: %s - %s", request.path, request.querystring)
        if self._config.method_override and request.querystring:
            match = _METHOD_OVERRIDE.search(request.querystring)
            if match is not None:
                logger.debug("request method %s overridden to %s", request.method, match["method"])
                request.method = match["method"]

        return self._dispatch(request, self._routes)

    def _dispatch(self, request: RoutingRequest, routes: tuple[Route, ...]) -> Route:
        path = request.path
        context_path = request.context_path.rstrip("/")
        if context_path and (path == context_path or path.startswith(context_path + "/")):
            path = path[len(context_path) :] or "/"

        for route in routes:
            args = route.matches(request.method, path, request.format, request.host)
            if args is None:
                continue
            request.route_args = args
            request.action = route.action
            if "format" in args:
                request.set_format(args["format"])
            if "{" in request.action:
                for name, value in args.items():
                    request.action = request.action.replace("{" + name + "}", value)
            return route

        if self._config.head_fallback and request.method.upper() == "HEAD":
            request.method = "GET"
            try:
                return self._dispatch(request, routes)
            finally:
                request.method = "HEAD"

        raise NoRouteFound(request.method, request.path)

    def route_args(
        self,
        method: str,
        path: str,
        format: MediaType | None = None,
        host: str | None = None,
    ) -> dict[str, str]:
        """Read-only lookup: matched arguments plus ``"action"``.

        Returns an empty dict when nothing matches.
        """
        for route in self._routes:
            args = route.matches(method, path, format, host)
            if args is not None:
                args["action"] = route.action
                return args
        return {}

    # -- Reverse resolution --

    def resolve_actions(self, action: str) -> list[Route]:
        """Routes whose action pattern matches *action*, arguments aside."""
        return [route for route in self._routes if route.action_match(action) is not None]

    def reverse(
        self,
        action: str,
        args: Mapping[str, Any] | None = None,
        *,
        context: RequestContext | None = None,
    ) -> ActionDefinition:
        """Render a URL for *action* invoked with *args*.

        Values are scalars or lists; a list contributes its first element
        to the path and every element to the query string. Values
        starting with ``:`` are deferred tokens, kept literal.

        Raises ``NoHandlerFound`` when no route can render the action.
        """
        requested = dict(args or {})
        for route in self._routes:
            match = route.action_match(action)
            if match is None:
                continue

            working = dict(requested)
            for group in route.compiled.action_args:
                value = match.group(group)
                if value is not None:
                    working[group] = value.lower()

            if not self._satisfies_args(route, working) or not self._satisfies_static(route, working, context):
                continue

            return self._render(route, action, working, requested, context)

        raise NoHandlerFound(action, requested)

    def full_url(
        self,
        action: str,
        args: Mapping[str, Any] | None = None,
        *,
        context: RequestContext,
    ) -> str:
        """``context.base`` followed by the reversed URL."""
        return context.base + self.reverse(action, args, context=context).url

    @staticmethod
    def _satisfies_args(route: Route, working: dict[str, Any]) -> bool:
        for arg in route.args:
            value = _first(working.get(arg.name))
            if value is None:
                if _host_is_regex(route.host, arg.name):
                    working[arg.name] = ""
                    continue
                return False
            text = str(value)
            if not text.startswith(":") and not arg.accepts(text):
                return False
        return True

    @staticmethod
    def _satisfies_static(route: Route, working: dict[str, Any], context: RequestContext | None) -> bool:
        for key, expected in route.static_args.items():
            if key == "format":
                current = context.format if context is not None else None
                if current is not None:
                    if current != find_format(expected):
                        return False
                    continue
            value = working.get(key)
            if value is None or str(value) != expected:
                return False
        return True

    def _render(
        self,
        route: Route,
        action: str,
        working: dict[str, Any],
        requested: dict[str, Any],
        context: RequestContext | None,
    ) -> ActionDefinition:
        path = route.path
        if context is not None:
            path = _prefix(context.servlet_path, path)
            path = _prefix(context.context_path, path)
        if path.endswith("/?"):
            path = path[:-2] or "/"
        host = route.host

        in_path = {arg.name for arg in route.args}
        query: list[str] = []
        for key, value in working.items():
            if value is None:
                continue
            if key in in_path:
                text = str(_first(value))
                encoded = text if text.startswith(":") else _encode(text)
                path = _substitute(path, key, encoded)
                host = _substitute(host, key, encoded)
            elif key in route.static_args:
                continue
            else:
                values = value if isinstance(value, (list, tuple)) else [value]
                for item in values:
                    text = str(item)
                    encoded = text if text.startswith(":") else _encode(text, query=True)
                    query.append(_encode(str(key), query=True) + "=" + encoded)

        qs = "&".join(query)
        return ActionDefinition(
            method="GET" if route.is_wildcard else route.method,
            url=f"{path}?{qs}" if qs else path,
            action=action,
            args=dict(requested),
            host=host,
            star=route.is_wildcard,
            router=self,
            context=context,
        )

"""Switchyard exception hierarchy.

Shared across Route, Router, loaders, and the CLI so every module
raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when router configuration is invalid."""


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    The router raises these; mapping them to a response is the
    caller's job.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NoRouteFound(HTTPError):  # noqa: N818
    """404 — forward dispatch exhausted the route table.

    Carries the method and path that failed to match.
    """

    def __init__(self, method: str, path: str) -> None:
        super().__init__(status=404, detail=f"No route found for {method} {path}")
        self.method = method
        self.path = path


class NoHandlerFound(SwitchyardError):  # noqa: N818
    """Reverse resolution found no route able to render *action* with *args*."""

    def __init__(self, action: str, args: dict[str, Any]) -> None:
        self.action = action
        self.arguments = dict(args)
        super().__init__(f"No route found for action {action!r} with args {self.arguments!r}")


class RouteFileParsingError(SwitchyardError):
    """A route template, route file, or URL value could not be processed.

    ``source`` and ``line`` point at the offending route definition
    when the error comes from a loader.
    """

    def __init__(self, message: str, *, source: str | None = None, line: int | None = None) -> None:
        self.message = message
        self.source = source
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        if self.source is not None and self.line is not None:
            return f"{self.source}:{self.line}: {self.message}"
        if self.source is not None:
            return f"{self.source}: {self.message}"
        return self.message

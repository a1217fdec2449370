"""Line-oriented route files.

One route per line::

    # method[(formats)]   [host]path                 action              [static args]
    GET                   /                          Home.index
    GET(application/json) /users/{<[0-9]+>id}        Users.show
    *                     /admin/{controller}        Admin.{controller}
    GET                   {client}.example.com/      Clients.home
    GET                   /feed                      Feed.show           (format:'rss')

Blank lines and lines starting with ``#`` are ignored.
"""

import logging
import re

from switchyard.errors import ConfigurationError, RouteFileParsingError
from switchyard.media import MediaType, resolve_format
from switchyard.routing.route import Route
from switchyard.sources import RouteSource

logger = logging.getLogger("switchyard.loaders")

METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "*"})

_LINE = re.compile(
    r"^(?P<method>[A-Za-z]+|\*)"
    r"(?:\((?P<formats>[^)]*)\))?"
    r"\s+(?P<path>\S+)"
    r"\s+(?P<action>[^\s(]+)"
    r"(?:\s*\((?P<params>.*)\))?\s*$"
)
_PARAM = re.compile(r"\s*(?P<key>[A-Za-z_]\w*)\s*:\s*(?P<quote>['\"])(?P<value>.*?)(?P=quote)\s*(?:,|$)")


def parse_static_args(text: str) -> dict[str, str]:
    """Parse ``key:'value', other:"value"`` into a dict.

    Raises ``ValueError`` on anything that is not a quoted pair.
    """
    result: dict[str, str] = {}
    pos = 0
    text = text.strip()
    while pos < len(text):
        m = _PARAM.match(text, pos)
        if m is None:
            msg = f"Invalid static argument near {text[pos:]!r}"
            raise ValueError(msg)
        result[m["key"]] = m["value"]
        pos = m.end()
    return result


def parse_formats(text: str) -> tuple[MediaType, ...]:
    return tuple(resolve_format(part.strip()) for part in text.split(",") if part.strip())


class LineRouteLoader:
    """Loads routes from the line-oriented routes format."""

    def load(self, source: RouteSource) -> list[Route]:
        routes: list[Route] = []
        for number, raw in enumerate(source.read_text().splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            routes.append(self.parse_line(line, source=source.name, line=number))
        logger.debug("Parsed %d routes from %s", len(routes), source.name)
        return routes

    def parse_line(self, text: str, *, source: str | None = None, line: int | None = None) -> Route:
        """Parse one route definition line into a Route.

        Raises ``RouteFileParsingError`` pointing at *source* and *line*.
        """
        m = _LINE.match(text)
        if m is None:
            msg = f"Invalid route definition {text!r}"
            raise RouteFileParsingError(msg, source=source, line=line)

        method = m["method"].upper()
        if method not in METHODS:
            msg = f"Unknown HTTP method {m['method']!r}"
            raise RouteFileParsingError(msg, source=source, line=line)

        try:
            formats = parse_formats(m["formats"] or "")
            static_args = parse_static_args(m["params"] or "")
        except (ConfigurationError, ValueError) as exc:
            raise RouteFileParsingError(str(exc), source=source, line=line) from exc

        try:
            return Route(
                method=method,
                path=m["path"],
                action=m["action"],
                static_args=static_args,
                formats=formats,
                source=source,
                line=line,
            )
        except RouteFileParsingError as exc:
            raise RouteFileParsingError(exc.message, source=source, line=line) from exc

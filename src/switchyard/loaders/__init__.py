"""Route loaders — turn route sources into ordered lists of routes.

The file extension picks the loader: OpenAPI documents for ``.yml``,
``.yaml`` and ``.json``, the line-oriented routes format for anything
else.
"""

from switchyard.loaders.lines import LineRouteLoader
from switchyard.loaders.openapi import OpenApiRouteLoader
from switchyard.routing.route import Route
from switchyard.sources import RouteSource

OPENAPI_EXTENSIONS = ("yml", "yaml", "json")

__all__ = ["OPENAPI_EXTENSIONS", "LineRouteLoader", "OpenApiRouteLoader", "parse"]


def parse(source: RouteSource) -> list[Route]:
    """Parse one source with the loader its name calls for."""
    if source.name.endswith(OPENAPI_EXTENSIONS):
        return OpenApiRouteLoader().load(source)
    return LineRouteLoader().load(source)

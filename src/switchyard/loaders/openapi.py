"""OpenAPI documents as route sources.

Every operation with an ``operationId`` (or an ``x-action`` override)
becomes a route. Path parameters that declare a ``pattern`` carry it
over as the argument constraint, integer parameters are constrained to
digits, and the media types of successful responses become the route's
formats. Works with Swagger 2.0 and OpenAPI 3.x, in JSON or YAML.
"""

import json
import logging
import re
from typing import Any
from urllib.parse import urlsplit

import yaml

from switchyard.errors import ConfigurationError, RouteFileParsingError
from switchyard.media import MediaType, resolve_format
from switchyard.routing.route import Route
from switchyard.sources import RouteSource

logger = logging.getLogger("switchyard.loaders")

VERBS = ("get", "put", "post", "delete", "options", "head", "patch")

_PLACEHOLDER = re.compile(r"\{([a-zA-Z_][a-zA-Z_0-9]*)\}")


def _read(source: RouteSource) -> dict[str, Any]:
    text = source.read_text()
    try:
        if source.name.endswith(".json"):
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        msg = f"Invalid OpenAPI document: {exc}"
        raise RouteFileParsingError(msg, source=source.name) from exc

    if not isinstance(document, dict) or not isinstance(document.get("paths"), dict):
        msg = "OpenAPI document has no 'paths' object"
        raise RouteFileParsingError(msg, source=source.name)
    return document


def base_path(document: dict[str, Any]) -> str:
    """Path prefix shared by every operation.

    ``basePath`` in Swagger 2.0, the path of the first server URL in
    OpenAPI 3.x.
    """
    if "basePath" in document:
        return str(document["basePath"]).rstrip("/")
    servers = document.get("servers") or []
    if servers and isinstance(servers[0], dict) and servers[0].get("url"):
        return urlsplit(str(servers[0]["url"])).path.rstrip("/")
    return ""


def _constraint(parameter: dict[str, Any]) -> str | None:
    schema = parameter.get("schema") or parameter
    pattern = schema.get("pattern")
    if pattern:
        return str(pattern).removeprefix("^").removesuffix("$")
    if schema.get("type") == "integer":
        return "[0-9]+"
    return None


def constrain_path(path: str, parameters: dict[str, dict[str, Any]]) -> str:
    """Rewrite ``{id}`` to ``{<pattern>id}`` for constrained path parameters."""

    def _replace(m: re.Match[str]) -> str:
        parameter = parameters.get(m[1])
        constraint = _constraint(parameter) if parameter is not None else None
        if constraint is None:
            return m[0]
        return "{<" + constraint + ">" + m[1] + "}"

    return _PLACEHOLDER.sub(_replace, path)


def operation_formats(document: dict[str, Any], operation: dict[str, Any]) -> tuple[MediaType, ...]:
    """Media types an operation produces, without duplicates."""
    names: list[str] = []
    if "produces" in operation or "produces" in document:
        names.extend(operation.get("produces", document.get("produces", [])))
    for status, response in (operation.get("responses") or {}).items():
        code = str(status)
        if not (code.startswith("2") or code == "default") or not isinstance(response, dict):
            continue
        names.extend(response.get("content") or {})

    formats: list[MediaType] = []
    for name in names:
        media_type = resolve_format(name)
        if media_type not in formats:
            formats.append(media_type)
    return tuple(formats)


class OpenApiRouteLoader:
    """Loads routes from an OpenAPI (or Swagger) document."""

    def load(self, source: RouteSource) -> list[Route]:
        document = _read(source)
        prefix = base_path(document)
        routes: list[Route] = []

        for path, item in document["paths"].items():
            if not isinstance(item, dict):
                continue
            shared = item.get("parameters") or []
            for verb in VERBS:
                operation = item.get(verb)
                if not isinstance(operation, dict):
                    continue
                action = operation.get("x-action") or operation.get("operationId")
                if not action:
                    logger.debug("Skipping %s %s: no operationId", verb.upper(), path)
                    continue
                routes.append(self._route(source, document, prefix + path, verb, action, shared, operation))

        logger.debug("Parsed %d routes from %s", len(routes), source.name)
        return routes

    def _route(
        self,
        source: RouteSource,
        document: dict[str, Any],
        path: str,
        verb: str,
        action: str,
        shared: list[dict[str, Any]],
        operation: dict[str, Any],
    ) -> Route:
        parameters = {
            p["name"]: p
            for p in [*shared, *(operation.get("parameters") or [])]
            if isinstance(p, dict) and p.get("in") == "path" and "name" in p
        }
        static_args = {str(k): str(v) for k, v in (operation.get("x-static-args") or {}).items()}
        try:
            return Route(
                method=verb.upper(),
                path=constrain_path(path, parameters),
                action=str(action),
                static_args=static_args,
                formats=operation_formats(document, operation),
                source=source.name,
            )
        except (ConfigurationError, RouteFileParsingError) as exc:
            msg = f"{verb.upper()} {path}: {exc}"
            raise RouteFileParsingError(msg, source=source.name) from exc

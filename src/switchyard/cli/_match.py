"""``switchyard match`` and ``switchyard reverse`` — try the table both ways."""

import argparse
import sys

from switchyard.cli._load import load_router
from switchyard.errors import NoHandlerFound
from switchyard.http.request import RequestContext
from switchyard.media import MediaType, find_format


def _format_or_exit(name: str | None) -> MediaType | None:
    if name is None:
        return None
    media_type = find_format(name)
    if media_type is None:
        print(f"Error: unknown format {name!r}", file=sys.stderr)
        raise SystemExit(2)
    return media_type


def run_match(args: argparse.Namespace) -> None:
    """Print the action and arguments the request resolves to."""
    router = load_router(args.routes)
    result = router.route_args(args.method, args.path, _format_or_exit(args.format), args.host)
    if not result:
        print(f"No route found for {args.method.upper()} {args.path}", file=sys.stderr)
        raise SystemExit(1)

    action = result.pop("action")
    print(action)
    for key, value in sorted(result.items()):
        print(f"  {key} = {value}")


def _parse_pairs(pairs: list[str]) -> dict[str, str | list[str]]:
    """``["id=1", "tag=a", "tag=b"]`` -> ``{"id": "1", "tag": ["a", "b"]}``."""
    result: dict[str, str | list[str]] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            print(f"Error: expected key=value, got {pair!r}", file=sys.stderr)
            raise SystemExit(2)
        if key in result:
            existing = result[key]
            result[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            result[key] = value
    return result


def run_reverse(args: argparse.Namespace) -> None:
    """Print ``METHOD URL`` for the action."""
    router = load_router(args.routes)
    context = RequestContext(format=_format_or_exit(args.format))
    try:
        definition = router.reverse(args.action, _parse_pairs(args.args), context=context)
    except NoHandlerFound as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    url = f"{definition.host}{definition.url}" if definition.host else definition.url
    print(f"{definition.method} {url}")

"""Route file loading shared by every ``switchyard`` subcommand."""

import sys

from switchyard.errors import RouteFileParsingError
from switchyard.routing.router import Router


def load_router(files: list[str]) -> Router:
    """Load *files* into a fresh Router, exiting with status 1 on failure."""
    router = Router()
    try:
        router.load(files)
    except (OSError, RouteFileParsingError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    return router

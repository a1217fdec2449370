"""``switchyard routes`` — list loaded routes.

Loads the given route files and prints the resulting table in
precedence order with method, path, action, and formats.
"""

import argparse

from switchyard.cli._load import load_router
from switchyard.media import format_list


def run_routes(args: argparse.Namespace) -> None:
    """Print the route table built from ``args.files``."""
    router = load_router(args.files)

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    # Build rows: (method, path, action, formats)
    rows: list[tuple[str, str, str, str]] = []
    for route in routes:
        path = f"{route.host}{route.path}" if route.host else route.path
        rows.append((route.method, path, route.action, format_list(route.formats)))

    # Column widths
    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header
    max_action = max(max(len(r[2]) for r in rows), 6)  # "ACTION" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{:<{max_action}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "ACTION", "FORMATS").rstrip())
    sep_len = max_method + max_path + max_action + 6 + max((len(r[3]) for r in rows), default=0)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row).rstrip())

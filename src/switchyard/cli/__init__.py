"""Switchyard CLI — inspect route files from the command line.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard — bidirectional HTTP routing.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the routes loaded from route files")
    routes_parser.add_argument("files", nargs="+", help="Route files, in precedence order")

    # -- switchyard match -------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Find the action for a request")
    match_parser.add_argument("method", help="HTTP method (e.g. GET)")
    match_parser.add_argument("path", help="Request path (e.g. /users/42)")
    match_parser.add_argument("-r", "--routes", nargs="+", required=True, help="Route files")
    match_parser.add_argument("--host", default=None, help="Request host")
    match_parser.add_argument("--format", default=None, help="Negotiated format (e.g. json)")

    # -- switchyard reverse -----------------------------------------------
    reverse_parser = subparsers.add_parser("reverse", help="Render the URL for an action")
    reverse_parser.add_argument("action", help="Action id (e.g. Users.show)")
    reverse_parser.add_argument("args", nargs="*", help="Arguments as key=value")
    reverse_parser.add_argument("-r", "--routes", nargs="+", required=True, help="Route files")
    reverse_parser.add_argument("--format", default=None, help="Negotiated format of the current request")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from switchyard.cli._match import run_match

        run_match(args)
    elif args.command == "reverse":
        from switchyard.cli._match import run_reverse

        run_reverse(args)

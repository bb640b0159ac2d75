"""Folio CLI: inspect the registry built from a set of library directories.

Entry point registered as ``folio`` in ``pyproject.toml``::

    [project.scripts]
    folio = "folio.cli:main"
"""

import argparse
import logging
import sys

from folio.config import ConflictPolicy


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``folio`` command."""
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Folio: aggregate library pages and components into one registry.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every aggregation step",
    )
    subparsers = parser.add_subparsers(dest="command")

    policies = [policy.value for policy in ConflictPolicy]

    # -- folio routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the built page routes")
    routes_parser.add_argument("libraries", nargs="+", help="Library directories")
    routes_parser.add_argument(
        "--policy",
        choices=policies,
        default=ConflictPolicy.STRICT.value,
        help="How routes contributed by several libraries resolve",
    )

    # -- folio components -------------------------------------------------
    components_parser = subparsers.add_parser("components", help="List the built components")
    components_parser.add_argument("libraries", nargs="+", help="Library directories")
    components_parser.add_argument(
        "--policy",
        choices=policies,
        default=ConflictPolicy.STRICT.value,
        help="How components contributed by several libraries resolve",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from folio.cli._inspect import run_components, run_routes

    if args.command == "routes":
        run_routes(args)
    elif args.command == "components":
        run_components(args)

"""``folio routes`` and ``folio components``: print the built registry.

Discovers each library directory, aggregates them with the requested
conflict policy, builds, and prints a table.
"""

import argparse
import sys

from folio.config import BuilderConfig
from folio.discovery import discover_libraries
from folio.errors import FolioError
from folio.types import Registry


def run_routes(args: argparse.Namespace) -> None:
    """Print ROUTE, COMPONENT, and NAME for every built page."""
    registry = _build(args)
    if not registry.pages:
        print("No pages registered.")
        return

    rows = [(page.route, page.component, page.name or "") for page in registry.pages]
    _print_table(("ROUTE", "COMPONENT", "NAME"), rows)


def run_components(args: argparse.Namespace) -> None:
    """Print TYPE, TEMPLATE, and PARAMS for every built component."""
    registry = _build(args)
    if not registry.components:
        print("No components registered.")
        return

    rows = [
        (component.type_name, component.template or "", ", ".join(component.parameters))
        for component in registry.components
    ]
    _print_table(("TYPE", "TEMPLATE", "PARAMS"), rows)


def _build(args: argparse.Namespace) -> Registry:
    try:
        builder = discover_libraries(args.libraries, BuilderConfig(conflict_policy=args.policy))
    except FolioError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    return builder.build()


def _print_table(header: tuple[str, str, str], rows: list[tuple[str, str, str]]) -> None:
    widths = [max(len(header[i]), *(len(row[i]) for row in rows)) for i in range(2)]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{}}"
    print(fmt.format(*header).rstrip())
    sep_len = widths[0] + widths[1] + 4 + max(len(header[2]), *(len(row[2]) for row in rows))
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row).rstrip())

"""``perch routes`` — print the middleware registry in execution order.

Each row is one registry unit: ``USE`` for a global listener, the
methods of a route group otherwise, followed by the pattern and the
listener names.
"""

import argparse
import sys

from perch.app import App
from perch.cli._resolve import resolve_app
from perch.middleware.registry import GlobalUnit
from perch.routing.table import SUPPORTED_METHODS


def _name(listener: object) -> str:
    return getattr(listener, "__name__", type(listener).__name__)


def format_routes(app: App) -> list[tuple[str, str, str]]:
    """Rows of (methods, pattern, listeners) in registry order."""
    rows: list[tuple[str, str, str]] = []
    for unit in app.registry:
        if isinstance(unit, GlobalUnit):
            rows.append(("USE", "*", _name(unit.listener)))
            continue
        group = app.table.group(unit.group_id)
        methods = app.table.methods_for(group.group_id)
        label = "ALL" if len(methods) == len(SUPPORTED_METHODS) else ", ".join(methods)
        rows.append((label, group.path, ", ".join(_name(fn) for fn in group.listeners)))
    return rows


def run_routes(args: argparse.Namespace) -> None:
    """List registry units for the app at ``args.app``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = format_routes(app)
    if not rows:
        print("No listeners registered.")
        return

    width_methods = max(6, *(len(r[0]) for r in rows))
    width_path = max(7, *(len(r[1]) for r in rows))
    fmt = f"{{:<{width_methods}}}  {{:<{width_path}}}  {{}}"
    print(fmt.format("METHOD", "PATTERN", "LISTENERS"))
    print("-" * min(width_methods + width_path + 4 + max(len(r[2]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))

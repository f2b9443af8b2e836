"""``perch run`` — start the server for an import string."""

import argparse
import sys

from perch.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it; ``--host``/``--port`` override the config."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app._ensure_frozen()

    from perch.server import runner

    runner.run_server(
        app,
        args.host if args.host is not None else app.config.host,
        args.port if args.port is not None else app.config.port,
        reload=app.config.debug,
        reload_dirs=app.config.reload_dirs,
        workers=app.config.workers,
        app_path=args.app,
    )

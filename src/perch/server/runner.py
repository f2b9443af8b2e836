"""Serve a perch App with pounce.

Pounce's ``run()`` takes an import string (e.g. ``"myapp:app"``), but
``App.listen`` has a live ``App`` object, so ``pounce.Server`` is used
directly with the ASGI callable.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    reload_dirs: tuple[str, ...] = (),
    workers: int = 1,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for *app* and block until it stops.

    Args:
        app: ASGI callable (perch App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes (development only).
        reload_dirs: Extra directories to watch alongside cwd.
        workers: Worker count; reload forces a single worker.
        app_path: Optional ``"module:attribute"`` import string. When
            provided, pounce reimports the app on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
        reload_dirs=reload_dirs,
    )
    server = Server(config, app, app_path=app_path)
    server.run()

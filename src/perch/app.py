"""Perch application class.

Mutable during setup (listener registration, handlers, hooks).
Frozen at runtime when ``app.listen()`` or ``__call__()`` is first invoked.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeAlias, overload

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke
from perch._internal.types import ErrorHandler, Listener
from perch.config import AppConfig
from perch.errors import ConfigurationError
from perch.middleware.registry import MiddlewareRegistry
from perch.routing.table import SUPPORTED_METHODS, RouteTable, normalize_method
from perch.server.handler import handle_request

logger = logging.getLogger("perch.app")

ListenerDecorator: TypeAlias = Callable[[Listener], Listener]


class App:
    """The perch application.

    Registration order is execution order: ``use()`` listeners and route
    listeners interleave exactly as registered::

        app = App()
        app.use(parse_body)
        app.use(request_logger)

        @app.get("/users/:id")
        async def show_user(ctx, next):
            ctx.response.send({"id": ctx.params["id"]})

        app.listen(3000, lambda: print("listening"))

    Thread safety:
        The setup phase is single-threaded (registration at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread freezes the app, even when several ASGI workers call
        ``__call__()`` concurrently on their first request. Registering
        after the freeze raises ``RuntimeError``.
    """

    __slots__ = (
        "_error_handler",
        "_freeze_lock",
        "_frozen",
        "_not_found_handler",
        "_registry",
        "_shutdown_hooks",
        "_startup_hooks",
        "_table",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._table = RouteTable()
        self._registry = MiddlewareRegistry()
        self._error_handler: ErrorHandler | None = None
        self._not_found_handler: ErrorHandler | None = None
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Introspection --

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def registry(self) -> MiddlewareRegistry:
        return self._registry

    # -- Global middleware --

    def use(self, listener: Listener) -> Listener:
        """Register a listener that runs for every matched request.

        Usable as a decorator. Returns the listener unchanged.
        """
        self._check_not_frozen()
        self._registry.add_global(listener)
        return listener

    # -- Route registration --

    def _register(self, method: str, pattern: str, listeners: tuple[Listener, ...]) -> None:
        self._check_not_frozen()
        group, created = self._table.add(method, pattern, listeners)
        if created:
            self._registry.add_group(group.group_id)
        logger.debug(
            "%s %s -> group %d (%d listeners)",
            method.upper(),
            pattern,
            group.group_id,
            len(group.listeners),
        )

    @overload
    def route(self, method: str, pattern: str) -> ListenerDecorator: ...

    @overload
    def route(self, method: str, pattern: str, *listeners: Listener) -> App: ...

    def route(self, method: str, pattern: str, *listeners: Listener) -> Any:
        """Register *listeners* for ``(method, pattern)``.

        Registering the same ``(method, pattern)`` again extends the same
        group; the group still runs once per matching request. Called
        without listeners, returns a decorator registering the decorated
        function.

        Raises ``UnsupportedMethodError`` unless *method* is one of
        ``GET``, ``POST``, ``PUT``, ``DELETE``, ``PATCH``.
        """
        normalize_method(method)
        if not listeners:

            def decorator(func: Listener) -> Listener:
                self._register(method, pattern, (func,))
                return func

            return decorator

        self._register(method, pattern, listeners)
        return self

    def get(self, pattern: str, *listeners: Listener) -> Any:
        """Register listeners for GET requests to *pattern*."""
        return self.route("GET", pattern, *listeners)

    def post(self, pattern: str, *listeners: Listener) -> Any:
        """Register listeners for POST requests to *pattern*."""
        return self.route("POST", pattern, *listeners)

    def put(self, pattern: str, *listeners: Listener) -> Any:
        """Register listeners for PUT requests to *pattern*."""
        return self.route("PUT", pattern, *listeners)

    def delete(self, pattern: str, *listeners: Listener) -> Any:
        """Register listeners for DELETE requests to *pattern*."""
        return self.route("DELETE", pattern, *listeners)

    def patch(self, pattern: str, *listeners: Listener) -> Any:
        """Register listeners for PATCH requests to *pattern*."""
        return self.route("PATCH", pattern, *listeners)

    def all(self, pattern: str, *listeners: Listener) -> Any:
        """Register listeners for *pattern* under every supported method.

        Methods without a group for *pattern* share one new group with a
        single registry entry. Methods that already have one get the
        listeners appended to it.
        """
        if not listeners:

            def decorator(func: Listener) -> Listener:
                self._register_all(pattern, (func,))
                return func

            return decorator

        self._register_all(pattern, listeners)
        return self

    def _register_all(self, pattern: str, listeners: tuple[Listener, ...]) -> None:
        self._check_not_frozen()
        group, extended = self._table.add_all(pattern, listeners)
        if group is not None:
            self._registry.add_group(group.group_id)
        logger.debug(
            "ALL %s -> new group %s, extended %s",
            pattern,
            group.group_id if group is not None else None,
            [g.group_id for g in extended],
        )

    # -- Error handlers --

    def error(self, handler: ErrorHandler) -> ErrorHandler:
        """Set the handler for errors raised by listeners.

        Called as ``handler(ctx, error)``; it owns the response. Usable as
        a decorator. Without one, errors answer ``500 {"error": "<message>"}``.
        """
        self._check_not_frozen()
        self._error_handler = handler
        return handler

    def not_found(self, handler: ErrorHandler) -> ErrorHandler:
        """Set the handler for requests no pattern matched.

        Called as ``handler(ctx, NotFound())``. Without one, unmatched
        requests answer ``404 {"error": "Not found"}``.
        """
        self._check_not_frozen()
        self._not_found_handler = handler
        return handler

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Add a zero-argument hook run before the first request is served.

        The ``listen()`` callback is appended here too, so it fires after
        every hook registered before it.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Add a zero-argument hook run when the server stops."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Server --

    def listen(
        self,
        port: int | None = None,
        callback: Callable[..., Any] | None = None,
        *,
        host: str | None = None,
    ) -> None:
        """Start serving and block until the server stops.

        *callback* runs once the server finished starting up (it is added
        as the last startup hook). Port and host default to the config.
        """
        if callback is not None:
            self.on_startup(callback)
        self._ensure_frozen()
        logging.getLogger("perch").setLevel(self.config.log_level.upper())

        from perch.server.runner import run_server

        run_server(
            self,
            host if host is not None else self.config.host,
            port if port is not None else self.config.port,
            reload=self.config.debug,
            reload_dirs=self.config.reload_dirs,
            workers=self.config.workers,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            table=self._table,
            registry=self._registry,
            error_handler=self._error_handler,
            not_found_handler=self._not_found_handler,
            config=self.config,
        )

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, runs startup/shutdown hooks and signals
        completion back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            await invoke(hook)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Validate config and close registration.

        MUST only be called while holding _freeze_lock.
        """
        from perch.server.terminal_errors import TRACEBACK_STYLES

        if self.config.traceback_style not in TRACEBACK_STYLES:
            msg = (
                f"Unknown traceback_style {self.config.traceback_style!r}; "
                f"expected one of {', '.join(TRACEBACK_STYLES)}."
            )
            raise ConfigurationError(msg)
        if self.config.max_content_length < 0:
            msg = "max_content_length must be >= 0."
            raise ConfigurationError(msg)

        self._frozen = True
        logger.debug(
            "Frozen with %d route groups and %d registry units (%s)",
            len(self._table),
            len(self._registry),
            ", ".join(SUPPORTED_METHODS),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register listeners and handlers before calling app.listen()."
            )
            raise RuntimeError(msg)

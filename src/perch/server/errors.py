"""Error containment for dispatched requests.

Maps listener failures and unmatched routes to responses, using the
registered error / not-found handler or the default JSON bodies::

    404 {"error": "Not found"}
    500 {"error": "<message>"}
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from perch._internal.invoke import invoke
from perch.errors import HTTPError, NotFound
from perch.http.context import Context
from perch.server.terminal_errors import log_error

logger = logging.getLogger("perch.server")


async def call_error_handler(
    handler: Callable[..., Any],
    ctx: Context,
    exc: Exception,
) -> None:
    """Invoke a user-registered handler with introspected arguments.

    Handlers may accept zero, one (ctx), or two (ctx, error) args and may
    be sync or async.
    """
    params = list(inspect.signature(handler).parameters.values())
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params) or len(params) >= 2:
        await invoke(handler, ctx, exc)
    elif len(params) == 1:
        await invoke(handler, ctx)
    else:
        await invoke(handler)


def send_default_error(ctx: Context, status: int, message: str) -> None:
    """Answer with ``{"error": message}`` unless the response already ended."""
    if ctx.response.finished:
        logger.warning(
            "%s %s already finished; dropping %d response", ctx.method, ctx.url, status
        )
        return
    ctx.response.send({"error": message}, status)


async def handle_not_found(
    ctx: Context,
    not_found_handler: Callable[..., Any] | None,
    error_handler: Callable[..., Any] | None = None,
    *,
    traceback_style: str = "compact",
) -> None:
    """Resolve a request no pattern matched.

    The custom handler gets ``(ctx, NotFound())``; if it raises, the error
    goes through ``handle_listener_error``.
    """
    logger.debug("404 %s %s", ctx.method, ctx.url)
    if not_found_handler is None:
        send_default_error(ctx, 404, "Not found")
        return

    try:
        await call_error_handler(not_found_handler, ctx, NotFound())
    except Exception as exc:
        await handle_listener_error(exc, ctx, error_handler, traceback_style=traceback_style)


async def handle_listener_error(
    exc: Exception,
    ctx: Context,
    error_handler: Callable[..., Any] | None,
    *,
    traceback_style: str = "compact",
) -> None:
    """Resolve an error raised inside the pipeline.

    The custom handler receives exactly ``(ctx, exc)``. If it fails in
    turn, that failure is logged and the default 500 body is used.
    """
    status = exc.status if isinstance(exc, HTTPError) else 500
    if status >= 500:
        log_error(exc, ctx, status=status, style=traceback_style)
    else:
        logger.info("%d %s %s - %s", status, ctx.method, ctx.url, exc)

    if error_handler is not None:
        try:
            await call_error_handler(error_handler, ctx, exc)
            return
        except Exception as handler_exc:
            logger.exception("Error handler failed for %s %s", ctx.method, ctx.url)
            send_default_error(ctx, 500, str(handler_exc))
            return

    send_default_error(ctx, status, str(exc))

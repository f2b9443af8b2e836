"""ASGI handler — dispatches one request through the route table and registry.

The only component that turns raw ASGI into perch types. For each request:

1. Build ``Request`` and ``Context`` from the scope.
2. Route by method:
   - ``GET POST PUT DELETE PATCH``: match every pattern for the method.
     No match goes to the not-found path without running any listener.
     Otherwise the params of the last match are committed and the
     effective pipeline (all global units plus the matched groups, in
     registration order) runs.
   - ``OPTIONS`` / ``HEAD``: status 200, only global units run.
   - anything else: nothing runs.
3. Contain listener errors (custom error handler or default 500).
4. End the response if no listener did, and emit it.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch.config import AppConfig
from perch.context import context_var
from perch.http.context import Context
from perch.http.request import Request
from perch.middleware.pipeline import Pipeline, PipelineOutcome
from perch.middleware.registry import GlobalUnit, MiddlewareRegistry, Unit
from perch.routing.table import SUPPORTED_METHODS, RouteTable
from perch.server.errors import handle_listener_error, handle_not_found, send_default_error
from perch.server.sender import send_response

logger = logging.getLogger("perch.server")

GLOBAL_ONLY_METHODS = frozenset({"OPTIONS", "HEAD"})


def build_pipeline(units: Iterable[Unit], table: RouteTable) -> Pipeline:
    """Resolve registry units to listener runs.

    Group listener lists are copied, so the pipeline is a snapshot of the
    table at dispatch time.
    """
    runs: list[tuple[Any, ...]] = []
    for unit in units:
        if isinstance(unit, GlobalUnit):
            runs.append((unit.listener,))
        else:
            runs.append(tuple(table.group(unit.group_id).listeners))
    return Pipeline(runs)


async def dispatch(
    ctx: Context,
    *,
    table: RouteTable,
    registry: MiddlewareRegistry,
    error_handler: Callable[..., Any] | None = None,
    not_found_handler: Callable[..., Any] | None = None,
    traceback_style: str = "compact",
) -> PipelineOutcome | None:
    """Route *ctx* and run its effective pipeline.

    Returns the pipeline outcome, or ``None`` when no pipeline ran
    (unmatched route or unsupported method).
    """
    if ctx.method in SUPPORTED_METHODS:
        matches = table.match(ctx.method, ctx.path)
        if not matches:
            await handle_not_found(
                ctx, not_found_handler, error_handler, traceback_style=traceback_style
            )
            return None
        ctx.params = dict(matches[-1].params)
        units = registry.effective({m.group.group_id for m in matches})
    elif ctx.method in GLOBAL_ONLY_METHODS:
        ctx.response.status = 200
        units = registry.globals_only()
    else:
        logger.debug("%s %s: no listeners for this method", ctx.method, ctx.url)
        return None

    outcome = await build_pipeline(units, table).run(ctx)
    if outcome.error is not None:
        await handle_listener_error(
            outcome.error, ctx, error_handler, traceback_style=traceback_style
        )
    return outcome


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    table: RouteTable,
    registry: MiddlewareRegistry,
    error_handler: Callable[..., Any] | None = None,
    not_found_handler: Callable[..., Any] | None = None,
    config: AppConfig | None = None,
) -> None:
    """Process a single HTTP request end to end."""
    if scope["type"] != "http":
        return

    config = config or AppConfig()
    request = Request.from_asgi(scope, receive, max_content_length=config.max_content_length)
    ctx = Context(request)
    token = context_var.set(ctx)

    try:
        await dispatch(
            ctx,
            table=table,
            registry=registry,
            error_handler=error_handler,
            not_found_handler=not_found_handler,
            traceback_style=config.traceback_style,
        )
    except Exception as exc:
        # Failures outside the pipeline (handler bugs in perch itself)
        logger.exception("Dispatch failed for %s %s", ctx.method, ctx.url)
        send_default_error(ctx, 500, str(exc))
    finally:
        context_var.reset(token)

    ctx.response.end()
    await send_response(ctx.response, send, head=ctx.method == "HEAD")

"""Middleware — listeners registered with ``use()`` and the engine that runs them.

A listener is any callable matching::

    def listener(ctx: Context, next: NextFn) -> None: ...
    async def listener(ctx: Context, next: NextFn) -> None: ...

Built-in listeners:
    parse_body -- Decode JSON / text request bodies onto ``ctx.body``
    request_logger -- Log ``METHOD url`` for every dispatched request
"""

from perch.middleware.body import parse_body
from perch.middleware.logging import request_logger
from perch.middleware.pipeline import Next, Pipeline, PipelineOutcome, PipelineState
from perch.middleware.registry import GlobalUnit, GroupUnit, MiddlewareRegistry

__all__ = [
    "GlobalUnit",
    "GroupUnit",
    "MiddlewareRegistry",
    "Next",
    "Pipeline",
    "PipelineOutcome",
    "PipelineState",
    "parse_body",
    "request_logger",
]

"""Request logging listener.

Logs ``METHOD url`` at INFO on the ``perch.middleware`` logger and lets
the pipeline continue. Register it with ``use()`` where logging should
start; listeners registered before it that stop the chain are not logged,
and unmatched routes never reach it.
"""

import logging

from perch._internal.types import NextFn
from perch.http.context import Context

logger = logging.getLogger("perch.middleware")


def request_logger(ctx: Context, next: NextFn) -> None:
    logger.info("%s: %s", ctx.method, ctx.url)
    next()

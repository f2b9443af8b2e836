"""Invoke helper — call sync or async callables uniformly.

Error handlers, not-found handlers and lifecycle hooks can be ``def`` or
``async def``.

Usage::

    from perch._internal.invoke import invoke

    await invoke(handler, ctx, exc)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result

"""Shared type aliases used across perch modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from perch.http.context import Context

# Continuation callback handed to every listener
NextFn: TypeAlias = Callable[[], None]

# Listener — (ctx, next), sync or async
Listener: TypeAlias = Callable[["Context", NextFn], Awaitable[None] | None]

# Error / not-found handler — receives (ctx, error), arity is introspected
ErrorHandler: TypeAlias = Callable[..., Any]

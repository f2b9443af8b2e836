"""Request-scoped access to the current ``Context`` via ContextVar.

Set by the dispatcher for the duration of one request and reset after it,
so helpers deep in application code can reach the context without it
being threaded through every call.

Thread safety:
    ``ContextVar`` is task-local under asyncio. No locks needed.
"""

from contextvars import ContextVar

from perch.http.context import Context

context_var: ContextVar[Context] = ContextVar("perch_context")
"""The current request context. Set by the dispatcher before the pipeline runs."""


def get_context() -> Context:
    """Return the current request context.

    Raises ``LookupError`` if called outside a request.
    """
    return context_var.get()

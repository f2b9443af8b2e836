"""Continuation protocol — run an effective pipeline one listener at a time.

Every listener is invoked as ``listener(ctx, next)``. It either calls
``next()`` to let the pipeline proceed, or owns the response and does
not. Once the call settles (returns, or its awaitable completes) the
engine looks at that turn's flag:

- ``next()`` was called: move on to the following listener.
- ``next()`` was not called: stop. Nothing after it runs, not the rest
  of its group, not later groups, not later global listeners.
- the listener raised: stop the same way and report the error.

Execution is strictly sequential; a listener never starts before the
previous one settled.
"""

import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from perch._internal.types import Listener
from perch.http.context import Context

logger = logging.getLogger("perch.server")


class PipelineState(Enum):
    READY = "ready"
    RUNNING = "running"
    SUSPENDED = "suspended"
    ABORTED = "aborted"
    COMPLETED = "completed"


class Next:
    """Continuation callback for a single listener turn.

    A fresh instance per turn is the reset: a ``next`` kept from an earlier
    turn and called late never counts for the current one. Calling it more
    than once has no further effect.
    """

    __slots__ = ("called",)

    def __init__(self) -> None:
        self.called = False

    def __call__(self) -> None:
        self.called = True

    def __repr__(self) -> str:
        return f"<Next called={self.called}>"


@dataclass(frozen=True, slots=True)
class PipelineOutcome:
    """How a pipeline run ended.

    ``executed`` counts listeners that were invoked, including the one that
    stopped the run. ``error`` is set only when a listener raised.
    """

    state: PipelineState
    executed: int
    error: Exception | None = None

    @property
    def completed(self) -> bool:
        return self.state is PipelineState.COMPLETED

    @property
    def aborted(self) -> bool:
        return self.state is PipelineState.ABORTED


class Pipeline:
    """An assembled effective pipeline.

    ``units`` is a sequence of listener runs: a global listener is a run of
    one, a route group is its listener list. Grouping only decides what was
    included; each listener is checked individually.

    Usage::

        pipeline = Pipeline([(log_request,), (load_user, show_user)])
        outcome = await pipeline.run(ctx)
    """

    __slots__ = ("state", "units")

    def __init__(self, units: Sequence[Sequence[Listener]]) -> None:
        self.units: tuple[tuple[Listener, ...], ...] = tuple(tuple(run) for run in units)
        self.state = PipelineState.READY

    def __len__(self) -> int:
        return sum(len(run) for run in self.units)

    async def run(self, ctx: Context) -> PipelineOutcome:
        """Drive every listener in order until one stops the chain."""
        if self.state is not PipelineState.READY:
            msg = f"Pipeline already {self.state.value}."
            raise RuntimeError(msg)

        executed = 0
        for run in self.units:
            for listener in run:
                next_fn = Next()
                self.state = PipelineState.RUNNING
                executed += 1
                try:
                    result = listener(ctx, next_fn)
                    if inspect.isawaitable(result):
                        self.state = PipelineState.SUSPENDED
                        await result
                except Exception as exc:
                    self.state = PipelineState.ABORTED
                    return PipelineOutcome(self.state, executed, error=exc)

                if not next_fn.called:
                    logger.debug(
                        "%s %s stopped at %s",
                        ctx.method,
                        ctx.path,
                        getattr(listener, "__name__", listener),
                    )
                    self.state = PipelineState.ABORTED
                    return PipelineOutcome(self.state, executed)

        self.state = PipelineState.COMPLETED
        return PipelineOutcome(self.state, executed)

"""
Middleware pipeline: threads a state object through an ordered list of pipes.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .container import Container

logger = logging.getLogger(__name__)

HANDLE = "handle"
TERMINATE = "terminate"


class PipelineError(Exception):
    """Raised when a pipe cannot be resolved or invoked."""


class PipelineState(Enum):
    """Lifecycle of a single pipeline run."""

    IDLE = "idle"
    SENDING = "sending"
    CONFIGURED = "configured"
    THREADING = "threading"
    COMPLETED = "completed"
    HALTED = "halted"


class PendingPipeline:
    """
    Outcome of a pipeline run.

    A run is COMPLETED once the last pipe calls its continuation. If any
    pipe withholds its continuation the run is HALTED; callbacks passed to
    ``then`` are queued and fire if the withheld continuation is called
    later.
    """

    def __init__(self) -> None:
        self.state = PipelineState.THREADING
        self.result: Any = None
        self._callbacks: list[Callable[[Any], Any]] = []

    @property
    def completed(self) -> bool:
        return self.state is PipelineState.COMPLETED

    @property
    def halted(self) -> bool:
        return self.state is PipelineState.HALTED

    def then(self, callback: Callable[[Any], Any]) -> Any:
        """
        Deliver the final state to a callback.

        Returns:
            The callback's return value if the run has completed, else None
        """
        if self.completed:
            return callback(self.result)
        self._callbacks.append(callback)
        return None

    def _complete(self, result: Any) -> Any:
        self.state = PipelineState.COMPLETED
        self.result = result
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(result)
        return result

    def _settle(self) -> None:
        if not self.completed:
            self.state = PipelineState.HALTED

    def __repr__(self) -> str:
        return f"PendingPipeline({self.state.value}, result={self.result!r})"


class Pipeline:
    """
    Builder and executor for one pipeline run.

    Usage:
        Pipeline().send(state).through([PipeA, PipeB]).via("handle").then(callback)

    ``via("handle")`` runs pipes in list order, ``via("terminate")`` in
    reverse order. Each pipe is called as ``pipe.<method>(state, next_)``
    and advances the chain by calling ``next_(state)``; a pipe that never
    calls ``next_`` halts the run.
    """

    def __init__(self, container: Container | None = None) -> None:
        self._container = container
        self._passable: Any = None
        self._pipes: list[Any] = []
        self._method = HANDLE
        self._state = PipelineState.IDLE
        self._pending: PendingPipeline | None = None

    @property
    def state(self) -> PipelineState:
        if self._pending is not None:
            return self._pending.state
        return self._state

    @property
    def pipes(self) -> list[Any]:
        return list(self._pipes)

    def send(self, passable: Any) -> Pipeline:
        """Capture the state object to thread through the pipes."""
        self._passable = passable
        self._state = PipelineState.SENDING
        return self

    def through(self, pipes: Sequence[Any]) -> Pipeline:
        """Set the ordered pipe list."""
        self._pipes = list(pipes)
        self._state = PipelineState.CONFIGURED
        return self

    def via(self, method: str) -> PendingPipeline:
        """
        Select the pipe method and run the pipeline.

        Args:
            method: Method invoked on each pipe; ``"terminate"`` reverses
                the pipe order

        Returns:
            The run outcome, exposing ``then``
        """
        self._method = method
        self._state = PipelineState.THREADING
        pipes = list(reversed(self._pipes)) if method == TERMINATE else list(self._pipes)
        pending = self._pending = PendingPipeline()

        logger.debug("Threading %d pipe(s) via %r", len(pipes), method)
        self._stage(pipes, 0, pending)(self._passable)
        pending._settle()
        if pending.halted:
            logger.debug("Pipeline via %r halted before reaching its destination", method)
        return pending

    def _stage(self, pipes: list[Any], index: int, pending: PendingPipeline) -> Callable[[Any], Any]:
        """Build the continuation that invokes ``pipes[index]``."""
        if index >= len(pipes):
            return pending._complete

        def next_(passable: Any) -> Any:
            pipe = pipes[index]
            handler = self._resolve_handler(pipe)
            logger.debug("Invoking pipe %s.%s", _pipe_name(pipe), self._method)
            return handler(passable, self._stage(pipes, index + 1, pending))

        return next_

    def _resolve_handler(self, pipe: Any) -> Callable[[Any, Callable[[Any], Any]], Any]:
        if isinstance(pipe, str):
            if self._container is None:
                raise PipelineError(f"Cannot resolve pipe {pipe!r} without a container")
            pipe = self._container.make(pipe)
        elif inspect.isclass(pipe):
            pipe = pipe()

        handler = getattr(pipe, self._method, None)
        if callable(handler):
            return handler
        if callable(pipe):
            return pipe
        raise PipelineError(f"Pipe {_pipe_name(pipe)} does not define {self._method!r}")


def _pipe_name(pipe: Any) -> str:
    if isinstance(pipe, str):
        return pipe
    return getattr(pipe, "__name__", type(pipe).__name__)

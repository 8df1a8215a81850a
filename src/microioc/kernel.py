"""
Kernel: container-aware middleware runner.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from .pipeline import HANDLE, TERMINATE, PendingPipeline, Pipeline

if TYPE_CHECKING:
    from .container import Container


class Kernel:
    """
    Holds the application middleware and drives it through a Pipeline.

    ``handle`` runs the middleware in order; ``terminate`` runs it in
    reverse so teardown mirrors setup. String pipes are resolved through
    the kernel's container.
    """

    def __init__(self, container: Container | None = None) -> None:
        self.container = container
        self._middleware: list[Any] = []

    @property
    def middleware(self) -> list[Any]:
        return list(self._middleware)

    def set_middleware(self, pipes: Sequence[Any]) -> Kernel:
        self._middleware = list(pipes)
        return self

    def send(self, passable: Any) -> Pipeline:
        """Start a pipeline run for a state object."""
        return Pipeline(self.container).send(passable)

    def handle(self, passable: Any, callback: Callable[[Any], Any] | None = None) -> Any:
        """Thread state through the middleware in order."""
        return self._run(passable, HANDLE, callback)

    def terminate(self, passable: Any, callback: Callable[[Any], Any] | None = None) -> Any:
        """Thread state through the middleware in reverse order."""
        return self._run(passable, TERMINATE, callback)

    def _run(self, passable: Any, method: str, callback: Callable[[Any], Any] | None) -> Any:
        pending: PendingPipeline = self.send(passable).through(self._middleware).via(method)
        if callback is None:
            return pending
        return pending.then(callback)

"""
Exception types and the default error handler for the container.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .container import Container

logger = logging.getLogger(__name__)


class ExceptionKind(Enum):
    """Kinds of failures a container can report."""

    BINDING = "Binding Exception"
    CIRCULAR_DEPENDENCY = "Circular Dependency Exception"
    SHARING = "Sharing Exception"


class ContainerException(Exception):
    """
    Generic container failure.

    All user-facing container errors share this type and are told apart by
    ``kind``. ``name`` combines the raising container's class name with the
    kind, e.g. ``"Container Binding Exception"``.
    """

    def __init__(self, kind: ExceptionKind, message: str, owner: str = "Container"):
        self.kind = kind
        self.name = f"{owner} {kind.value}"
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


class ErrorHandler:
    """
    Default error handler.

    Logs the error and returns None, so a failed resolution degrades to a
    None value at the failure site instead of interrupting the caller.
    Subclass and override ``handle`` to change that policy.
    """

    def __init__(self, container: Container):
        self.container = container

    def handle(self, error: BaseException) -> Any:
        logger.error("%s", error)
        self.container.log(f"Handled {type(error).__name__}: {error}")
        return None

"""
Service provider base class.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .container import Container


class ServiceProvider:
    """
    A unit that wires bindings into a container.

    ``register`` runs once for every provider during
    ``Container.boot_providers``. ``load`` runs right after for eager
    providers, or on the first resolution of one of the ``provides``
    aliases when ``is_deferred`` is set.
    """

    provides: ClassVar[Sequence[str]] = ()
    is_deferred: ClassVar[bool] = False

    def __init__(self, app: Container):
        self.app = app

    @property
    def container(self) -> Container:
        return self.app

    def register(self) -> None:
        """Register bindings with the container."""

    def load(self) -> None:
        """Boot the provider once its bindings are registered."""

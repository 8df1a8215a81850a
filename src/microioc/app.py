"""
Application service provider.
"""

from __future__ import annotations

from .kernel import Kernel
from .providers import ServiceProvider


class AppServiceProvider(ServiceProvider):
    """Binds the application ``Kernel``."""

    provides = ["Kernel"]

    def register(self) -> None:
        self.app.bind("Kernel", lambda: Kernel(self.app))

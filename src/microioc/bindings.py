"""
Binding definitions and kinds.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .introspection import Dependency, read_dependencies


class BindingKind(Enum):
    """How a binding produces its concrete value."""

    VALUE = "value"
    FACTORY = "factory"
    CONSTRUCTOR = "constructor"


@dataclass(frozen=True)
class Binding:
    """An alias bound to a value, factory or constructor."""

    alias: str
    kind: BindingKind
    implementation: type | Callable[..., Any] | Any
    dependencies: tuple[Dependency, ...] = ()

    @classmethod
    def create(
        cls,
        alias: str,
        implementation: Any,
        dependencies: list[str] | tuple[str, ...] | None = None,
        kind: BindingKind | None = None,
    ) -> Binding:
        """
        Classify an implementation and build its binding.

        Args:
            alias: The alias the binding is registered under
            implementation: A class, a callable factory or a plain value
            dependencies: Explicit dependency aliases, in argument order.
                When omitted they are read from the callable's signature.
            kind: Explicit binding kind, overriding classification

        Returns:
            A new Binding
        """
        if kind is None:
            if inspect.isclass(implementation):
                kind = BindingKind.CONSTRUCTOR
            elif callable(implementation):
                kind = BindingKind.FACTORY
            else:
                kind = BindingKind.VALUE

        if kind is BindingKind.VALUE:
            deps: tuple[Dependency, ...] = ()
        elif dependencies is not None:
            deps = tuple(Dependency(name) for name in dependencies)
        else:
            deps = tuple(read_dependencies(implementation))

        return cls(alias, kind, implementation, deps)

    @property
    def is_callable(self) -> bool:
        return self.kind is not BindingKind.VALUE

    def __str__(self) -> str:
        impl_name = getattr(self.implementation, "__name__", repr(self.implementation))
        deps_str = f"({', '.join(str(dep) for dep in self.dependencies)})" if self.dependencies else ""
        return f"{self.alias} -> {impl_name}{deps_str} ({self.kind.value})"

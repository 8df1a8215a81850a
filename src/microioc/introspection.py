"""
Signature introspection for extracting dependency aliases from callables.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

_INJECTABLE_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class Dependency:
    """A single positional dependency of a factory or constructor."""

    alias: str
    optional: bool = False

    def __str__(self) -> str:
        return f"{self.alias}?" if self.optional else self.alias


def read_dependencies(target: Callable[..., Any]) -> list[Dependency]:
    """
    Read the positional parameters of a callable as dependency aliases.

    Parameter names are used verbatim as aliases, in declaration order.
    Variadic and keyword-only parameters are skipped, and parameters with a
    default value are marked optional. For classes the ``__init__``
    signature is used, without ``self``.

    Args:
        target: A class or callable

    Returns:
        The ordered list of dependencies, empty if the signature
        cannot be inspected
    """
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        return []

    dependencies: list[Dependency] = []
    for param in signature.parameters.values():
        if param.kind not in _INJECTABLE_KINDS:
            continue
        name = param.name.strip()
        if not name:
            continue
        dependencies.append(Dependency(name, param.default is not inspect.Parameter.empty))
    return dependencies

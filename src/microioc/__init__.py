"""
microioc - an inversion-of-control container with a middleware kernel.

This library provides:
- Named bindings resolved lazily, with dependency injection by parameter name
- Singleton caching, rebinding and circular dependency detection
- Service providers with register/boot phases and deferred boot
- Sharing of lazy accessors with external objects
- A bidirectional middleware pipeline (handle / terminate)
"""

from .app import AppServiceProvider
from .bindings import Binding, BindingKind
from .container import Container
from .exceptions import ContainerException, ErrorHandler, ExceptionKind
from .introspection import Dependency, read_dependencies
from .kernel import Kernel
from .pipeline import PendingPipeline, Pipeline, PipelineError, PipelineState
from .providers import ServiceProvider

__all__ = [
    "AppServiceProvider",
    "Binding",
    "BindingKind",
    "Container",
    "ContainerException",
    "Dependency",
    "ErrorHandler",
    "ExceptionKind",
    "Kernel",
    "PendingPipeline",
    "Pipeline",
    "PipelineError",
    "PipelineState",
    "ServiceProvider",
    "read_dependencies",
]

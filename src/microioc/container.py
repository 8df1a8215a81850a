"""
Service container: bindings, lazy resolution, providers and sharing.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from .bindings import Binding, BindingKind
from .exceptions import ContainerException, ExceptionKind
from .providers import ServiceProvider

logger = logging.getLogger(__name__)


class Container:
    """
    Mapping-based service locator.

    Aliases are bound to values, factories or constructors and resolved
    lazily on ``make``. Factory and constructor arguments are resolved from
    their declared dependency aliases, depth-first and in argument order.
    Results of sharable aliases are cached until destroyed.

    Service providers are registered by class and booted in two phases by
    ``boot_providers``; deferred providers are booted on the first
    resolution of an alias they provide.

    Failures raise ``ContainerException`` and are routed through
    ``handle_error``, which delegates to an installed error handler or
    re-raises.
    """

    def __init__(self, debug: bool = False) -> None:
        self._providers: dict[str, ServiceProvider] = {}
        self._wired: set[str] = set()
        self._booted: set[str] = set()
        self._bindings: dict[str, Binding] = {}
        self._resolved: dict[str, Any] = {}
        self._sharable: list[str] = []
        self._should_share: list[str] = []
        self._shared_with: dict[str, list[object]] = {}
        self._accessors: dict[str, Callable[[], Any]] = {}
        self._debug = debug
        self._error_handler: Any = None
        self._log_output: list[str] = []

    @property
    def providers(self) -> dict[str, ServiceProvider]:
        return dict(self._providers)

    @property
    def bindings(self) -> dict[str, Binding]:
        return dict(self._bindings)

    @property
    def resolved(self) -> dict[str, Any]:
        return dict(self._resolved)

    @property
    def sharable(self) -> list[str]:
        """Sharable aliases that are still bound."""
        return [alias for alias in self._sharable if self.is_bound(alias)]

    @property
    def shared_with(self) -> dict[str, list[object]]:
        return {alias: list(targets) for alias, targets in self._shared_with.items()}

    def get_provider(self, provider_name: str) -> ServiceProvider | None:
        """Get a registered provider instance by its class name."""
        return self._providers.get(provider_name)

    def get_binding(self, alias: str) -> Binding | None:
        return self._bindings.get(alias)

    def get_instance(self, alias: str) -> Any:
        """Get the cached instance for an alias."""
        self.log(f'Resolved Shared Instance of "{alias}".')
        return self._resolved[alias]

    # Debugging

    def debug(self, state: bool) -> None:
        """Toggle debug mode."""
        self._debug = state

    @property
    def debugging(self) -> bool:
        return self._debug is True

    @debugging.setter
    def debugging(self, state: bool) -> None:
        self._debug = state

    @property
    def log_output(self) -> list[str]:
        return self._log_output

    @log_output.setter
    def log_output(self, output: list[str]) -> None:
        self._log_output = list(output)

    def flush_logs(self) -> Container:
        self._log_output = []
        return self

    def log(self, message: str, *details: Any) -> Container:
        """
        Emit a debug trace line.

        Only active in debug mode: the line goes to the module logger and
        ``message`` is appended to ``log_output``.
        """
        if self._debug:
            logger.debug(" ".join([message, *(repr(detail) for detail in details)]))
            self._log_output.append(message)
        return self

    # Errors

    def error_handler(self, handler_class: Callable[[Container], Any]) -> Container:
        """Install an error handler, constructed with this container."""
        self._error_handler = handler_class(self)
        return self

    def handle_error(self, error: BaseException) -> Any:
        """
        Delegate an error to the installed handler.

        Returns:
            Whatever the handler returns

        Raises:
            The error itself when no callable handler is installed
        """
        handler = getattr(self._error_handler, "handle", None)
        if callable(handler):
            return handler(error)
        raise error

    def make_exception(self, kind: ExceptionKind, message: str) -> ContainerException:
        return ContainerException(kind, message, type(self).__name__)

    # Predicates

    def is_registered(self, provider_name: str) -> bool:
        return provider_name in self._providers

    def is_booted(self, provider_name: str) -> bool:
        return provider_name in self._booted

    def is_bound(self, alias: str) -> bool:
        return alias in self._bindings

    def is_resolved(self, alias: str) -> bool:
        return alias in self._resolved

    def is_shared(self, alias: str) -> bool:
        return bool(self._shared_with.get(alias))

    def can_share(self, alias: str) -> bool:
        return alias in self._sharable

    def is_class(self, abstract: Any) -> bool:
        """Check whether an alias (or a raw implementation) is a constructor."""
        if isinstance(abstract, str):
            binding = self._bindings.get(abstract)
            return binding is not None and binding.kind is BindingKind.CONSTRUCTOR
        return inspect.isclass(abstract)

    def is_concrete(self, alias: str) -> bool:
        """Check whether an alias is bound to a plain value."""
        binding = self._bindings.get(alias)
        return binding is not None and binding.kind is BindingKind.VALUE

    # Bindings

    def bind(
        self,
        alias: str,
        binding: Any,
        shared: bool = True,
        *,
        dependencies: list[str] | tuple[str, ...] | None = None,
        kind: BindingKind | None = None,
    ) -> Container:
        """
        Bind an alias to a value, factory or constructor.

        Args:
            alias: The alias to bind
            binding: A class, a callable factory or a plain value
            shared: Whether resolved instances are cached
            dependencies: Dependency aliases passed positionally to the
                factory; read from its signature when omitted
            kind: Explicit binding kind, overriding classification

        Returns:
            The container
        """
        self.log(f'Binding: "{alias}"...')
        if alias in self._bindings:
            # A stale instance of the previous binding must not be served.
            self._resolved.pop(alias, None)
        self._bindings[alias] = Binding.create(alias, binding, dependencies, kind)
        if shared and alias not in self._sharable:
            self._sharable.append(alias)
        elif not shared and alias in self._sharable:
            self._sharable.remove(alias)
        return self

    def unbind(self, alias: str) -> Container:
        """Destroy any resolved instance and remove the binding."""
        self.log(f'UnBinding: "{alias}"...')
        self.destroy(alias)
        if self._bindings.pop(alias, None) is not None:
            self.log(f'Cleaning up resolved reference of "{alias}"...')
        if alias in self._sharable:
            self._sharable.remove(alias)
        return self

    def set_instance(self, alias: str, concrete: Any, shared: bool = True) -> Any:
        """Cache a concrete instance directly, bypassing resolution."""
        self.log(f'Set Instance of "{alias}".', concrete)
        self._resolved[alias] = concrete
        if shared and alias not in self._sharable:
            self._sharable.append(alias)
        return concrete

    def destroy(self, alias: str) -> bool:
        """
        Destroy the resolved instance of an alias.

        Shared accessors are removed first.

        Returns:
            True if an instance was destroyed
        """
        if not self.is_resolved(alias):
            return False
        self.unshare(alias)
        self.log(f'Destroying shared instance of "{alias}"...')
        del self._resolved[alias]
        self.log(f'"{alias}" was destroyed successfully.')
        return True

    # Providers

    def register(self, provider_class: type[ServiceProvider]) -> Container:
        """Instantiate a provider with this container and store it by class name."""
        provider_name = provider_class.__name__
        self._providers[provider_name] = provider_class(self)
        self._wired.discard(provider_name)
        self._booted.discard(provider_name)
        self.log(f'Registered "{provider_name}"...')
        return self

    def boot_providers(self) -> None:
        """
        Register, then boot, every provider.

        All providers have ``register`` called first so that bindings exist
        before any ``load`` runs. Providers that are not deferred are then
        booted in registration order.
        """
        providers = list(self._providers.items())
        for provider_name, provider in providers:
            if provider_name in self._wired:
                continue
            self.log(f'Calling "{provider_name}" Registration...')
            provider.register()
            self._wired.add(provider_name)

        for provider_name, provider in providers:
            if not provider.is_deferred:
                self._boot_provider(provider_name, provider)

    def _boot_provider(self, provider_name: str, provider: ServiceProvider) -> None:
        if provider_name in self._booted:
            return
        self.log(f'Calling "{provider_name}" Boot...')
        self._booted.add(provider_name)
        try:
            provider.load()
        except Exception:
            self._booted.discard(provider_name)
            raise

    def _find_provider(self, alias: str) -> tuple[str, ServiceProvider] | None:
        """Find the first registered provider that provides an alias."""
        self.log(f"Checking Provider for {alias}...")
        for provider_name, provider in self._providers.items():
            if alias in provider.provides:
                self.log(f"Located Provider for {alias}...")
                return provider_name, provider
        return None

    # Resolution

    def make(self, alias: str) -> Any:
        """Resolve an alias to a concrete instance."""
        self.log(f'Making "{alias}"...')
        return self._resolve_root(alias, rebound=False)

    def rebound(self, alias: str) -> Any:
        """Resolve a fresh instance of an alias, destroying any cached one."""
        self.log(f'Rebound: "{alias}"...')
        return self._resolve_root(alias, rebound=True)

    def _resolve_root(self, alias: str, rebound: bool) -> Any:
        try:
            return self._resolve(alias, rebound)
        except Exception as error:
            return self.handle_error(error)

    def _resolve(self, alias: str, rebound: bool = False, chain: tuple[str, ...] = ()) -> Any:
        if self.is_resolved(alias) and self.can_share(alias) and not rebound:
            return self.get_instance(alias)
        if rebound:
            self.destroy(alias)
        if not self.is_bound(alias):
            return self.handle_error(
                self.make_exception(ExceptionKind.BINDING, f'No Binding found for "{alias}".')
            )

        located = self._find_provider(alias)
        if located is not None:
            provider_name, provider = located
            if provider.is_deferred and provider_name not in self._booted:
                self.log(f'Booting Deferred ServiceProvider "{provider_name}" for "{alias}"...')
                self._boot_provider(provider_name, provider)

        binding = self._bindings[alias]
        injections = self._prepare_injections(binding, chain + (alias,))
        try:
            instance = self._build(binding, injections)
        except Exception as error:
            # The handler's value stands in at the failure site and is not cached.
            return self.handle_error(error)
        if self.can_share(alias):
            self.log(f'"{alias}" is Sharable.')
            self._resolved[alias] = instance
        return instance

    def _build(self, binding: Binding, injections: list[Any]) -> Any:
        self.log(f'Resolving Binding for "{binding.alias}"...')
        if not binding.is_callable:
            return binding.implementation

        concrete = binding.implementation(*injections)
        if concrete is None:
            raise self.make_exception(
                ExceptionKind.BINDING,
                f"Binding {binding} failed, return value is None.",
            )
        self.log(f'Instantiated Concrete Instance of "{type(concrete).__name__}" successfully.')
        return concrete

    def _prepare_injections(self, binding: Binding, chain: tuple[str, ...]) -> list[Any]:
        """Resolve the dependencies of a callable binding, in order."""
        injections: list[Any] = []
        for dependency in binding.dependencies:
            if dependency.optional and not self._can_resolve(dependency.alias):
                # Later positional arguments cannot be passed past a default.
                break
            if dependency.alias in chain:
                cycle = " -> ".join(chain + (dependency.alias,))
                raise self.make_exception(
                    ExceptionKind.CIRCULAR_DEPENDENCY,
                    f"{binding.alias} requires {cycle}",
                )
            self.log(f'{binding.alias} requires dependency "{dependency.alias}"')
            injections.append(self._resolve(dependency.alias, chain=chain))
        return injections

    def _can_resolve(self, alias: str) -> bool:
        return self.is_bound(alias) or (self.is_resolved(alias) and self.can_share(alias))

    # Sharing

    def share(self, *aliases: str) -> Container:
        """
        Stage aliases to be shared with other objects.

        Each alias must be bound and sharable; offending aliases are
        reported through ``handle_error`` and left out. Finish the call
        with ``with_others``.
        """
        self._should_share = []
        for alias in aliases:
            if not self.is_bound(alias):
                self.handle_error(
                    self.make_exception(ExceptionKind.SHARING, f"No binding for {alias} available to share.")
                )
                continue
            if not self.can_share(alias):
                self.handle_error(self.make_exception(ExceptionKind.SHARING, f"{alias} is not sharable."))
                continue
            if alias not in self._should_share:
                self._should_share.append(alias)
        return self

    def with_others(self, *targets: object) -> Container:
        """
        Attach lazy accessors for the staged aliases to each target.

        A target is recorded at most once per alias. The staged aliases
        are cleared afterwards.
        """
        try:
            for alias in self._should_share:
                shared_list = self._shared_with.setdefault(alias, [])
                accessor = self._accessors.setdefault(alias, self._make_sharable_alias(alias))
                name = self.shared_alias_name(alias)
                for target in targets:
                    if any(existing is target for existing in shared_list):
                        continue
                    shared_list.append(target)
                    try:
                        setattr(target, name, accessor)
                    except (AttributeError, TypeError):
                        self.log(f'Cannot attach "{name}" to {type(target).__name__}; use shared_accessor().')
            if self._should_share:
                self.log(f'Shared "{", ".join(self._should_share)}" with {len(targets)} Objects.')
        finally:
            self._should_share = []
        return self

    def _make_sharable_alias(self, alias: str) -> Callable[[], Any]:
        return lambda: self.make(alias)

    def shared_accessor(self, target: object, alias: str) -> Callable[[], Any] | None:
        """Get the accessor registered for an alias on a target, if any."""
        if any(existing is target for existing in self._shared_with.get(alias, [])):
            return self._accessors.get(alias)
        return None

    def shared_alias_name(self, alias: str) -> str:
        """Accessor name for an alias, e.g. ``Kernel -> $kernel``."""
        return f"${alias[:1].lower()}{alias[1:]}"

    def unshare(self, alias: str) -> None:
        """Remove the accessors of an alias from every shared target."""
        self.log(f'UnSharing "{alias}"...')
        targets = self._shared_with.pop(alias, None)
        self._accessors.pop(alias, None)
        if not targets:
            return
        name = self.shared_alias_name(alias)
        for target in targets:
            self.log(f'Destroying shared references of "{alias}"...')
            if name in getattr(target, "__dict__", {}):
                delattr(target, name)

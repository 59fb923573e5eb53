from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set, Type

from ..errors import CircularDependencyError, ResolutionError


@dataclass
class Registration:
    interface: Type
    implementation: Optional[Type] = None
    factory: Optional[Callable[[Container], Any]] = None


class Container:
    """Service registry used by :func:`favactors.di.bootstrap`.

    Every service is created at most once, on first :meth:`resolve`, and
    shared afterwards.
    """

    def __init__(self):
        self._registrations: Dict[Type, Registration] = {}
        self._instances: Dict[Type, Any] = {}
        self._resolving: Set[Type] = set()

    # --- Registration API ---

    def register_singleton(self, interface: Type, implementation: Optional[Type] = None):
        self._registrations[interface] = Registration(interface, implementation or interface)

    def register_factory(self, interface: Type, factory: Callable[[Container], Any]):
        """Register *factory*; it receives the container to resolve its own dependencies."""
        self._registrations[interface] = Registration(interface, factory=factory)

    def register_instance(self, interface: Type, instance: Any):
        self._registrations[interface] = Registration(interface)
        self._instances[interface] = instance

    # --- Resolution ---

    def resolve(self, interface: Type) -> Any:
        if interface in self._instances:
            return self._instances[interface]
        if interface not in self._registrations:
            raise ResolutionError(f"No registration found for {interface}")
        if interface in self._resolving:
            raise CircularDependencyError(f"Circular dependency detected for {interface}")
        self._resolving.add(interface)
        try:
            instance = self._create(self._registrations[interface])
        finally:
            self._resolving.discard(interface)
        self._instances[interface] = instance
        return instance

    def is_resolved(self, interface: Type) -> bool:
        """Return ``True`` once *interface* has been created or registered as an instance."""
        return interface in self._instances

    # --- Helpers ---

    def _create(self, reg: Registration) -> Any:
        if reg.factory:
            return reg.factory(self)
        impl = reg.implementation or reg.interface
        return impl()

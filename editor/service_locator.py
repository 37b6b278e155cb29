# file: editor/service_locator.py

import inspect
import logging
from typing import Any, Callable, Dict

from editor.exceptions import ServiceResolutionError


class ServiceLocator:
    """
    A small dependency injection container.

    Services are registered under a name with a factory and resolved
    lazily. Singletons are built once; transient services are rebuilt on
    every resolve(). When a factory takes parameters, each one is resolved
    as the service of the same name, e.g.
    ``CommandHistory(event_bus)`` receives the "event_bus" service.
    """
    def __init__(self):
        # Stores singleton instances
        self._singletons: Dict[str, Any] = {}
        # Stores factories for all services
        self._factories: Dict[str, Callable[..., Any]] = {}
        # Tracks which services are singletons
        self._is_singleton: Dict[str, bool] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def register(self, name: str, factory: Callable[..., Any], singleton: bool = True):
        """
        Registers a service with the locator.

        Args:
            name (str): The unique name to identify the service.
            factory (Callable): A function (or class) that creates the service.
            singleton (bool): If True, the instance is created on first request
                              and reused. If False, every resolve() builds a new one.
        """
        if name in self._factories:
            self.logger.warning(f"Service '{name}' is being re-registered.")

        self._factories[name] = factory
        self._is_singleton[name] = singleton
        # Drop a stale instance so the new factory takes effect
        self._singletons.pop(name, None)

    def resolve(self, name: str) -> Any:
        """Returns the instance registered under name."""
        if name not in self._factories:
            raise ServiceResolutionError(f"Service '{name}' not found.")

        if not self._is_singleton[name]:
            return self._create_instance(name)

        if name not in self._singletons:
            self._singletons[name] = self._create_instance(name)
        return self._singletons[name]

    def _create_instance(self, name: str) -> Any:
        factory = self._factories[name]
        try:
            sig = inspect.signature(factory)
        except (TypeError, ValueError):
            # Builtins and some C callables have no signature
            return factory()

        dependencies = {}
        for param_name, param in sig.parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param_name in self._factories:
                dependencies[param_name] = self.resolve(param_name)
            elif param.default is param.empty:
                raise ServiceResolutionError(
                    f"Cannot resolve dependency '{param_name}' for service '{name}'. "
                    "Ensure it's registered or has a default value."
                )

        self.logger.debug(f"Creating service '{name}' with dependencies {list(dependencies)}")
        return factory(**dependencies)

    def __getitem__(self, name: str) -> Any:
        """Allows dictionary-style access, e.g., locator['event_bus']"""
        return self.resolve(name)

    def __contains__(self, name: str) -> bool:
        """Allows 'in' check, e.g., 'event_bus' in locator"""
        return name in self._factories

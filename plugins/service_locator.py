"""
plugins/service_locator.py
Process-wide context shared by the host and its plugins.

The host initializes the locator once at startup, registers the objects it
owns (customization catalog, characters, passport, network session, plugin
manager, broadcast dispatcher) and shuts it down at exit. Plugins receive the
locator by reference and resolve services when they need them, so a service
that appears later in the session is picked up on the next lookup.
"""
from typing import Any, Dict, List, Optional, Type


class ServiceNotFoundException(Exception):
    """Exception raised when a requested service is not found."""
    pass


class ServiceLocator:
    """
    Central registry of named services.

    There is one active locator per process; `initialize()` creates it and
    `shutdown()` drops it so a new session (or test) starts clean.
    """

    _instance: Optional["ServiceLocator"] = None

    @classmethod
    def initialize(cls) -> "ServiceLocator":
        """Creates the process-wide locator, replacing any previous one."""
        cls._instance = ServiceLocator()
        return cls._instance

    @classmethod
    def get_instance(cls) -> "ServiceLocator":
        """
        Get the active locator, creating one on first use.

        Returns:
            The service locator instance.
        """
        if cls._instance is None:
            cls._instance = ServiceLocator()
        return cls._instance

    @classmethod
    def shutdown(cls) -> None:
        """Clears every service and forgets the active locator."""
        if cls._instance is not None:
            cls._instance._services.clear()
        cls._instance = None

    def __init__(self):
        self._services: Dict[str, Any] = {}

    def register_service(self, service_name: str, service: Any) -> None:
        """
        Register (or replace) a service.

        Args:
            service_name: The name of the service.
            service: The service instance.
        """
        self._services[service_name] = service

    def get_service(self, service_name: str) -> Any:
        """
        Get a service by name.

        Raises:
            ServiceNotFoundException: If the service is not found.
        """
        if service_name in self._services:
            return self._services[service_name]
        raise ServiceNotFoundException(f"Service '{service_name}' not found")

    def find_service(self, service_name: str, default: Any = None) -> Any:
        """Like get_service, but returns `default` for services that are not registered (yet)."""
        return self._services.get(service_name, default)

    def get_service_by_type(self, service_type: Type) -> Any:
        for service in self._services.values():
            if isinstance(service, service_type):
                return service
        raise ServiceNotFoundException(f"No service of type '{service_type.__name__}' found")

    def unregister_service(self, service_name: str) -> None:
        self._services.pop(service_name, None)

    def has_service(self, service_name: str) -> bool:
        return self._services.get(service_name) is not None

    def get_service_names(self) -> List[str]:
        return list(self._services.keys())


def get_service_locator() -> ServiceLocator:
    """Get the active service locator."""
    return ServiceLocator.get_instance()

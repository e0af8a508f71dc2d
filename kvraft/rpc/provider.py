"""Registry of services that a node publishes for remote calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass
class ServiceInfo:
    """A published service object and its methods, keyed by method name."""

    service: Any
    methods: Dict[str, Any] = field(default_factory=dict)


class RpcProvider:
    """Keeps the services published by this node.

    A service either exposes ``GetDescriptor()`` returning an object with a
    ``name`` and a list of ``methods`` (each with a ``name``), or is a plain
    object whose class name is the service name and whose public callables
    are its methods.
    """

    def __init__(self) -> None:
        self._services: Dict[str, ServiceInfo] = {}

    def __contains__(self, service_name: object) -> bool:
        return service_name in self._services

    def __len__(self) -> int:
        return len(self._services)

    @staticmethod
    def _describe(service: Any) -> Tuple[str, Dict[str, Any]]:
        get_descriptor = getattr(service, "GetDescriptor", None)
        if callable(get_descriptor):
            descriptor = get_descriptor()
            methods = {method.name: method for method in descriptor.methods}
            return descriptor.name, methods
        methods = {
            name: getattr(service, name)
            for name in dir(type(service))
            if not name.startswith("_") and callable(getattr(service, name))
        }
        return type(service).__name__, methods

    def notify_service(self, service: Any) -> ServiceInfo:
        """Publish ``service``; a name already published keeps its first entry."""
        name, methods = self._describe(service)
        print(f"service_name:{name}")
        return self._services.setdefault(name, ServiceInfo(service, methods))

    def find_method(self, service_name: str, method_name: str) -> Tuple[Any, Any]:
        """Return the service object and method registered under these names.

        Raises ``KeyError`` if either name is unknown.
        """
        try:
            info = self._services[service_name]
        except KeyError:
            raise KeyError(f"{service_name} is not exist!") from None
        try:
            method = info.methods[method_name]
        except KeyError:
            raise KeyError(f"{service_name}:{method_name} is not exist!") from None
        return info.service, method
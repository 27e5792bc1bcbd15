"""Service registry - explicit map from service/method names to handlers.

Naming convention:
    registry.register("UserService", "get_by_id", fn)  -> "UserService.get_by_id"

Lookups try the method name as given first, then its snake_case form,
so "GetById" resolves to a handler registered as "get_by_id".
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pydantic.alias_generators import to_snake

from plumbline.core.enums import RequestKind
from plumbline.core.exceptions import (
    DuplicateServiceError,
    MethodNotFoundError,
    ServiceNotFoundError,
)


@dataclass(frozen=True)
class ServiceHandler:
    """A registered handler and the request kinds it accepts."""

    service: str
    method: str
    func: Callable[..., Any]
    kinds: frozenset[RequestKind] | None = None  # None accepts every kind

    @property
    def name(self) -> str:
        return f"{self.service}.{self.method}"

    def accepts(self, kind: RequestKind) -> bool:
        return self.kinds is None or kind in self.kinds


class ServiceRegistry:
    """Registry of service handlers keyed by service and method name.

    Populate at startup, then treat as read-only for the lifetime of
    the application.
    """

    def __init__(self) -> None:
        self._services: dict[str, dict[str, ServiceHandler]] = {}

    def register(
        self,
        service: str,
        method: str,
        handler: Callable[..., Any],
        kinds: Iterable[RequestKind] | None = None,
    ) -> ServiceHandler:
        """Register a handler under ``service.method``.

        Raises:
            DuplicateServiceError: If the key is already taken.
        """
        methods = self._services.setdefault(service, {})
        if method in methods:
            raise DuplicateServiceError(service, method)
        entry = ServiceHandler(
            service=service,
            method=method,
            func=handler,
            kinds=frozenset(kinds) if kinds is not None else None,
        )
        methods[method] = entry
        return entry

    def register_service(
        self,
        service: str,
        instance: object,
        kinds: Iterable[RequestKind] | None = None,
    ) -> list[ServiceHandler]:
        """Register every public method of ``instance`` under ``service``."""
        kinds = list(kinds) if kinds is not None else None
        registered = []
        for attr_name in sorted(dir(instance)):
            if attr_name.startswith("_"):
                continue
            member = getattr(instance, attr_name)
            if callable(member) and not isinstance(member, type):
                registered.append(self.register(service, attr_name, member, kinds))
        return registered

    def handler(
        self,
        service: str,
        method: str | None = None,
        kinds: Iterable[RequestKind] | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of register(); the method name defaults to the function name."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(service, method or func.__name__, func, kinds)
            return func

        return decorator

    def get(self, service: str, method: str) -> ServiceHandler:
        """Look up a handler.

        Raises:
            ServiceNotFoundError: If no service has the given name.
            MethodNotFoundError: If the service has no matching method.
        """
        try:
            methods = self._services[service]
        except KeyError:
            raise ServiceNotFoundError(service) from None

        entry = methods.get(method) or methods.get(to_snake(method))
        if entry is None:
            raise MethodNotFoundError(service, method)
        return entry

    def has(self, service: str, method: str | None = None) -> bool:
        """Check if a service (or one of its methods) is registered."""
        if service not in self._services:
            return False
        if method is None:
            return True
        methods = self._services[service]
        return method in methods or to_snake(method) in methods

    @property
    def services(self) -> list[str]:
        """List registered service names, sorted alphabetically."""
        return sorted(self._services.keys())

    def methods(self, service: str) -> list[str]:
        """List method names of a service, sorted alphabetically."""
        try:
            return sorted(self._services[service].keys())
        except KeyError:
            raise ServiceNotFoundError(service) from None

    def __len__(self) -> int:
        """Number of registered handlers."""
        return sum(len(methods) for methods in self._services.values())

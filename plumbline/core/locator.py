"""Service locator - resolves and invokes registered handlers."""

from __future__ import annotations

from typing import Any

from plumbline.core.enums import RequestKind
from plumbline.core.exceptions import RequestKindNotAllowedError, ServiceInvocationError
from plumbline.core.params import bind_params
from plumbline.core.registry import ServiceRegistry


class ServiceLocator:
    """Invokes handlers from a ServiceRegistry by service and method name."""

    def __init__(self, registry: ServiceRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ServiceRegistry:
        return self._registry

    def execute(
        self,
        service: str,
        method: str,
        params: Any = None,
        request_kind: RequestKind = RequestKind.SERVICE_FILE,
    ) -> Any:
        """Resolve ``service.method``, bind params and call the handler.

        Lookup and binding errors are raised as-is. Anything raised by
        the handler itself is wrapped in ServiceInvocationError, with the
        original as ``__cause__``.
        """
        handler = self._registry.get(service, method)
        if not handler.accepts(request_kind):
            raise RequestKindNotAllowedError(handler.name, request_kind.value)

        args, kwargs = bind_params(handler, params)
        try:
            return handler.func(*args, **kwargs)
        except Exception as e:
            raise ServiceInvocationError(handler.name) from e

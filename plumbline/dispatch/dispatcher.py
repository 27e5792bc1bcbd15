"""Request dispatcher.

Invokes a named service method and renders the outcome as a JSON
result envelope. Invocation failures never escape dispatch(); they are
audited, logged and returned as ``isSuccess: false`` envelopes. Only a
result that cannot be serialized raises.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from typing import Any

import structlog

from plumbline.core.config import DispatcherConfig
from plumbline.core.exceptions import ServiceInvocationError
from plumbline.core.locator import ServiceLocator
from plumbline.core.params import params_text
from plumbline.core.registry import ServiceRegistry
from plumbline.dispatch.auditing import AuditingManager, Auditor
from plumbline.dispatch.envelope import ErrorInfo, ResultEnvelope, jsonable_result

logger = structlog.get_logger(__name__)


def _unwrap(error: BaseException) -> BaseException:
    """Strip one level of handler-invocation wrapping."""
    if isinstance(error, ServiceInvocationError) and error.__cause__ is not None:
        return error.__cause__
    return error


class RequestDispatcher:
    """Dispatches service calls and returns JSON result envelopes.

    Args:
        locator: Resolves and invokes service handlers.
        config: Dispatcher settings; defaults to DispatcherConfig().
        auditor_factory: Builds a fresh auditor per call.
        error_logger: Receives ``error(message, **kw)`` for each failure.
    """

    def __init__(
        self,
        locator: ServiceLocator,
        config: DispatcherConfig | None = None,
        auditor_factory: Callable[[], Auditor] | None = None,
        error_logger: Any | None = None,
    ) -> None:
        self._locator = locator
        self._config = config or DispatcherConfig()
        self._auditor_factory = auditor_factory or AuditingManager
        self._logger = error_logger if error_logger is not None else logger

    @classmethod
    def from_registry(
        cls,
        registry: ServiceRegistry,
        config: DispatcherConfig | None = None,
        auditor_factory: Callable[[], Auditor] | None = None,
    ) -> RequestDispatcher:
        """Create a RequestDispatcher over a ServiceRegistry.

        Args:
            registry: ServiceRegistry instance
            config: DispatcherConfig instance
            auditor_factory: Callable returning an Auditor

        Returns:
            RequestDispatcher instance
        """
        return cls(ServiceLocator(registry), config, auditor_factory)

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    def dispatch(self, service: str, method: str, params: Any = None) -> str:
        """Invoke ``service.method`` with params and return the JSON envelope."""
        auditor = self._auditor_factory()
        auditor.start(service, method, params_text(params))

        try:
            value = self._locator.execute(service, method, params, self._config.request_kind)
        except Exception as e:
            envelope = self._failure(e, auditor, service, method)
        else:
            envelope = ResultEnvelope.success(
                jsonable_result(value, camel_case=self._config.camel_case_result)
            )

        response = envelope.to_json()
        auditor.stop(response)
        return response

    def _failure(
        self,
        error: Exception,
        auditor: Auditor,
        service: str,
        method: str,
    ) -> ResultEnvelope:
        cause = _unwrap(error)
        call_stack = "".join(traceback.format_tb(cause.__traceback__))

        info = ErrorInfo(
            message=str(cause) or type(cause).__name__,
            call_stack=call_stack if self._config.expose_call_stack else "",
            is_friendly_error=type(cause) in self._config.friendly_error_types,
        )
        auditor.exception(f"{cause}\n{call_stack}")
        self._logger.error(str(error), exc_info=cause, service=service, method=method)
        return ResultEnvelope.failure(info)

"""plumbline exception hierarchy.

Handler exceptions never leave the dispatcher raw: they are chained
into plumbline errors and rendered into the result envelope.
"""

from __future__ import annotations


class PlumblineError(Exception):
    """Base exception for all plumbline errors."""


class UserFriendlyError(PlumblineError):
    """An error whose message is safe to show to end users verbatim.

    The dispatcher flags it with ``isFriendlyError`` in the envelope.
    Classification is by exact type, so subclasses are not friendly
    unless listed in ``DispatcherConfig.friendly_error_types``.
    """


# --- Mapping ---


class MappingError(PlumblineError):
    """Base for mapping errors."""


class MappingArgumentError(MappingError):
    """Raised on a malformed mapping request."""


class TypeMismatchError(MappingError):
    """Raised when a shared field name carries an incompatible type."""

    def __init__(self, target_class: str, field_name: str, expected: type, actual: type) -> None:
        self.target_class = target_class
        self.field_name = field_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Cannot map field '{field_name}' to {target_class}: "
            f"expected {expected.__name__}, got {actual.__name__}"
        )


class MissingFieldsError(MappingError):
    """Raised when required destination fields cannot be filled from the source."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


class StrictModeViolation(MappingError):
    """Raised in strict mode when a planned source field is absent."""


class PlanCompilationError(MappingError):
    """Raised when a MappingPlan fails validation during build()."""


# --- Registry ---


class RegistryError(PlumblineError):
    """Base for service registry errors."""


class ServiceNotFoundError(RegistryError):
    """Raised when no service is registered under a name."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        super().__init__(f"Service not found: '{service_name}'")


class MethodNotFoundError(RegistryError):
    """Raised when a service has no method registered under a name."""

    def __init__(self, service_name: str, method_name: str) -> None:
        self.service_name = service_name
        self.method_name = method_name
        super().__init__(f"Method not found: '{service_name}.{method_name}'")


class DuplicateServiceError(RegistryError):
    """Raised when two handlers are registered under the same key."""

    def __init__(self, service_name: str, method_name: str) -> None:
        self.service_name = service_name
        self.method_name = method_name
        super().__init__(f"Duplicate handler for '{service_name}.{method_name}'")


# --- Dispatch ---


class DispatchError(PlumblineError):
    """Base for service invocation errors."""


class ParameterBindingError(DispatchError):
    """Raised when request parameters cannot be bound to a handler."""

    def __init__(self, handler_name: str, detail: str) -> None:
        self.handler_name = handler_name
        super().__init__(f"Parameter binding error for '{handler_name}': {detail}")


class RequestKindNotAllowedError(DispatchError):
    """Raised when a handler does not accept the request kind."""

    def __init__(self, handler_name: str, request_kind: str) -> None:
        self.handler_name = handler_name
        self.request_kind = request_kind
        super().__init__(f"'{handler_name}' does not accept {request_kind} requests")


class ServiceInvocationError(DispatchError):
    """Wraps an exception raised inside a service handler.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, handler_name: str) -> None:
        self.handler_name = handler_name
        super().__init__(f"Exception has been thrown by '{handler_name}'")

"""plumbline - name-matching object mapper and JSON request dispatcher."""

from __future__ import annotations

from plumbline.core.config import DispatcherConfig
from plumbline.core.enums import RequestKind
from plumbline.core.exceptions import (
    DispatchError,
    DuplicateServiceError,
    MappingArgumentError,
    MappingError,
    MethodNotFoundError,
    MissingFieldsError,
    ParameterBindingError,
    PlanCompilationError,
    PlumblineError,
    RegistryError,
    RequestKindNotAllowedError,
    ServiceInvocationError,
    ServiceNotFoundError,
    StrictModeViolation,
    TypeMismatchError,
    UserFriendlyError,
)
from plumbline.core.locator import ServiceLocator
from plumbline.core.logging import configure_logging
from plumbline.core.registry import ServiceHandler, ServiceRegistry
from plumbline.dispatch.auditing import AuditingManager, AuditRecord, InMemoryAuditStore
from plumbline.dispatch.dispatcher import RequestDispatcher
from plumbline.dispatch.envelope import ErrorInfo, ResultEnvelope
from plumbline.mapping.model import ObjectMapper, map_into, map_to
from plumbline.mapping.plan import MappingPlan

__all__ = [
    # Mapping
    "ObjectMapper",
    "map_to",
    "map_into",
    "MappingPlan",
    # Registry
    "ServiceRegistry",
    "ServiceHandler",
    "ServiceLocator",
    # Dispatch
    "RequestDispatcher",
    "ResultEnvelope",
    "ErrorInfo",
    "AuditingManager",
    "AuditRecord",
    "InMemoryAuditStore",
    # Config
    "DispatcherConfig",
    "configure_logging",
    # Enums
    "RequestKind",
    # Exceptions
    "PlumblineError",
    "UserFriendlyError",
    "MappingError",
    "MappingArgumentError",
    "TypeMismatchError",
    "MissingFieldsError",
    "StrictModeViolation",
    "PlanCompilationError",
    "RegistryError",
    "ServiceNotFoundError",
    "MethodNotFoundError",
    "DuplicateServiceError",
    "DispatchError",
    "ParameterBindingError",
    "RequestKindNotAllowedError",
    "ServiceInvocationError",
]

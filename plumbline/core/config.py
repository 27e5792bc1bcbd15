"""Dispatcher configuration.

DispatcherConfig is a Pydantic model for type-safe dispatcher settings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from plumbline.core.enums import RequestKind
from plumbline.core.exceptions import UserFriendlyError


class DispatcherConfig(BaseModel):
    """Configuration for RequestDispatcher."""

    model_config = ConfigDict(frozen=True)

    request_kind: RequestKind = RequestKind.SERVICE_FILE
    expose_call_stack: bool = True
    camel_case_result: bool = True
    friendly_error_types: tuple[type[BaseException], ...] = (UserFriendlyError,)

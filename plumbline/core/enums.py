"""Request kind enumeration."""

from __future__ import annotations

from enum import Enum


class RequestKind(Enum):
    """How a service call reached the dispatcher."""

    SERVICE_FILE = "service_file"
    API = "api"

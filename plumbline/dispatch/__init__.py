"""Dispatch layer - invoke named services and render JSON envelopes."""

from __future__ import annotations

from plumbline.dispatch.auditing import (
    AuditingManager,
    Auditor,
    AuditRecord,
    AuditStore,
    InMemoryAuditStore,
)
from plumbline.dispatch.dispatcher import RequestDispatcher
from plumbline.dispatch.envelope import ErrorInfo, ResultEnvelope

__all__ = [
    "RequestDispatcher",
    "ResultEnvelope",
    "ErrorInfo",
    "Auditor",
    "AuditingManager",
    "AuditRecord",
    "AuditStore",
    "InMemoryAuditStore",
]

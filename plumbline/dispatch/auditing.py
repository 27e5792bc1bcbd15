"""Request auditing.

Each dispatched call gets its own auditor: start() opens the record,
exception() notes a failure, stop() closes it with the response text.
Auditors are fire-and-forget: nothing they return is used.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class AuditRecord:
    """One audited service call."""

    service: str
    method: str
    parameters: str
    started_at: datetime
    duration_ms: float | None = None
    exception: str | None = None
    response: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.exception is None


@runtime_checkable
class Auditor(Protocol):
    """Auditing collaborator used by the dispatcher."""

    def start(self, service: str, method: str, params_text: str) -> None: ...

    def stop(self, response_text: str) -> None: ...

    def exception(self, text: str) -> None: ...


@runtime_checkable
class AuditStore(Protocol):
    """Destination for finished audit records."""

    def save(self, record: AuditRecord) -> None: ...


class InMemoryAuditStore:
    """Keeps finished audit records in a list."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    def save(self, record: AuditRecord) -> None:
        self.records.append(record)

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)


class AuditingManager:
    """Default auditor: logs each record and hands it to an optional store."""

    def __init__(self, store: AuditStore | None = None) -> None:
        self._store = store
        self._record: AuditRecord | None = None
        self._started: float | None = None

    @property
    def record(self) -> AuditRecord | None:
        return self._record

    def start(self, service: str, method: str, params_text: str) -> None:
        self._record = AuditRecord(
            service=service,
            method=method,
            parameters=params_text,
            started_at=datetime.now(timezone.utc),
        )
        self._started = time.perf_counter()

    def exception(self, text: str) -> None:
        if self._record is None:
            logger.warning("Audit exception recorded before start", exception=text)
            return
        self._record.exception = text

    def stop(self, response_text: str) -> None:
        record = self._record
        if record is None or self._started is None:
            logger.warning("Audit stopped before start")
            return
        record.response = response_text
        record.duration_ms = round((time.perf_counter() - self._started) * 1000, 3)

        logger.info(
            "Service call audited",
            service=record.service,
            method=record.method,
            duration_ms=record.duration_ms,
            succeeded=record.succeeded,
        )
        if self._store is not None:
            self._store.save(record)

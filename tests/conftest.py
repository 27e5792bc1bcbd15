"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
import structlog

from plumbline.core.exceptions import UserFriendlyError
from plumbline.core.registry import ServiceRegistry
from plumbline.dispatch.auditing import AuditingManager, InMemoryAuditStore
from plumbline.dispatch.dispatcher import RequestDispatcher


@dataclass
class User:
    id: int
    name: str


class UserService:
    """Test service with one method per outcome."""

    def __init__(self) -> None:
        self._users = {5: User(id=5, name="Ann"), 6: User(id=6, name="Bob")}

    def get_by_id(self, id: int) -> User:
        return self._users[id]

    def list_all(self) -> list[User]:
        return list(self._users.values())

    def rename(self, id: int, new_name: str) -> dict:
        user = self._users[id]
        user.name = new_name
        return {"user_id": user.id, "display_name": user.name}

    def forbid(self) -> None:
        raise UserFriendlyError("You may not do that")

    def crash(self) -> None:
        raise RuntimeError("database unavailable")


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration made by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def registry() -> ServiceRegistry:
    """Registry with UserService registered under 'UserService'."""
    reg = ServiceRegistry()
    reg.register_service("UserService", UserService())
    return reg


@pytest.fixture
def audit_store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def dispatcher(registry: ServiceRegistry, audit_store: InMemoryAuditStore) -> RequestDispatcher:
    return RequestDispatcher.from_registry(
        registry,
        auditor_factory=lambda: AuditingManager(audit_store),
    )

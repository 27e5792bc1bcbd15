"""
Example 03: Request Dispatch

This example demonstrates registering services and dispatching named calls
into JSON result envelopes, with auditing and structured logging.
"""

from dataclasses import dataclass

from pydantic import BaseModel

from plumbline import (
    AuditingManager,
    InMemoryAuditStore,
    RequestDispatcher,
    ServiceRegistry,
    UserFriendlyError,
    configure_logging,
    map_to,
)


@dataclass
class User:
    """User entity"""
    id: int
    name: str
    password_hash: str


@dataclass
class UserDto:
    """User returned to clients"""
    id: int = 0
    name: str = ""


class CreateUser(BaseModel):
    """Create-user command"""
    name: str


class UserService:
    """Application service for users"""

    def __init__(self):
        self._users = {5: User(5, "Ann", "x1")}

    def get_by_id(self, id: int) -> UserDto:
        return map_to(self._users[id], UserDto)

    def create(self, command: CreateUser) -> UserDto:
        if not command.name.strip():
            raise UserFriendlyError("Name must not be blank")
        user = User(max(self._users) + 1, command.name, "")
        self._users[user.id] = user
        return map_to(user, UserDto)


def main():
    configure_logging("INFO", json_output=False)

    registry = ServiceRegistry()
    registry.register_service("UserService", UserService())

    store = InMemoryAuditStore()
    dispatcher = RequestDispatcher.from_registry(
        registry,
        auditor_factory=lambda: AuditingManager(store),
    )

    print("=== Request Dispatch ===\n")

    print("1. Successful call:")
    print(f"   {dispatcher.dispatch('UserService', 'GetById', {'id': 5})}\n")

    print("2. Command model binding:")
    print(f"   {dispatcher.dispatch('UserService', 'Create', {'name': 'Bob'})}\n")

    print("3. User-friendly error:")
    print(f"   {dispatcher.dispatch('UserService', 'Create', {'name': ' '})}\n")

    print("4. Unknown method:")
    print(f"   {dispatcher.dispatch('UserService', 'Delete', {'id': 5})}\n")

    print("5. Audit trail:")
    for record in store.records:
        status = "ok" if record.succeeded else "failed"
        print(f"   {record.service}.{record.method} {status} in {record.duration_ms} ms")


if __name__ == "__main__":
    main()

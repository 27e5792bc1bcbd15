"""
Example 01: Object Mapping

This example demonstrates copying fields between dataclasses, Pydantic models
and plain classes by name.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from plumbline import MappingArgumentError, ObjectMapper, map_into, map_to


@dataclass
class Address:
    street: str
    city: str


@dataclass
class User:
    """User entity"""
    id: int
    name: str
    email: Optional[str]
    address: Optional[Address] = None
    password_hash: str = ""


@dataclass
class AddressDto:
    street: str = ""
    city: str = ""


@dataclass
class UserDto:
    """User data transfer object"""
    id: int = 0
    name: str = ""
    email: str = "(hidden)"
    address: Optional[AddressDto] = None


class UserModel(BaseModel):
    """User API model"""
    id: int
    name: str


def main():
    users = [
        User(1, "Alice", "alice@example.com", Address("Main St 1", "Oslo"), "x9f"),
        User(2, "Bob", None),
    ]

    print("=== Object Mapping ===\n")

    # Flat record with a nested value
    print("1. Single object:")
    dto = map_to(users[0], UserDto)
    print(f"   {dto}")
    print(f"   Nested type: {type(dto.address).__name__}\n")

    # None values are skipped
    print("2. None values keep destination defaults:")
    print(f"   {map_to(users[1], UserDto)}\n")

    # Sequences map element-wise, in order
    print("3. Sequence mapping:")
    models = map_to(users, list[UserModel])
    for m in models:
        print(f"   - {m!r}")
    print()

    # Copy onto an existing instance
    print("4. Map into an existing object:")
    target = UserDto(email="keep@example.com")
    map_into({"id": 9, "name": "Carol"}, target)
    print(f"   {target}\n")

    # Aliases rename source fields
    print("5. Aliases:")
    mapper = ObjectMapper(UserDto, aliases={"user_name": "name"})
    print(f"   {mapper.map_one({'id': 3, 'user_name': 'Dave'})}\n")

    # Sequences only support the create-new form
    print("6. Sequence into existing object:")
    try:
        map_into(users, UserDto())
    except MappingArgumentError as e:
        print(f"   Rejected: {e}")


if __name__ == "__main__":
    main()

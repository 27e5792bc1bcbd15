"""Mapper protocol.

All mappers implement this interface. map_one maps a single record,
map_many maps an ordered sequence of records preserving order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, source: Any) -> T:
        """Map a single source record to a target object."""
        ...

    def map_many(self, sources: Sequence[Any]) -> list[T]:
        """Map multiple source records to a list of target objects."""
        ...

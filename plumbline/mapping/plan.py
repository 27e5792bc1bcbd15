"""Mapping plan data class.

A frozen, validated declaration of which destination field is filled
from which source field. Used by ObjectMapper at mapping time.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MappingPlan:
    """Compiled, validated field mapping for one source/destination pair."""

    source_class: type
    destination_class: type
    field_map: dict[str, str] = field(default_factory=dict)  # destination_field -> source_field
    strict: bool = False

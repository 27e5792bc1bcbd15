"""Mapping DSL builder.

Provides a fluent builder for declaring explicit field mappings:

    plan = (
        mapping(User, UserDto)
        .auto_fields()
        .field("display_name", "name")
        .ignore("password_hash")
        .build()
    )
"""

from __future__ import annotations

from plumbline.core.exceptions import PlanCompilationError
from plumbline.mapping.fields import class_field_names
from plumbline.mapping.plan import MappingPlan


def mapping(source_class: type, destination_class: type) -> MappingBuilder:
    """Entry point for the mapping DSL.

    Args:
        source_class: The class values are read from.
        destination_class: The class values are written to.

    Returns:
        A builder for chaining mapping declarations.
    """
    return MappingBuilder(source_class, destination_class)


class MappingBuilder:
    """Fluent builder for mapping plan definitions."""

    def __init__(self, source_class: type, destination_class: type) -> None:
        self._source_class = source_class
        self._destination_class = destination_class
        self._field_map: dict[str, str] = {}
        self._ignored: set[str] = set()
        self._auto_fields_enabled = False
        self._strict_mode = False

    def auto_fields(self) -> MappingBuilder:
        """Map every destination field that has a same-named source field."""
        self._auto_fields_enabled = True
        return self

    def field(self, destination_field: str, source_field: str | None = None) -> MappingBuilder:
        """Explicitly map a single field, optionally from a differently named source field."""
        self._field_map[destination_field] = source_field or destination_field
        return self

    def ignore(self, *destination_fields: str) -> MappingBuilder:
        """Leave the given destination fields at their defaults."""
        self._ignored.update(destination_fields)
        return self

    def strict(self, enabled: bool = True) -> MappingBuilder:
        """Require every planned source field to be present at mapping time."""
        self._strict_mode = enabled
        return self

    def build(self) -> MappingPlan:
        """Compile and validate the declarations into a MappingPlan."""
        source_names = class_field_names(self._source_class)
        destination_names = class_field_names(self._destination_class)
        source_label = self._source_class.__name__
        destination_label = self._destination_class.__name__

        conflicting = sorted(self._ignored & self._field_map.keys())
        if conflicting:
            raise PlanCompilationError(f"Fields both mapped and ignored: {conflicting}")

        if destination_names is not None:
            for name in sorted(self._ignored | self._field_map.keys()):
                if name not in destination_names:
                    raise PlanCompilationError(f"{destination_label} has no field '{name}'")

        if source_names is not None:
            for destination_field, source_field in self._field_map.items():
                if source_field not in source_names:
                    raise PlanCompilationError(
                        f"{source_label} has no field '{source_field}' "
                        f"(mapped to '{destination_field}')"
                    )

        field_map = dict(self._field_map)
        if self._auto_fields_enabled:
            if source_names is None or destination_names is None:
                raise PlanCompilationError(
                    "auto_fields() needs declared fields on both "
                    f"{source_label} and {destination_label}"
                )
            for name in sorted(destination_names & source_names):
                if name not in field_map and name not in self._ignored:
                    field_map[name] = name

        if not field_map:
            raise PlanCompilationError(
                f"Mapping {source_label} -> {destination_label} declares no fields"
            )

        return MappingPlan(
            source_class=self._source_class,
            destination_class=self._destination_class,
            field_map=field_map,
            strict=self._strict_mode,
        )

"""Name-matching object mapper.

Copies field values from a source value onto a destination type by
field name. Supports dataclasses, Pydantic models, dicts, and plain
default-constructible classes on the destination side.

Rules:
1. Fields present on only one side are ignored.
2. None source values are skipped; the destination keeps its default.
3. Structured values land in a freshly built instance of the
   destination field's declared class, one level deep.
4. Everything else is copied as-is after a type check against the
   destination annotation.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import MutableSequence, Sequence
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from plumbline.core.exceptions import (
    MappingArgumentError,
    MappingError,
    MissingFieldsError,
    StrictModeViolation,
)
from plumbline.mapping.fields import (
    check_type,
    destination_fields,
    is_pydantic_model,
    is_sequence,
    is_structured_class,
    is_structured_value,
    source_fields,
    unwrap_optional,
)
from plumbline.mapping.plan import MappingPlan

T = TypeVar("T")


def _required_dataclass_fields(cls: type) -> list[str]:
    return [
        f.name
        for f in dataclasses.fields(cls)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    ]


def _validation_keys(cls: type) -> dict[str, str]:
    """Field name -> input key a Pydantic model accepts for it."""
    keys = {}
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        if isinstance(info.validation_alias, str):
            keys[name] = info.validation_alias
        elif info.alias:
            keys[name] = info.alias
    return keys


class ObjectMapper(Generic[T]):
    """Source-to-model mapper bound to one destination type.

    Construction strategy:
    1. Pydantic BaseModel -> model_validate(values)
    2. dataclass -> target_class(**values)
    3. dict -> target_class(values)
    4. Plain class -> target_class(), then setattr per field

    Args:
        target_class: The class to construct.
        aliases: Optional source-field to destination-field renaming.
        plan: Optional MappingPlan replacing implicit name matching.
    """

    def __init__(
        self,
        target_class: type[T],
        aliases: dict[str, str] | None = None,
        plan: MappingPlan | None = None,
    ) -> None:
        if typing.get_origin(target_class) is not None or not (
            is_structured_class(target_class)
            or (isinstance(target_class, type) and issubclass(target_class, dict))
        ):
            raise MappingArgumentError(f"Cannot map into {target_class!r}: not a structured type")
        if plan is not None and plan.destination_class is not target_class:
            raise MappingArgumentError(
                f"Plan targets {plan.destination_class.__name__}, not {target_class.__name__}"
            )
        self._target_class = target_class
        self._aliases = aliases
        self._plan = plan
        self._is_pydantic = is_pydantic_model(target_class)
        self._is_dataclass = dataclasses.is_dataclass(target_class)
        self._is_dict = issubclass(target_class, dict)

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def _matched(self, source: Any) -> dict[str, Any]:
        """Source values keyed by destination field name."""
        fields = source_fields(source)

        if self._plan is not None:
            if self._plan.strict:
                missing = sorted(
                    name for name in self._plan.field_map.values() if name not in fields
                )
                if missing:
                    raise StrictModeViolation(
                        f"Source {type(source).__name__} is missing planned fields {missing} "
                        f"for {self._target_class.__name__}"
                    )
            return {
                destination_field: fields[source_field]
                for destination_field, source_field in self._plan.field_map.items()
                if source_field in fields
            }

        if not self._aliases:
            return fields
        return {self._aliases.get(key, key): value for key, value in fields.items()}

    def _collect(
        self,
        source: Any,
        fields: dict[str, Any] | None,
        nested: bool,
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, value in self._matched(source).items():
            if fields is not None and name not in fields:
                continue
            if value is None:
                continue
            declared = fields[name] if fields is not None else Any
            values[name] = self._convert(name, value, declared, nested)
        return values

    def _convert(self, name: str, value: Any, declared: Any, nested: bool) -> Any:
        target = unwrap_optional(declared)
        if nested and is_structured_class(target) and is_structured_value(value):
            return ObjectMapper(target)._map_record(value, nested=False)
        check_type(self._target_class.__name__, name, declared, value)
        return value

    def _construct(self, values: dict[str, Any]) -> T:
        cls = self._target_class
        name = cls.__name__

        if self._is_pydantic:
            keys = _validation_keys(cls)
            by_key = {keys.get(k, k): v for k, v in values.items()}
            field_names = {key: field for field, key in keys.items()}
            try:
                return cls.model_validate(by_key)  # type: ignore[attr-defined, no-any-return]
            except ValidationError as e:
                missing = [
                    ".".join(
                        [str(field_names.get(error["loc"][0], error["loc"][0]))]
                        + [str(part) for part in error["loc"][1:]]
                    )
                    for error in e.errors()
                    if error["type"] == "missing" and error["loc"]
                ]
                if missing:
                    raise MissingFieldsError(name, missing) from e
                raise MappingError(f"Cannot map to {name}: {e}") from e

        if self._is_dataclass:
            init_fields = {f.name for f in dataclasses.fields(cls) if f.init}  # type: ignore[arg-type]
            kwargs = {k: v for k, v in values.items() if k in init_fields}
            try:
                instance = cls(**kwargs)
            except TypeError as e:
                missing = [f for f in _required_dataclass_fields(cls) if f not in kwargs]
                if missing:
                    raise MissingFieldsError(name, missing) from e
                raise MappingError(f"Cannot map to {name}: {e}") from e
            late = {k: v for k, v in values.items() if k not in init_fields}
            self._assign(instance, late)
            return instance

        if self._is_dict:
            return cls(values)  # type: ignore[call-arg]

        raise MappingArgumentError(f"{name} is built by assignment, not construction")

    def _new_plain(self) -> T:
        try:
            return self._target_class()
        except TypeError as e:
            raise MappingArgumentError(
                f"{self._target_class.__name__} is not default-constructible: {e}"
            ) from e

    def _assign(self, destination: Any, values: dict[str, Any]) -> None:
        if isinstance(destination, dict):
            destination.update(values)
            return
        for name, value in values.items():
            try:
                setattr(destination, name, value)
            except (AttributeError, ValidationError) as e:
                raise MappingArgumentError(
                    f"Cannot assign '{name}' on {type(destination).__name__}: {e}"
                ) from e

    def _map_record(self, source: Any, nested: bool) -> T:
        if source is None:
            raise MappingArgumentError("Cannot map from None")
        if self._is_pydantic or self._is_dataclass or self._is_dict:
            fields = destination_fields(self._target_class)
            return self._construct(self._collect(source, fields, nested))

        instance = self._new_plain()
        fields = destination_fields(self._target_class, instance)
        self._assign(instance, self._collect(source, fields, nested))
        return instance

    def map_one(self, source: Any) -> T:
        """Map a single source record to a new target_class instance."""
        if is_sequence(source):
            raise MappingArgumentError(
                "map_one maps a single record; use map_many for sequence sources"
            )
        return self._map_record(source, nested=True)

    def map_many(self, sources: Sequence[Any]) -> list[T]:
        """Map every element via map_one, preserving order."""
        return [self.map_one(source) for source in sources]

    def map_into(self, source: Any, destination: T) -> T:
        """Copy matching fields from source onto an existing destination."""
        if is_sequence(source):
            raise MappingArgumentError(
                "map_into does not support sequence sources; "
                "use map_to with a sequence destination type"
            )
        if destination is None:
            raise MappingArgumentError("map_into needs a destination instance, got None")
        if source is None:
            raise MappingArgumentError("Cannot map from None")
        fields = destination_fields(type(destination), destination)
        self._assign(destination, self._collect(source, fields, nested=True))
        return destination


def _sequence_destination(destination_type: Any) -> tuple[type, Any]:
    """Split list[X] / tuple[X, ...] / Sequence[X] into (container, element type)."""
    origin = typing.get_origin(destination_type)
    args = typing.get_args(destination_type)

    if origin is list and len(args) == 1:
        return list, args[0]
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return tuple, args[0]
    if origin in (Sequence, MutableSequence) and len(args) == 1:
        return list, args[0]
    raise MappingArgumentError(
        "A sequence source needs a parameterized sequence destination type "
        f"such as list[Dto] or tuple[Dto, ...], got {destination_type!r}"
    )


def map_to(
    source: Any,
    destination_type: Any,
    *,
    aliases: dict[str, str] | None = None,
    plan: MappingPlan | None = None,
) -> Any:
    """Map ``source`` into a new value of ``destination_type``.

    A list or tuple source maps element-wise into ``destination_type``'s
    element type, e.g. ``map_to(users, list[UserDto])``.
    """
    if is_sequence(source):
        container, element_type = _sequence_destination(destination_type)
        items = ObjectMapper(element_type, aliases=aliases, plan=plan).map_many(source)
        return container(items)
    return ObjectMapper(destination_type, aliases=aliases, plan=plan).map_one(source)


def map_into(
    source: Any,
    destination: T,
    *,
    aliases: dict[str, str] | None = None,
    plan: MappingPlan | None = None,
) -> T:
    """Copy matching fields from ``source`` onto ``destination`` and return it.

    Raises:
        MappingArgumentError: If source is a list or tuple, or destination is None.
    """
    if is_sequence(source):
        raise MappingArgumentError(
            "map_into does not support sequence sources; "
            "use map_to with a sequence destination type"
        )
    if destination is None:
        raise MappingArgumentError("map_into needs a destination instance, got None")
    return ObjectMapper(type(destination), aliases=aliases, plan=plan).map_into(
        source, destination
    )

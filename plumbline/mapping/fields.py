"""Field introspection for mapping sources and destinations.

Supports dataclasses, Pydantic models, mappings, and plain classes.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
import types
import typing
from collections.abc import Collection, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Union
from uuid import UUID

from pydantic import BaseModel

from plumbline.core.exceptions import TypeMismatchError

_PRIMITIVE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    Decimal,
    date,
    time,
    datetime,
    timedelta,
    UUID,
    Enum,
)

_COLLECTION_TYPES: tuple[type, ...] = (list, tuple, set, frozenset, dict)


def is_pydantic_model(cls: Any) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def is_sequence(value: Any) -> bool:
    """Ordered sequences are lists and tuples; strings and mappings are not."""
    return isinstance(value, (list, tuple))


def is_structured_class(cls: Any) -> bool:
    """A class whose instances carry named fields."""
    if typing.get_origin(cls) is not None:
        return False
    if not isinstance(cls, type) or cls is object or cls is Any:
        return False
    if inspect.isabstract(cls) or issubclass(cls, Collection) or _is_protocol(cls):
        return False
    return not issubclass(cls, _PRIMITIVE_TYPES + _COLLECTION_TYPES)


def _is_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False))


def is_structured_value(value: Any) -> bool:
    """A value that can act as a mapping source."""
    if value is None or isinstance(value, _PRIMITIVE_TYPES):
        return False
    if isinstance(value, Mapping):
        return True
    if isinstance(value, (list, tuple, set, frozenset)):
        return False
    if isinstance(value, BaseModel) or dataclasses.is_dataclass(value):
        return True
    return not isinstance(value, type) and not callable(value) and _has_attributes(value)


def _has_attributes(value: Any) -> bool:
    return hasattr(value, "__dict__") or bool(_slot_names(type(value)))


def unwrap_optional(annotation: Any) -> Any:
    """Optional[X] -> X; anything else unchanged."""
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def type_hints(cls: type) -> dict[str, Any]:
    """Resolved public annotations of a class, including inherited ones.

    Annotations that cannot be resolved are left as strings and are not
    type-checked. Other fields of the class still resolve.
    """
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}
        for klass in reversed(cls.__mro__):
            for name, annotation in inspect.get_annotations(klass).items():
                hints[name] = _resolve_annotation(annotation, klass)
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_") and typing.get_origin(hint) is not typing.ClassVar
    }


def _resolve_annotation(annotation: Any, klass: type) -> Any:
    """Evaluate one string annotation in its class's module; unresolved ones stay strings."""
    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(klass.__module__)
    globalns = vars(module) if module is not None else {}
    try:
        return eval(annotation, globalns, dict(vars(klass)))  # noqa: S307
    except (NameError, TypeError, AttributeError, SyntaxError):
        return annotation


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = getattr(klass, "__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(slot for slot in slots if not slot.startswith("_"))
    return names


def _property_names(cls: type, settable: bool = False) -> list[str]:
    names = []
    for name, member in inspect.getmembers(cls, lambda m: isinstance(m, property)):
        if name.startswith("_"):
            continue
        if settable and member.fset is None:
            continue
        names.append(name)
    return names


def source_fields(source: Any) -> dict[str, Any]:
    """Readable fields of a source value, by name."""
    if isinstance(source, Mapping):
        return {key: value for key, value in source.items() if isinstance(key, str)}

    if isinstance(source, BaseModel):
        return {name: getattr(source, name) for name in type(source).model_fields}

    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        return {f.name: getattr(source, f.name) for f in dataclasses.fields(source)}

    cls = type(source)
    names = [name for name in getattr(source, "__dict__", {}) if not name.startswith("_")]
    names.extend(_slot_names(cls))
    names.extend(_property_names(cls))
    result: dict[str, Any] = {}
    for name in names:
        if name not in result and hasattr(source, name):
            result[name] = getattr(source, name)
    return result


def destination_fields(cls: type, instance: Any = None) -> dict[str, Any] | None:
    """Writable fields of a destination type mapped to their declared types.

    Returns None for dict destinations, which accept every field.
    Undeclared fields map to ``Any``.
    """
    if issubclass(cls, dict):
        return None

    if is_pydantic_model(cls):
        return {name: info.annotation for name, info in cls.model_fields.items()}  # type: ignore[attr-defined]

    hints = type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(cls)}

    fields: dict[str, Any] = dict(hints)
    for name in _slot_names(cls) + _property_names(cls, settable=True):
        fields.setdefault(name, Any)
    if instance is not None:
        for name in getattr(instance, "__dict__", {}):
            if not name.startswith("_"):
                fields.setdefault(name, Any)
    return fields


def class_field_names(cls: type) -> set[str] | None:
    """Field names declared by a class, or None when they are open-ended (mappings)."""
    if issubclass(cls, Mapping):
        return None

    if is_pydantic_model(cls):
        return set(cls.model_fields)  # type: ignore[attr-defined]

    if dataclasses.is_dataclass(cls):
        return {f.name for f in dataclasses.fields(cls)}

    names = set(type_hints(cls))
    names.update(_slot_names(cls))
    names.update(_property_names(cls))
    # Plain classes - fall back on __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
        names.update(
            name
            for name, param in sig.parameters.items()
            if name != "self"
            and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        )
    except (ValueError, TypeError):
        pass
    return names


def check_type(target_class: str, field_name: str, declared: Any, value: Any) -> None:
    """Raise TypeMismatchError if ``value`` does not fit the declared type.

    Only concrete classes are checked; generics are checked by origin,
    unions other than Optional and unresolved annotations are not.
    """
    expected = unwrap_optional(declared)
    origin = typing.get_origin(expected)
    if origin in (Union, types.UnionType):
        return
    if origin is not None:
        expected = origin
    if not isinstance(expected, type) or expected is object or expected is Any:
        return
    if typing.is_typeddict(expected):
        expected = dict
    elif _is_protocol(expected) and not getattr(expected, "_is_runtime_protocol", False):
        return

    if isinstance(value, bool) and expected is not bool and expected in (int, float):
        raise TypeMismatchError(target_class, field_name, expected, type(value))
    if expected is float and isinstance(value, int):
        return
    if not isinstance(value, expected):
        raise TypeMismatchError(target_class, field_name, expected, type(value))

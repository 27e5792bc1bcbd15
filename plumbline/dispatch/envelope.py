"""Result envelope returned by the dispatcher.

Serialized with lower-camel-case field names:

    {"isSuccess": true, "result": {...}, "errors": null}
    {"isSuccess": false, "result": null,
     "errors": {"message": "...", "callStack": "...", "isFriendlyError": false}}
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorInfo(_CamelModel):
    """Failure details of a dispatched call."""

    message: str
    call_stack: str = ""
    is_friendly_error: bool = False


class ResultEnvelope(_CamelModel):
    """Uniform success/failure wrapper."""

    is_success: bool
    result: Any = None
    errors: ErrorInfo | None = None

    @classmethod
    def success(cls, result: Any) -> ResultEnvelope:
        return cls(is_success=True, result=result, errors=None)

    @classmethod
    def failure(cls, errors: ErrorInfo) -> ResultEnvelope:
        return cls(is_success=False, result=None, errors=errors)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def camelize_keys(value: Any) -> Any:
    """Recursively convert string dict keys to lowerCamelCase.

    A key whose camel form is already taken by another key is kept as-is.
    """
    if isinstance(value, dict):
        result: dict[Any, Any] = {}
        for key, item in value.items():
            new_key = to_camel(key) if isinstance(key, str) else key
            if new_key != key and (new_key in value or new_key in result):
                new_key = key
            result[new_key] = camelize_keys(item)
        return result
    if isinstance(value, list):
        return [camelize_keys(item) for item in value]
    return value


def jsonable_result(value: Any, camel_case: bool = True) -> Any:
    """Convert a handler return value to JSON-compatible data.

    Raises:
        PydanticSerializationError: If the value has no JSON representation.
    """
    data = to_jsonable_python(value)
    return camelize_keys(data) if camel_case else data

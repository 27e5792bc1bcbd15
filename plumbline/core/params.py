"""Request parameter binding.

Converts dispatcher params into handler call arguments:

    None            -> handler()
    Mapping         -> handler(**params)
    anything else   -> handler(params)

A Mapping sent to a handler whose only parameter is annotated with a
Pydantic model is validated into that model and passed positionally.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from plumbline.core.exceptions import ParameterBindingError
from plumbline.core.registry import ServiceHandler


def _signature(func: Any) -> inspect.Signature | None:
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def _single_model_parameter(func: Any, sig: inspect.Signature | None) -> type[BaseModel] | None:
    """Return the Pydantic model type of a handler's only parameter, if any."""
    if sig is None or len(sig.parameters) != 1:
        return None
    param = next(iter(sig.parameters.values()))
    annotation = param.annotation
    if isinstance(annotation, str):
        try:
            annotation = typing.get_type_hints(func).get(param.name, annotation)
        except (NameError, TypeError):
            return None
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def bind_params(handler: ServiceHandler, params: Any) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """Build (args, kwargs) for a handler call.

    Raises:
        ParameterBindingError: If params do not fit the handler signature.
    """
    sig = _signature(handler.func)
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = {}

    if params is None:
        pass
    elif isinstance(params, Mapping):
        model = _single_model_parameter(handler.func, sig)
        if model is not None:
            try:
                args = (model.model_validate(dict(params)),)
            except ValidationError as e:
                raise ParameterBindingError(handler.name, str(e)) from e
        else:
            kwargs = dict(params)
    else:
        args = (params,)

    if sig is not None:
        try:
            sig.bind(*args, **kwargs)
        except TypeError as e:
            raise ParameterBindingError(handler.name, str(e)) from e
    return args, kwargs


def params_text(params: Any) -> str:
    """Render params for audit records: JSON where possible, else str()."""
    if params is None:
        return ""
    try:
        return to_json(params).decode("utf-8")
    except PydanticSerializationError:
        return str(params)

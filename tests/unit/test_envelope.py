"""Unit tests for ResultEnvelope and result rendering."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
from pydantic_core import PydanticSerializationError

from plumbline.dispatch.envelope import (
    ErrorInfo,
    ResultEnvelope,
    camelize_keys,
    jsonable_result,
)


@dataclass
class Order:
    order_id: int
    created_at: datetime


class TestResultEnvelope:
    def test_success_json(self) -> None:
        envelope = ResultEnvelope.success({"id": 5, "name": "Ann"})
        assert envelope.to_json() == '{"isSuccess":true,"result":{"id":5,"name":"Ann"},"errors":null}'

    def test_failure_json(self) -> None:
        envelope = ResultEnvelope.failure(
            ErrorInfo(message="boom", call_stack="  File x", is_friendly_error=True)
        )
        data = json.loads(envelope.to_json())
        assert data == {
            "isSuccess": False,
            "result": None,
            "errors": {"message": "boom", "callStack": "  File x", "isFriendlyError": True},
        }

    def test_error_info_defaults(self) -> None:
        info = ErrorInfo(message="boom")
        assert info.call_stack == ""
        assert info.is_friendly_error is False

    def test_accepts_camel_case_input(self) -> None:
        envelope = ResultEnvelope.model_validate({"isSuccess": True, "result": 1})
        assert envelope.is_success is True
        assert envelope.errors is None


class TestResultRendering:
    def test_camelize_nested_keys(self) -> None:
        data = {"user_id": 1, "line_items": [{"unit_price": 2}], "tags": ["snake_case"]}
        assert camelize_keys(data) == {
            "userId": 1,
            "lineItems": [{"unitPrice": 2}],
            "tags": ["snake_case"],
        }

    def test_camel_keys_unchanged(self) -> None:
        assert camelize_keys({"userId": 1, "id": 2}) == {"userId": 1, "id": 2}

    def test_colliding_keys_are_all_kept(self) -> None:
        assert camelize_keys({"user_id": 1, "userId": 2}) == {"user_id": 1, "userId": 2}
        assert camelize_keys({"userId": 2, "user_id": 1}) == {"userId": 2, "user_id": 1}

    def test_jsonable_dataclass(self) -> None:
        order = Order(order_id=1, created_at=datetime(2024, 1, 2, tzinfo=timezone.utc))
        assert jsonable_result(order) == {"orderId": 1, "createdAt": "2024-01-02T00:00:00Z"}

    def test_jsonable_without_camel_case(self) -> None:
        assert jsonable_result({"order_id": 1}, camel_case=False) == {"order_id": 1}

    def test_scalars_pass_through(self) -> None:
        assert jsonable_result(5) == 5
        assert jsonable_result(None) is None

    def test_unserializable_raises(self) -> None:
        with pytest.raises(PydanticSerializationError):
            jsonable_result(object())

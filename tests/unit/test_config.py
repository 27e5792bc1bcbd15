"""Unit tests for DispatcherConfig and logging setup."""

from __future__ import annotations

import json

import pytest
import structlog
from pydantic import ValidationError

from plumbline.core.config import DispatcherConfig
from plumbline.core.enums import RequestKind
from plumbline.core.exceptions import UserFriendlyError
from plumbline.core.logging import configure_logging


class TestDispatcherConfig:
    def test_defaults(self) -> None:
        config = DispatcherConfig()
        assert config.request_kind is RequestKind.SERVICE_FILE
        assert config.expose_call_stack is True
        assert config.camel_case_result is True
        assert config.friendly_error_types == (UserFriendlyError,)

    def test_request_kind_from_value(self) -> None:
        config = DispatcherConfig.model_validate({"request_kind": "api"})
        assert config.request_kind is RequestKind.API

    def test_friendly_error_types_must_be_exceptions(self) -> None:
        with pytest.raises(ValidationError):
            DispatcherConfig(friendly_error_types=(str,))

    def test_frozen(self) -> None:
        config = DispatcherConfig()
        with pytest.raises(ValidationError):
            config.expose_call_stack = False  # type: ignore[misc]


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("INFO", json_output=True)
        structlog.get_logger("plumbline.test").info("hello", service="UserService")
        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "hello"
        assert event["level"] == "info"
        assert event["service"] == "UserService"
        assert "timestamp" in event

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("WARNING", json_output=True)
        structlog.get_logger("plumbline.test").info("hidden")
        assert capsys.readouterr().out == ""

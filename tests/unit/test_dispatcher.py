"""Unit tests for RequestDispatcher."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
from pydantic_core import PydanticSerializationError
from structlog.testing import capture_logs

from plumbline.core.config import DispatcherConfig
from plumbline.core.exceptions import UserFriendlyError
from plumbline.core.locator import ServiceLocator
from plumbline.core.registry import ServiceRegistry
from plumbline.dispatch.auditing import InMemoryAuditStore
from plumbline.dispatch.dispatcher import RequestDispatcher


class QuotaExceededError(UserFriendlyError):
    """Friendly by inheritance only."""


class TestDispatchSuccess:
    def test_get_by_id_example(self, dispatcher: RequestDispatcher) -> None:
        response = dispatcher.dispatch("UserService", "GetById", {"id": 5})
        assert response == '{"isSuccess":true,"result":{"id":5,"name":"Ann"},"errors":null}'

    def test_list_result(self, dispatcher: RequestDispatcher) -> None:
        data = json.loads(dispatcher.dispatch("UserService", "ListAll"))
        assert data["isSuccess"] is True
        assert data["errors"] is None
        assert [u["name"] for u in data["result"]] == ["Ann", "Bob"]

    def test_result_keys_camel_cased(self, dispatcher: RequestDispatcher) -> None:
        data = json.loads(dispatcher.dispatch("UserService", "Rename", {"id": 6, "new_name": "Rob"}))
        assert data["result"] == {"userId": 6, "displayName": "Rob"}

    def test_camel_case_result_disabled(self, registry: ServiceRegistry) -> None:
        dispatcher = RequestDispatcher.from_registry(
            registry, DispatcherConfig(camel_case_result=False)
        )
        data = json.loads(dispatcher.dispatch("UserService", "Rename", {"id": 6, "new_name": "Rob"}))
        assert data["result"] == {"user_id": 6, "display_name": "Rob"}

    def test_colliding_result_keys_keep_every_value(self) -> None:
        registry = ServiceRegistry()
        registry.register("Users", "get", lambda: {"user_id": 1, "userId": 2})
        data = json.loads(RequestDispatcher.from_registry(registry).dispatch("Users", "get"))
        assert data["result"] == {"user_id": 1, "userId": 2}

    def test_none_result(self) -> None:
        registry = ServiceRegistry()
        registry.register("Jobs", "run", lambda: None)
        response = RequestDispatcher.from_registry(registry).dispatch("Jobs", "run")
        assert response == '{"isSuccess":true,"result":null,"errors":null}'


class TestDispatchFailure:
    def test_handler_exception(self, dispatcher: RequestDispatcher) -> None:
        data = json.loads(dispatcher.dispatch("UserService", "Crash"))
        assert data["isSuccess"] is False
        assert data["result"] is None
        assert data["errors"]["message"] == "database unavailable"
        assert data["errors"]["isFriendlyError"] is False
        assert "crash" in data["errors"]["callStack"]

    def test_user_friendly_error(self, dispatcher: RequestDispatcher) -> None:
        data = json.loads(dispatcher.dispatch("UserService", "Forbid"))
        assert data["isSuccess"] is False
        assert data["errors"]["message"] == "You may not do that"
        assert data["errors"]["isFriendlyError"] is True

    def test_friendly_subclass_is_not_friendly(self) -> None:
        registry = ServiceRegistry()

        def spend() -> None:
            raise QuotaExceededError("quota exceeded")

        registry.register("Billing", "spend", spend)
        data = json.loads(RequestDispatcher.from_registry(registry).dispatch("Billing", "spend"))
        assert data["errors"]["message"] == "quota exceeded"
        assert data["errors"]["isFriendlyError"] is False

    def test_configured_friendly_types(self) -> None:
        registry = ServiceRegistry()

        def validate() -> None:
            raise ValueError("name is required")

        registry.register("Forms", "validate", validate)
        config = DispatcherConfig(friendly_error_types=(UserFriendlyError, ValueError))
        dispatcher = RequestDispatcher.from_registry(registry, config)
        data = json.loads(dispatcher.dispatch("Forms", "validate"))
        assert data["errors"]["isFriendlyError"] is True

    def test_call_stack_hidden(self, registry: ServiceRegistry) -> None:
        dispatcher = RequestDispatcher.from_registry(
            registry, DispatcherConfig(expose_call_stack=False)
        )
        data = json.loads(dispatcher.dispatch("UserService", "Crash"))
        assert data["errors"]["callStack"] == ""

    def test_unknown_service(self, dispatcher: RequestDispatcher) -> None:
        data = json.loads(dispatcher.dispatch("OrderService", "List"))
        assert data["isSuccess"] is False
        assert data["errors"]["message"] == "Service not found: 'OrderService'"

    def test_unknown_method(self, dispatcher: RequestDispatcher) -> None:
        data = json.loads(dispatcher.dispatch("UserService", "Delete"))
        assert data["errors"]["message"] == "Method not found: 'UserService.Delete'"

    def test_parameter_binding_failure(self, dispatcher: RequestDispatcher) -> None:
        data = json.loads(dispatcher.dispatch("UserService", "GetById", {"user_id": 5}))
        assert data["isSuccess"] is False
        assert data["errors"]["message"].startswith(
            "Parameter binding error for 'UserService.get_by_id'"
        )

    def test_empty_message_uses_type_name(self) -> None:
        registry = ServiceRegistry()

        def fail() -> None:
            raise RuntimeError()

        registry.register("Jobs", "fail", fail)
        data = json.loads(RequestDispatcher.from_registry(registry).dispatch("Jobs", "fail"))
        assert data["errors"]["message"] == "RuntimeError"

    def test_unserializable_result_propagates(self) -> None:
        registry = ServiceRegistry()
        registry.register("Raw", "get", object)
        with pytest.raises(PydanticSerializationError):
            RequestDispatcher.from_registry(registry).dispatch("Raw", "get")


class TestDispatchCollaborators:
    def test_audits_success(
        self, dispatcher: RequestDispatcher, audit_store: InMemoryAuditStore
    ) -> None:
        response = dispatcher.dispatch("UserService", "GetById", {"id": 5})
        assert len(audit_store) == 1
        record = audit_store.records[0]
        assert record.service == "UserService"
        assert record.method == "GetById"
        assert record.parameters == '{"id":5}'
        assert record.response == response
        assert record.exception is None

    def test_audits_failure(
        self, dispatcher: RequestDispatcher, audit_store: InMemoryAuditStore
    ) -> None:
        dispatcher.dispatch("UserService", "Crash")
        record = audit_store.records[0]
        assert record.exception is not None
        assert record.exception.startswith("database unavailable")
        assert "crash" in record.exception

    def test_auditor_call_order(self, registry: ServiceRegistry) -> None:
        auditor = MagicMock()
        dispatcher = RequestDispatcher.from_registry(registry, auditor_factory=lambda: auditor)
        response = dispatcher.dispatch("UserService", "GetById", {"id": 5})
        assert [c[0] for c in auditor.method_calls] == ["start", "stop"]
        auditor.start.assert_called_once_with("UserService", "GetById", '{"id":5}')
        auditor.stop.assert_called_once_with(response)
        auditor.exception.assert_not_called()

    def test_fresh_auditor_per_call(self, registry: ServiceRegistry) -> None:
        factory = MagicMock()
        dispatcher = RequestDispatcher.from_registry(registry, auditor_factory=factory)
        dispatcher.dispatch("UserService", "ListAll")
        dispatcher.dispatch("UserService", "ListAll")
        assert factory.call_count == 2

    def test_failure_logged_with_unwrapped_exception(self, dispatcher: RequestDispatcher) -> None:
        with capture_logs() as logs:
            dispatcher.dispatch("UserService", "Crash")
        errors = [entry for entry in logs if entry["log_level"] == "error"]
        assert len(errors) == 1
        assert errors[0]["event"] == "Exception has been thrown by 'UserService.crash'"
        assert isinstance(errors[0]["exc_info"], RuntimeError)
        assert errors[0]["service"] == "UserService"
        assert errors[0]["method"] == "Crash"

    def test_custom_error_logger(self, registry: ServiceRegistry) -> None:
        error_logger = MagicMock()
        dispatcher = RequestDispatcher(ServiceLocator(registry), error_logger=error_logger)
        dispatcher.dispatch("UserService", "Forbid")
        error_logger.error.assert_called_once()
        assert isinstance(error_logger.error.call_args.kwargs["exc_info"], UserFriendlyError)

    def test_success_not_logged_as_error(self, dispatcher: RequestDispatcher) -> None:
        with capture_logs() as logs:
            dispatcher.dispatch("UserService", "GetById", {"id": 5})
        assert all(entry["log_level"] != "error" for entry in logs)

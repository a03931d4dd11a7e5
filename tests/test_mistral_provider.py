"""Tests for MistralProvider"""

from __future__ import annotations

import json
import logging

import pytest

from polyllm.domain.config import LLMConfig
from polyllm.infrastructure.llm.base import (
    EmptyResponseError,
    RequestPreparationError,
    ResponseParseError,
)
from polyllm.infrastructure.llm.mistral import MistralProvider


def _response(content: str | None = "Hello!", tool_calls: list | None = None) -> bytes:
    message: dict = {"role": "assistant", "content": content}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    return json.dumps(
        {
            "id": "cmpl-1",
            "object": "chat.completion",
            "model": "mistral-large-latest",
            "choices": [{"index": 0, "message": message, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
        }
    ).encode("utf-8")


def _tool_call(name: str, arguments) -> dict:
    return {"id": "call_1", "type": "function", "function": {"name": name, "arguments": arguments}}


@pytest.fixture
def provider() -> MistralProvider:
    return MistralProvider("test-key", "mistral-large-latest")


class TestIdentity:
    def test_name_and_endpoint(self, provider):
        assert provider.name == "mistral"
        assert provider.endpoint == "https://api.mistral.ai/v1/chat/completions"

    def test_supports_json_schema(self, provider):
        assert provider.supports_json_schema is True


class TestHeaders:
    def test_default_headers(self, provider):
        assert provider.headers() == {
            "Content-Type": "application/json",
            "Authorization": "Bearer test-key",
        }

    def test_extra_headers_from_constructor(self):
        provider = MistralProvider("k", "m", {"X-Request-Id": "abc"})
        headers = provider.headers()
        assert headers["X-Request-Id"] == "abc"
        assert headers["Authorization"] == "Bearer k"

    def test_extra_headers_override_defaults(self, provider):
        provider.set_extra_headers({"Content-Type": "application/json; charset=utf-8"})
        assert provider.headers()["Content-Type"] == "application/json; charset=utf-8"

    def test_set_extra_headers_replaces_previous(self):
        provider = MistralProvider("k", "m", {"X-Old": "1"})
        provider.set_extra_headers({"X-New": "2"})
        headers = provider.headers()
        assert "X-Old" not in headers
        assert headers["X-New"] == "2"

    def test_none_extra_headers(self):
        provider = MistralProvider("k", "m", None)
        assert set(provider.headers()) == {"Content-Type", "Authorization"}


class TestPrepareRequest:
    def test_basic_body(self, provider):
        body = json.loads(provider.prepare_request("Hi there"))
        assert body == {
            "model": "mistral-large-latest",
            "messages": [{"role": "user", "content": "Hi there"}],
        }

    def test_returns_bytes(self, provider):
        assert isinstance(provider.prepare_request("x"), bytes)

    def test_default_options_included(self, provider):
        provider.set_option("temperature", 0.3)
        provider.set_option("top_p", 0.9)
        body = json.loads(provider.prepare_request("x"))
        assert body["temperature"] == 0.3
        assert body["top_p"] == 0.9

    def test_call_options_override_defaults(self, provider):
        provider.set_option("temperature", 0.3)
        provider.set_option("max_tokens", 50)
        body = json.loads(provider.prepare_request("x", {"temperature": 0.9}))
        assert body["temperature"] == 0.9
        assert body["max_tokens"] == 50

    def test_call_options_do_not_mutate_defaults(self, provider):
        provider.set_option("temperature", 0.3)
        provider.prepare_request("x", {"temperature": 0.9})
        assert provider.options == {"temperature": 0.3}

    def test_unserializable_option_raises(self, provider):
        with pytest.raises(RequestPreparationError):
            provider.prepare_request("x", {"bad": object()})


class TestSetDefaultOptions:
    def test_sets_temperature_and_max_tokens(self, provider):
        provider.set_default_options(LLMConfig(temperature=0.2, max_tokens=256))
        assert provider.options == {"temperature": 0.2, "max_tokens": 256}

    def test_sets_seed_when_present(self, provider):
        provider.set_default_options(LLMConfig(seed=42))
        assert provider.options["seed"] == 42

    def test_zero_seed_is_kept(self, provider):
        provider.set_default_options(LLMConfig(seed=0))
        assert provider.options["seed"] == 0


class TestPrepareRequestWithSchema:
    SCHEMA = {"type": "object", "properties": {"answer": {"type": "string"}}}

    def test_response_format_injected(self, provider):
        body = json.loads(provider.prepare_request_with_schema("x", {}, self.SCHEMA))
        assert body["response_format"] == {"type": "json_schema", "schema": self.SCHEMA}
        assert body["messages"] == [{"role": "user", "content": "x"}]

    def test_strict_option(self, provider):
        body = json.loads(
            provider.prepare_request_with_schema("x", {"strict": True}, self.SCHEMA)
        )
        assert body["response_format"]["strict"] is True
        assert "strict" not in body

    def test_strict_false_not_set(self, provider):
        body = json.loads(
            provider.prepare_request_with_schema("x", {"strict": False}, self.SCHEMA)
        )
        assert "strict" not in body["response_format"]
        assert "strict" not in body

    def test_options_and_defaults_merged(self, provider):
        provider.set_option("temperature", 0.1)
        body = json.loads(
            provider.prepare_request_with_schema("x", {"max_tokens": 10}, self.SCHEMA)
        )
        assert body["temperature"] == 0.1
        assert body["max_tokens"] == 10

    def test_none_options(self, provider):
        body = json.loads(provider.prepare_request_with_schema("x", None, self.SCHEMA))
        assert "response_format" in body

    def test_unserializable_schema_raises(self, provider):
        with pytest.raises(RequestPreparationError):
            provider.prepare_request_with_schema("x", {}, {"type": {1, 2}})


class TestParseResponse:
    def test_content(self, provider):
        assert provider.parse_response(_response("Bonjour")) == "Bonjour"

    def test_accepts_str_body(self, provider):
        assert provider.parse_response(_response("Bonjour").decode("utf-8")) == "Bonjour"

    def test_content_with_tool_calls(self, provider):
        body = _response(
            "Let me check.",
            [_tool_call("get_weather", {"city": "Paris"})],
        )
        assert provider.parse_response(body) == (
            'Let me check.<function_call>{"name": "get_weather", '
            '"arguments": {"city": "Paris"}}</function_call>'
        )

    def test_string_arguments_kept_as_json_string(self, provider):
        body = _response("ok", [_tool_call("f", '{"a": 1}')])
        result = provider.parse_response(body)
        assert result == 'ok<function_call>{"name": "f", "arguments": "{\\"a\\": 1}"}</function_call>'

    def test_multiple_tool_calls(self, provider):
        body = _response("ok", [_tool_call("a", {}), _tool_call("b", {})])
        assert provider.parse_response(body).count("<function_call>") == 2

    def test_invalid_json(self, provider):
        with pytest.raises(ResponseParseError, match="error parsing response"):
            provider.parse_response(b"not json")

    def test_wrong_shape(self, provider):
        with pytest.raises(ResponseParseError):
            provider.parse_response(b'{"choices": "nope"}')

    def test_no_choices(self, provider):
        with pytest.raises(EmptyResponseError, match="empty response from API"):
            provider.parse_response(b'{"choices": []}')

    def test_missing_choices(self, provider):
        with pytest.raises(EmptyResponseError):
            provider.parse_response(b"{}")

    def test_empty_content(self, provider):
        with pytest.raises(EmptyResponseError):
            provider.parse_response(_response(""))

    def test_null_content_with_tool_calls_is_empty(self, provider):
        with pytest.raises(EmptyResponseError):
            provider.parse_response(_response(None, [_tool_call("f", {})]))

    @pytest.mark.parametrize(
        "body",
        [b'{"choices": null}', b'{"choices": [null]}', b'{"choices": [{"message": null}]}'],
        ids=["choices", "choice", "message"],
    )
    def test_null_fields_are_empty(self, provider, body):
        with pytest.raises(EmptyResponseError, match="empty response from API"):
            provider.parse_response(body)

    def test_null_tool_call_entries_skipped(self, provider):
        body = _response("ok", [None, {"function": None}, _tool_call("f", {})])
        assert provider.parse_response(body) == 'ok<function_call>{"name": "f", "arguments": {}}</function_call>'

    def test_null_function_name(self, provider):
        body = _response("ok", [{"function": {"name": None, "arguments": {}}}])
        assert provider.parse_response(body) == 'ok<function_call>{"name": "", "arguments": {}}</function_call>'

    def test_logs_with_custom_logger(self, provider, caplog):
        custom = logging.getLogger("test.mistral")
        provider.set_logger(custom)
        with caplog.at_level(logging.DEBUG, logger="test.mistral"):
            provider.parse_response(_response("hi"))
        assert any(r.name == "test.mistral" for r in caplog.records)


class TestHandleFunctionCalls:
    def test_no_tool_calls_returns_none(self, provider):
        assert provider.handle_function_calls(_response("plain answer")) is None

    def test_no_choices_returns_none(self, provider):
        assert provider.handle_function_calls(b'{"choices": []}') is None

    @pytest.mark.parametrize(
        "body",
        [
            b'{"choices": [null]}',
            b'{"choices": [{"message": null}]}',
            b'{"choices": [{"message": {"tool_calls": [null]}}]}',
            b'{"choices": [{"message": {"tool_calls": [{"function": null}]}}]}',
        ],
        ids=["choice", "message", "tool_call", "function"],
    )
    def test_null_fields_return_none(self, provider, body):
        assert provider.handle_function_calls(body) is None

    def test_first_tool_call_returned(self, provider):
        body = _response(
            None,
            [_tool_call("get_weather", {"city": "Paris"}), _tool_call("other", {})],
        )
        result = provider.handle_function_calls(body)
        assert isinstance(result, bytes)
        assert json.loads(result) == {"name": "get_weather", "arguments": {"city": "Paris"}}

    def test_invalid_json(self, provider):
        with pytest.raises(ResponseParseError):
            provider.handle_function_calls(b"{broken")

"""OpenAI-compatible chat-completions provider base.

This module is used to implement multiple providers (Mistral, OpenAI)
that expose an OpenAI-compatible /v1/chat/completions API.
"""

from __future__ import annotations

import json
from abc import abstractmethod
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from polyllm.domain.config.llm import LLMConfig
from polyllm.infrastructure.llm.base import (
    EmptyResponseError,
    Provider,
    RequestPreparationError,
    ResponseParseError,
)
from polyllm.infrastructure.llm.schemas import ChatCompletionResponse, FunctionPayload


class OpenAICompatibleChatProvider(Provider):
    """Provider speaking the chat-completions wire format.

    Subclasses set ``NAME`` and ``API_URL`` and describe their structured
    output flavour in ``_response_format``.
    """

    NAME = ""
    API_URL = ""

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def endpoint(self) -> str:
        return self.API_URL

    def set_default_options(self, config: LLMConfig) -> None:
        self.set_option("temperature", config.temperature)
        self.set_option("max_tokens", config.max_tokens)
        if config.seed is not None:
            self.set_option("seed", config.seed)

    def headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        headers.update(self.extra_headers)
        return headers

    def _base_body(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }

    def prepare_request(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> bytes:
        body = self._base_body(prompt)
        # Defaults first, then call options so they win
        body.update(self.options)
        body.update(options or {})

        self.logger.debug(
            f"Prepared {self.name} request: model={body.get('model')}, "
            f"options={sorted(k for k in body if k not in ('model', 'messages'))}"
        )
        return self._dump(body)

    def prepare_request_with_schema(
        self,
        prompt: str,
        options: Optional[Dict[str, Any]],
        schema: Any,
    ) -> bytes:
        call_options = dict(options or {})
        strict = call_options.pop("strict", None) is True

        body = self._base_body(prompt)
        body.update(self.options)
        body.update(call_options)
        body["response_format"] = self._response_format(schema, strict)

        self.logger.debug(f"Prepared {self.name} structured request (strict={strict})")
        return self._dump(body)

    @abstractmethod
    def _response_format(self, schema: Any, strict: bool) -> Dict[str, Any]:
        """Vendor-specific response_format object for a JSON schema"""

    def _dump(self, body: Dict[str, Any]) -> bytes:
        try:
            return json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestPreparationError(f"error marshaling request body: {e}") from e

    def _load(self, body: Union[bytes, str]) -> ChatCompletionResponse:
        try:
            return ChatCompletionResponse.model_validate_json(body)
        except ValidationError as e:
            self.logger.debug(f"Failed to parse {self.name} response: {e}")
            raise ResponseParseError(f"error parsing response: {e}") from e

    @staticmethod
    def _encode_function(function: FunctionPayload) -> str:
        # Arguments are re-serialized, so their whitespace and key order may
        # differ from the vendor's bytes; string arguments stay JSON strings.
        return json.dumps({"name": function.name or "", "arguments": function.arguments})

    def parse_response(self, body: Union[bytes, str]) -> str:
        response = self._load(body)
        message = response.first_message
        if message is None or not message.content:
            raise EmptyResponseError("empty response from API")

        functions = message.functions
        parts = [message.content]
        for function in functions:
            parts.append(f"<function_call>{self._encode_function(function)}</function_call>")

        self.logger.debug(
            f"Parsed {self.name} response ({len(message.content)} chars, {len(functions)} tool calls)"
        )
        return "".join(parts)

    def handle_function_calls(self, body: Union[bytes, str]) -> Optional[bytes]:
        response = self._load(body)
        message = response.first_message
        functions = message.functions if message is not None else []
        if not functions:
            return None  # No function call

        return self._encode_function(functions[0]).encode("utf-8")

"""LLM service - sends prompts through a provider adapter"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from polyllm.domain.config import Config, LLMConfig
from polyllm.domain.models.function_call import FunctionCall
from polyllm.domain.models.prepared_request import PreparedRequest
from polyllm.infrastructure.http_client import post_with_retries
from polyllm.infrastructure.llm.base import Provider
from polyllm.infrastructure.llm.factory import ProviderFactory
from polyllm.infrastructure.retry import RetryConfig, retry_config_from_llm_config

logger = logging.getLogger(__name__)


class LLMService:
    """Facade tying configuration, provider adapter and HTTP transport together"""

    def __init__(
        self,
        config: Config,
        provider: Optional[Provider] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        """Initialize LLM service

        Args:
            config: Public configuration
            provider: Provider instance (created from config if None)
            extra_headers: Additional HTTP headers for the created provider

        Raises:
            ValueError: If the configured provider is unknown
        """
        self.config = config
        self.llm_config: LLMConfig = config.to_internal_config()
        self.retry: RetryConfig = retry_config_from_llm_config(self.llm_config)

        if provider is None:
            provider = ProviderFactory.create(
                self.llm_config.provider,
                self.llm_config.api_key_for() or "",
                self.llm_config.model,
                extra_headers,
            )
        elif extra_headers:
            provider.set_extra_headers(extra_headers)
        self.provider = provider

        self.provider.set_default_options(self.llm_config)
        provider_logger = logging.getLogger(f"polyllm.providers.{self.provider.name}")
        provider_logger.setLevel(self.llm_config.log_level)
        self.provider.set_logger(provider_logger)

    def build_request(
        self,
        prompt: str,
        schema: Optional[Any] = None,
        **options: Any,
    ) -> PreparedRequest:
        """Build the HTTP request for a prompt without sending it"""
        if schema is None:
            body = self.provider.prepare_request(prompt, options)
        else:
            if not self.provider.supports_json_schema:
                raise ValueError(f"Provider {self.provider.name} does not support JSON schema")
            body = self.provider.prepare_request_with_schema(prompt, options, schema)
        return PreparedRequest(
            url=self.provider.endpoint,
            headers=self.provider.headers(),
            body=body,
        )

    def generate(self, prompt: str, **options: Any) -> str:
        """Generate a text response

        Args:
            prompt: Input prompt
            **options: Request options (override provider defaults)

        Returns:
            Generated text, with any function calls appended

        Raises:
            RuntimeError: If the request fails
            ResponseParseError: If the response cannot be parsed
            EmptyResponseError: If the response has no content
        """
        request = self.build_request(prompt, **options)
        return self.provider.parse_response(self._send(request))

    def generate_with_schema(self, prompt: str, schema: Any, **options: Any) -> str:
        """Generate a response constrained by a JSON schema

        Pass ``strict=True`` to ask the provider for strict schema adherence.

        Raises:
            ValueError: If the provider does not support JSON schema
        """
        request = self.build_request(prompt, schema=schema, **options)
        return self.provider.parse_response(self._send(request))

    def call_function(
        self,
        prompt: str,
        tools: List[Dict[str, Any]],
        **options: Any,
    ) -> Optional[FunctionCall]:
        """Offer tools to the model and return the first call it makes

        Returns:
            FunctionCall or None if the model answered without calling a tool
        """
        request = self.build_request(prompt, tools=tools, **options)
        raw = self.provider.handle_function_calls(self._send(request))
        if raw is None:
            return None
        return self._decode_function_call(raw)

    def _send(self, request: PreparedRequest) -> bytes:
        logger.debug(f"Calling {self.provider.name}: model={self.llm_config.model}")
        try:
            response = post_with_retries(
                request.url,
                body=request.body,
                headers=request.headers,
                timeout=self.llm_config.timeout,
                retry=self.retry,
            )
        except (requests.exceptions.RequestException, RuntimeError) as e:
            raise RuntimeError(f"LLM API request failed: {e}") from e
        return response.content

    def _decode_function_call(self, raw: bytes) -> FunctionCall:
        data = json.loads(raw)
        arguments = data.get("arguments")
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError:
                logger.warning(f"Failed to parse tool call arguments: {arguments}")
                arguments = {}
        if not isinstance(arguments, dict):
            arguments = {}
        return FunctionCall(name=data.get("name", ""), arguments=arguments)

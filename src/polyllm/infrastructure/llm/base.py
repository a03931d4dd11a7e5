"""Base LLM provider interface"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from polyllm.domain.config.llm import LLMConfig


class ProviderError(RuntimeError):
    """Base error raised by provider adapters"""


class ResponseParseError(ProviderError):
    """Response body is not valid JSON of the expected shape"""


class EmptyResponseError(ProviderError):
    """Response has no choices or no content"""


class RequestPreparationError(ProviderError):
    """Request body could not be serialized"""


class Provider(ABC):
    """Abstract base class for LLM provider adapters

    A provider only translates: it builds the vendor request body and headers
    and parses the vendor response. Sending the request is left to the caller.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        """Initialize provider

        Args:
            api_key: API key sent as a bearer token
            model: Model identifier
            extra_headers: Additional HTTP headers for every request
        """
        self.api_key = api_key
        self.model = model
        self.extra_headers: Dict[str, str] = dict(extra_headers or {})
        self.options: Dict[str, Any] = {}
        self.logger = logging.getLogger(type(self).__module__)

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier"""

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Chat completions endpoint URL"""

    @property
    def supports_json_schema(self) -> bool:
        """Whether the vendor supports structured output"""
        return False

    def set_logger(self, logger: logging.Logger) -> None:
        self.logger = logger

    def set_option(self, key: str, value: Any) -> None:
        """Set a default option sent with every request"""
        self.options[key] = value

    def set_extra_headers(self, extra_headers: Dict[str, str]) -> None:
        """Replace the additional HTTP headers"""
        self.extra_headers = dict(extra_headers)

    @abstractmethod
    def set_default_options(self, config: LLMConfig) -> None:
        """Set standard options from the configuration"""

    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """HTTP headers for a request"""

    @abstractmethod
    def prepare_request(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> bytes:
        """Build the JSON request body

        Args:
            prompt: User prompt
            options: Call-specific options, overriding defaults

        Returns:
            Serialized JSON body

        Raises:
            RequestPreparationError: If the body cannot be serialized
        """

    @abstractmethod
    def prepare_request_with_schema(
        self,
        prompt: str,
        options: Optional[Dict[str, Any]],
        schema: Any,
    ) -> bytes:
        """Build a JSON request body asking for structured output

        Raises:
            RequestPreparationError: If the schema cannot be serialized
        """

    @abstractmethod
    def parse_response(self, body: Union[bytes, str]) -> str:
        """Extract the generated text from a response body

        Raises:
            ResponseParseError: If the body is not valid JSON
            EmptyResponseError: If the response has no content
        """

    @abstractmethod
    def handle_function_calls(self, body: Union[bytes, str]) -> Optional[bytes]:
        """Extract the first function call as JSON, or None if there is none

        Raises:
            ResponseParseError: If the body is not valid JSON
        """

"""LLM providers"""

from polyllm.infrastructure.llm.base import (
    EmptyResponseError,
    Provider,
    ProviderError,
    RequestPreparationError,
    ResponseParseError,
)
from polyllm.infrastructure.llm.factory import ProviderFactory
from polyllm.infrastructure.llm.mistral import MistralProvider
from polyllm.infrastructure.llm.openai import OpenAIProvider

__all__ = [
    "EmptyResponseError",
    "MistralProvider",
    "OpenAIProvider",
    "Provider",
    "ProviderError",
    "ProviderFactory",
    "RequestPreparationError",
    "ResponseParseError",
]

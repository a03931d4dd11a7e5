"""Factory for creating LLM providers"""

import logging
from typing import Dict, Optional

from polyllm.infrastructure.llm.base import Provider
from polyllm.infrastructure.llm.mistral import MistralProvider
from polyllm.infrastructure.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Factory for creating provider instances"""

    PROVIDERS = {
        "mistral": MistralProvider,
        "openai": OpenAIProvider,
    }

    @classmethod
    def available(cls) -> list:
        return sorted(cls.PROVIDERS)

    @classmethod
    def create(
        cls,
        provider_type: str,
        api_key: str,
        model: str,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Provider:
        """Create provider instance

        Args:
            provider_type: Provider name (mistral, openai)
            api_key: API key for the provider
            model: Model identifier
            extra_headers: Additional HTTP headers

        Returns:
            Provider instance

        Raises:
            ValueError: If provider type is not supported
        """
        provider_type_lower = provider_type.lower()

        if provider_type_lower not in cls.PROVIDERS:
            available = ", ".join(cls.available())
            raise ValueError(
                f"Unknown LLM provider: {provider_type}. "
                f"Available providers: {available}"
            )

        provider_class = cls.PROVIDERS[provider_type_lower]
        logger.info(f"Creating {provider_type_lower} provider (model={model})")
        return provider_class(api_key, model, extra_headers)

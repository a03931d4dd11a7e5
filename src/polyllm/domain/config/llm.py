"""Internal LLM configuration model."""

import logging
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class LLMConfig(BaseModel):
    """Configuration consumed by providers and the LLM service.

    Attributes:
        provider: Active provider name
        model: Model identifier
        ollama_endpoint: Base URL of a local Ollama server
        temperature: Sampling temperature
        max_tokens: Maximum tokens in response
        top_p: Nucleus sampling parameter
        frequency_penalty: Frequency penalty
        presence_penalty: Presence penalty
        timeout: Request timeout in seconds
        max_retries: Retries after the first attempt
        retry_delay: Initial delay between retries in seconds
        api_keys: API keys by provider name
        log_level: Standard library logging level
    """

    provider: str = "mistral"
    model: str = "mistral-large-latest"
    ollama_endpoint: str = ""
    temperature: float = 0.7
    max_tokens: int = 100
    top_p: float = 0.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    timeout: float = 30.0  # non-positive disables the timeout
    max_retries: int = 3
    retry_delay: float = 2.0
    api_keys: Dict[str, str] = Field(default_factory=dict)
    log_level: int = logging.WARNING
    seed: Optional[int] = None
    min_p: Optional[float] = None
    repeat_penalty: Optional[float] = None
    repeat_last_n: Optional[int] = None
    mirostat: Optional[int] = None
    mirostat_eta: Optional[float] = None
    mirostat_tau: Optional[float] = None
    tfs_z: Optional[float] = None

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "provider": "mistral",
                "model": "mistral-large-latest",
                "temperature": 0.7,
                "max_tokens": 100,
                "timeout": 30.0,
                "max_retries": 3,
                "retry_delay": 2.0,
            }
        },
    )

    def api_key_for(self, provider: Optional[str] = None) -> Optional[str]:
        """Return the API key for a provider (the active one by default)"""
        return self.api_keys.get(provider or self.provider)


class FileLLMConfig(LLMConfig):
    """LLMConfig with range checks, used for values read from files and env.

    Programmatic configs built with functional options are not range checked.
    """

    max_tokens: int = Field(100, ge=0)
    timeout: float = Field(30.0, ge=0.0)
    max_retries: int = Field(3, ge=0)
    retry_delay: float = Field(2.0, ge=0.0)

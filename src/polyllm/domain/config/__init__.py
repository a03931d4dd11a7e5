"""Configuration models with Pydantic validation."""

from polyllm.domain.config.llm import LLMConfig
from polyllm.domain.config.options import (
    Config,
    ConfigOption,
    LogLevel,
    MemoryOption,
    apply_options,
    convert_log_level,
    new_config,
    set_api_key,
    set_debug_level,
    set_frequency_penalty,
    set_max_retries,
    set_max_tokens,
    set_memory,
    set_min_p,
    set_mirostat,
    set_mirostat_eta,
    set_mirostat_tau,
    set_model,
    set_ollama_endpoint,
    set_presence_penalty,
    set_provider,
    set_repeat_last_n,
    set_repeat_penalty,
    set_retry_delay,
    set_seed,
    set_temperature,
    set_tfs_z,
    set_timeout,
    set_top_p,
)

__all__ = [
    "Config",
    "ConfigOption",
    "LLMConfig",
    "LogLevel",
    "MemoryOption",
    "apply_options",
    "convert_log_level",
    "new_config",
    "set_api_key",
    "set_debug_level",
    "set_frequency_penalty",
    "set_max_retries",
    "set_max_tokens",
    "set_memory",
    "set_min_p",
    "set_mirostat",
    "set_mirostat_eta",
    "set_mirostat_tau",
    "set_model",
    "set_ollama_endpoint",
    "set_presence_penalty",
    "set_provider",
    "set_repeat_last_n",
    "set_repeat_penalty",
    "set_retry_delay",
    "set_seed",
    "set_temperature",
    "set_tfs_z",
    "set_timeout",
    "set_top_p",
]

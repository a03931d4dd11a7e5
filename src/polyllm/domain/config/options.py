"""Public configuration and functional options.

A ``Config`` is built by applying configurators returned from the ``set_*``
functions::

    config = new_config(
        set_provider("mistral"),
        set_model("mistral-large-latest"),
        set_max_tokens(200),
    )

Setters never validate across fields; ``set_max_tokens`` is the only one that
adjusts its input (values below 1 become 1).
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from polyllm.domain.config.llm import LLMConfig

# Level used for LogLevel.OFF: above CRITICAL, so nothing is emitted
LOGGING_DISABLED = logging.CRITICAL + 10


class LogLevel(IntEnum):
    """Verbosity of the library's logging"""

    OFF = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4


_TO_LOGGING_LEVEL = {
    LogLevel.OFF: LOGGING_DISABLED,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class MemoryOption(BaseModel):
    """Conversation memory settings"""

    max_tokens: int


class Config(BaseModel):
    """Generation parameters plus retry, timeout and debug settings.

    Optional sampling knobs stay ``None`` until their setter is applied, so
    providers can tell "unset" apart from an explicit zero.
    """

    provider: str = ""
    model: str = ""
    ollama_endpoint: str = ""
    temperature: float = 0.0
    max_tokens: int = 0
    top_p: float = 0.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    timeout: float = 0.0  # seconds
    max_retries: int = 0
    retry_delay: float = 0.0  # seconds
    api_key: str = ""
    debug_level: LogLevel = LogLevel.OFF
    memory_option: Optional[MemoryOption] = None
    seed: Optional[int] = None
    min_p: Optional[float] = None
    repeat_penalty: Optional[float] = None
    repeat_last_n: Optional[int] = None
    mirostat: Optional[int] = None
    mirostat_eta: Optional[float] = None
    mirostat_tau: Optional[float] = None
    tfs_z: Optional[float] = None

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    def to_internal_config(self) -> LLMConfig:
        """Convert to the internal representation used by providers.

        The single API key is keyed by the current provider and the debug
        level is translated to a standard library logging level.
        """
        return LLMConfig(
            provider=self.provider,
            model=self.model,
            ollama_endpoint=self.ollama_endpoint,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            top_p=self.top_p,
            frequency_penalty=self.frequency_penalty,
            presence_penalty=self.presence_penalty,
            timeout=self.timeout,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
            api_keys={self.provider: self.api_key},
            log_level=_TO_LOGGING_LEVEL[self.debug_level],
            seed=self.seed,
            min_p=self.min_p,
            repeat_penalty=self.repeat_penalty,
            repeat_last_n=self.repeat_last_n,
            mirostat=self.mirostat,
            mirostat_eta=self.mirostat_eta,
            mirostat_tau=self.mirostat_tau,
            tfs_z=self.tfs_z,
        )


ConfigOption = Callable[[Config], None]


def convert_log_level(level: int) -> LogLevel:
    """Map a standard library logging level back to a LogLevel.

    Unknown levels fall back to WARN.
    """
    if level == logging.DEBUG:
        return LogLevel.DEBUG
    if level == logging.INFO:
        return LogLevel.INFO
    if level == logging.WARNING:
        return LogLevel.WARN
    if level == logging.ERROR:
        return LogLevel.ERROR
    return LogLevel.WARN


def apply_options(config: Config, *options: ConfigOption) -> Config:
    """Apply configurators to a config in order and return it"""
    for option in options:
        option(config)
    return config


def new_config(*options: ConfigOption) -> Config:
    """Build a fresh Config from configurators"""
    return apply_options(Config(), *options)


def set_provider(provider: str) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.provider = provider

    return _apply


def set_model(model: str) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.model = model

    return _apply


def set_ollama_endpoint(endpoint: str) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.ollama_endpoint = endpoint

    return _apply


def set_temperature(temperature: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.temperature = temperature

    return _apply


def set_max_tokens(max_tokens: int) -> ConfigOption:
    """Set max tokens, clamping values below 1 up to 1"""

    def _apply(config: Config) -> None:
        config.max_tokens = max(max_tokens, 1)

    return _apply


def set_timeout(timeout: float) -> ConfigOption:
    """Set the request timeout in seconds"""

    def _apply(config: Config) -> None:
        config.timeout = timeout

    return _apply


def set_api_key(api_key: str) -> ConfigOption:
    """Set the API key for the current provider"""

    def _apply(config: Config) -> None:
        config.api_key = api_key

    return _apply


def set_max_retries(max_retries: int) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.max_retries = max_retries

    return _apply


def set_retry_delay(retry_delay: float) -> ConfigOption:
    """Set the delay between retries in seconds"""

    def _apply(config: Config) -> None:
        config.retry_delay = retry_delay

    return _apply


def set_debug_level(level: LogLevel) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.debug_level = level

    return _apply


def set_memory(max_tokens: int) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.memory_option = MemoryOption(max_tokens=max_tokens)

    return _apply


def set_top_p(top_p: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.top_p = top_p

    return _apply


def set_frequency_penalty(penalty: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.frequency_penalty = penalty

    return _apply


def set_presence_penalty(penalty: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.presence_penalty = penalty

    return _apply


def set_seed(seed: int) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.seed = seed

    return _apply


def set_min_p(min_p: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.min_p = min_p

    return _apply


def set_repeat_penalty(penalty: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.repeat_penalty = penalty

    return _apply


def set_repeat_last_n(n: int) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.repeat_last_n = n

    return _apply


def set_mirostat(mode: int) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.mirostat = mode

    return _apply


def set_mirostat_eta(eta: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.mirostat_eta = eta

    return _apply


def set_mirostat_tau(tau: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.mirostat_tau = tau

    return _apply


def set_tfs_z(z: float) -> ConfigOption:
    def _apply(config: Config) -> None:
        config.tfs_z = z

    return _apply

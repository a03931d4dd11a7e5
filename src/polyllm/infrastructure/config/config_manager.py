"""Configuration manager for loading and validating .polyllm.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from polyllm.domain.config import Config, LLMConfig, LogLevel, convert_log_level
from polyllm.domain.config.llm import FileLLMConfig
from polyllm.domain.config.options import LOGGING_DISABLED

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".polyllm.yml"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": LOGGING_DISABLED,
}

# Environment variable -> LLMConfig field
ENV_OVERRIDES = {
    "LLM_PROVIDER": "provider",
    "LLM_MODEL": "model",
    "LLM_OLLAMA_ENDPOINT": "ollama_endpoint",
    "LLM_TEMPERATURE": "temperature",
    "LLM_MAX_TOKENS": "max_tokens",
    "LLM_TIMEOUT": "timeout",
    "LLM_MAX_RETRIES": "max_retries",
    "LLM_RETRY_DELAY": "retry_delay",
}

API_KEY_SUFFIX = "_API_KEY"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .polyllm.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (defined in LLMConfig)
    2. .polyllm.yml file (searched from current directory)
    3. Environment variables (LLM_*, <PROVIDER>_API_KEY)
    4. Functional options applied by the caller
    """

    DEFAULT_CONFIG = {
        "provider": "mistral",
        "model": "mistral-large-latest",
        "temperature": 0.7,
        "max_tokens": 100,
        "timeout": 30.0,
        "max_retries": 3,
        "retry_delay": 2.0,
        "api_keys": {},
        "log_level": "warn",
    }

    def __init__(self, config_path: Optional[Union[Path, str]] = None):
        """Initialize config manager

        Args:
            config_path: Path to .polyllm.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: LLMConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .polyllm.yml file starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> LLMConfig:
        """Load configuration from file and environment, then validate

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file cannot be read or parsed
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)
        config_dict["log_level"] = self._parse_log_level(config_dict.get("log_level"))

        return FileLLMConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Values are passed as strings; pydantic coerces them to field types.
        """
        for env_name, field in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config[field] = value

        if os.getenv("LLM_LOG_LEVEL"):
            config["log_level"] = os.getenv("LLM_LOG_LEVEL")

        api_keys = dict(config.get("api_keys") or {})
        for env_name, value in os.environ.items():
            if env_name.endswith(API_KEY_SUFFIX) and value:
                provider = env_name[: -len(API_KEY_SUFFIX)].lower()
                if provider:
                    api_keys[provider] = value
        config["api_keys"] = api_keys
        return config

    def _parse_log_level(self, value: Any) -> Any:
        """Accept level names as well as numeric logging levels"""
        if isinstance(value, str) and value.strip().lower() in LOG_LEVELS:
            return LOG_LEVELS[value.strip().lower()]
        return value

    def get_llm_config(self) -> LLMConfig:
        """Get the validated LLM configuration"""
        return self.config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "model" or "api_keys.mistral")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config.model_dump()
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def to_public_config(self) -> Config:
        """Convert the loaded configuration to a public Config

        Only the core settings are carried over; the API key is the one of
        the selected provider, if any.
        """
        internal = self.config
        config = Config(
            provider=internal.provider,
            model=internal.model,
            temperature=internal.temperature,
            max_tokens=internal.max_tokens,
            timeout=internal.timeout,
            max_retries=internal.max_retries,
            retry_delay=internal.retry_delay,
            debug_level=self._debug_level(internal.log_level),
        )
        api_key = internal.api_key_for()
        if api_key:
            config.api_key = api_key
        return config

    @staticmethod
    def _debug_level(level: int) -> LogLevel:
        """Translate a logging level back to a LogLevel

        A disabled level ("off") stays OFF instead of falling back to WARN.
        """
        if level >= LOGGING_DISABLED:
            return LogLevel.OFF
        return convert_log_level(level)


def load_config(config_path: Optional[Union[Path, str]] = None) -> Config:
    """Load the public configuration from defaults, file and environment

    The debug level is translated with convert_log_level, except that
    log_level "off" maps to LogLevel.OFF where convert_log_level would
    give WARN.

    Raises:
        ConfigurationError: If configuration validation fails
    """
    return ConfigManager(config_path=config_path).to_public_config()

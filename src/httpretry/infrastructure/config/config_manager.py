"""Configuration manager for loading and validating .httpretry.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from httpretry.domain.config import AppConfig, HttpConfig, RetryStrategyOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".httpretry.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .httpretry.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .httpretry.yml file (searched from current directory)
    3. Environment variables (HTTPRETRY_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "retry": {
            "type": "no-retry",
        },
        "http": {
            "base_url": None,
            "timeout": 30.0,
            "headers": {},
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .httpretry.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If the file cannot be read or validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            raise ConfigurationError(format_validation_error(e)) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .httpretry.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILENAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILENAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file is not valid YAML
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries

        A ``retry`` section with a different ``type`` replaces the base section
        instead of merging into it, since option shapes differ per type.
        """
        result = base.copy()
        for key, value in override.items():
            if key == "retry" and isinstance(value, dict) and value.get("type") != result.get(key, {}).get("type"):
                result[key] = dict(value)
            elif key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        retry = config.setdefault("retry", {})
        http = config.setdefault("http", {})

        if os.getenv("HTTPRETRY_STRATEGY"):
            strategy_type = os.getenv("HTTPRETRY_STRATEGY").lower()
            if strategy_type != retry.get("type"):
                retry.clear()
            retry["type"] = strategy_type

        if os.getenv("HTTPRETRY_MAX_ATTEMPTS"):
            retry.pop("maxAttempts", None)
            retry["max_attempts"] = _parse_env("HTTPRETRY_MAX_ATTEMPTS", int)

        if os.getenv("HTTPRETRY_BASE_URL"):
            http["base_url"] = os.getenv("HTTPRETRY_BASE_URL")

        if os.getenv("HTTPRETRY_TIMEOUT"):
            http["timeout"] = _parse_env("HTTPRETRY_TIMEOUT", float)

        return config

    def get_retry_options(self) -> RetryStrategyOptions:
        """Get retry strategy options

        Returns:
            Retry options model for the configured strategy type
        """
        return self.config.retry

    def get_http_config(self) -> HttpConfig:
        """Get HTTP transport configuration

        Returns:
            HTTP configuration model
        """
        return self.config.http

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "retry.max_attempts" or "http")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value


def format_validation_error(error: ValidationError) -> str:
    """Format pydantic validation errors as one line per invalid field"""
    errors = []
    for err in error.errors():
        field = ".".join(str(x) for x in err["loc"])
        errors.append(f"  - {field}: {err['msg']}")
    return "Configuration validation failed:\n" + "\n".join(errors)


def _parse_env(name: str, cast: Any) -> Any:
    raw = os.getenv(name)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e

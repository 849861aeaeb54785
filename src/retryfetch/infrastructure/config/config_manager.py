"""Configuration manager for loading and validating .retryfetch.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from retryfetch.domain.config import AppConfig, ProbeConfig, RequestConfig, RetryPolicy

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".retryfetch.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .retryfetch.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .retryfetch.yml file (searched from current directory upwards)
    3. Environment variables (RETRYFETCH_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "retry": {
            "max_retries": 3,
            "base_delay_ms": 1000,
        },
        "request": {
            "transport": "httpx",
            "timeout_ms": 30000,
            "headers": {},
            "mock": {
                "status_code": 200,
                "body": "",
            },
        },
        "probe": {
            "url": None,
            "timeout_ms": 5000,
            "slow_threshold_ms": 3000,
            "poll_interval_ms": 1000,
            "max_wait_ms": 10000,
        },
    }

    # env var -> (section, key, converter)
    ENV_OVERRIDES = {
        "RETRYFETCH_MAX_RETRIES": ("retry", "max_retries", int),
        "RETRYFETCH_BASE_DELAY_MS": ("retry", "base_delay_ms", float),
        "RETRYFETCH_TIMEOUT_MS": ("request", "timeout_ms", int),
        "RETRYFETCH_TRANSPORT": ("request", "transport", str),
        "RETRYFETCH_PROBE_URL": ("probe", "url", str),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .retryfetch.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
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
        """Find .retryfetch.yml starting from current directory

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

    def _load_config(self) -> AppConfig:
        """Load configuration from file and env, then validate

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file or an env override cannot be parsed
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping at top level")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

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
        """Apply RETRYFETCH_* environment variable overrides"""
        for env_name, (section, key, convert) in self.ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if not raw:
                continue
            try:
                config[section][key] = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}") from e
            logger.debug(f"{section}.{key} overridden by {env_name}")
        return config

    def get_retry_policy(self) -> RetryPolicy:
        """Get retry policy"""
        return self.config.retry

    def get_request_config(self) -> RequestConfig:
        """Get request defaults"""
        return self.config.request

    def get_probe_config(self) -> ProbeConfig:
        """Get connectivity probe configuration"""
        return self.config.probe


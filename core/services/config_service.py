"""Configuration service implementation."""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import asdict

from core.exceptions import ConfigurationError
from core.interfaces.config_interface import IConfigService
from core.models.config import AWSConfig, LogLevel, ReleaseConfig


class ConfigService(IConfigService):
    """Builds a ReleaseConfig from YAML, environment and explicit overrides."""

    ENV_MAPPINGS = {
        "HA_RELEASE_GROUP_NAME": "group_name",
        "HA_RELEASE_AWS_REGION": "aws.region",
        "HA_RELEASE_AWS_PROFILE": "aws.profile_name",
        "HA_RELEASE_INSERVICE_TIME_ALLOWED": "inservice_time_allowed",
        "HA_RELEASE_ELB_TIMEOUT": "elb_timeout",
        "HA_RELEASE_LOG_LEVEL": "log_level",
    }

    # Settings read from the environment as whole seconds
    INTEGER_SETTINGS = {"inservice_time_allowed", "elb_timeout"}

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.logger = logging.getLogger(__name__)
        self._environ = os.environ if environ is None else environ
        self._release_config: Optional[ReleaseConfig] = None
        self._config_file_path: Optional[str] = None

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Centralized error handling and logging."""
        self.logger.error(f"Error {operation}: {str(error)}")
        if isinstance(error, ConfigurationError):
            raise error
        raise ConfigurationError(f"Error {operation}: {str(error)}") from error

    async def load_release_config(
        self,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ReleaseConfig:
        """Load release configuration.

        Args:
            config_path: Optional YAML file; without one, environment and
                overrides must supply everything
            overrides: Dotted keys (e.g. 'aws.region') applied last; None
                values are ignored

        Returns:
            Validated ReleaseConfig

        Raises:
            ConfigurationError: If the file is missing or the result is invalid
        """
        try:
            raw_config = self._read_file(config_path) if config_path else {}

            self._apply_environment_overrides(raw_config)
            for key, value in (overrides or {}).items():
                if value is not None:
                    self._set_nested_value(raw_config, key, value)

            release_config = self._parse_release_config(raw_config)

            errors = release_config.validate()
            if errors:
                raise ConfigurationError(
                    f"Configuration validation failed: {'; '.join(errors)}"
                )

            self._release_config = release_config
            self._config_file_path = config_path
            return release_config

        except Exception as e:
            self._handle_error("loading release configuration", e)

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a configuration setting by key path (e.g., 'aws.region')."""
        if not self._release_config:
            return default

        value = asdict(self._release_config)
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_release_config(self) -> Optional[ReleaseConfig]:
        """Get the last loaded release configuration."""
        return self._release_config

    def _read_file(self, config_file_path: str) -> Dict[str, Any]:
        config_path = Path(config_file_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file_path}")

        with open(config_path, "r", encoding="utf-8") as file:
            raw_config = yaml.safe_load(file)

        if raw_config is None:
            return {}
        if not isinstance(raw_config, dict):
            raise ValueError("Configuration file must contain a mapping")
        return raw_config

    def _parse_release_config(self, raw_config: Dict[str, Any]) -> ReleaseConfig:
        """Parse raw configuration into ReleaseConfig object."""
        aws_data = raw_config.get("aws") or {}

        aws_config = AWSConfig(
            region=aws_data.get("region", "us-east-1"),
            access_key_id=aws_data.get("access_key_id"),
            secret_access_key=aws_data.get("secret_access_key"),
            session_token=aws_data.get("session_token"),
            profile_name=aws_data.get("profile_name"),
            timeout=int(aws_data.get("timeout", 60)),
            max_retries=int(aws_data.get("max_retries", 3)),
        )

        return ReleaseConfig(
            group_name=raw_config.get("group_name", ""),
            aws=aws_config,
            inservice_time_allowed=int(raw_config.get("inservice_time_allowed", 300)),
            elb_timeout=int(raw_config.get("elb_timeout", 10)),
            log_level=self._parse_log_level(raw_config.get("log_level", "INFO")),
        )

    def _parse_log_level(self, log_level_str: str) -> LogLevel:
        """Parse log level string into LogLevel enum."""
        try:
            return LogLevel[log_level_str.upper()]
        except (KeyError, AttributeError):
            return LogLevel.INFO

    def _apply_environment_overrides(self, config: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration."""
        for env_var, config_key in self.ENV_MAPPINGS.items():
            env_value = self._environ.get(env_var)
            if env_value is not None:
                if config_key in self.INTEGER_SETTINGS and env_value.isdigit():
                    env_value = int(env_value)

                self._set_nested_value(config, config_key, env_value)

    def _set_nested_value(
        self, config: Dict[str, Any], key_path: str, value: Any
    ) -> None:
        """Set a nested value in configuration dictionary."""
        keys = key_path.split(".")
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

"""Configuration service interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from core.models.config import ReleaseConfig


class IConfigService(ABC):
    """Interface for configuration management."""

    @abstractmethod
    async def load_release_config(self, config_path: Optional[str] = None,
                                  overrides: Optional[Dict[str, Any]] = None) -> ReleaseConfig:
        """Load release configuration.

        Args:
            config_path: Optional path to a YAML configuration file
            overrides: Dotted keys that take precedence over file and environment

        Returns:
            ReleaseConfig object

        Raises:
            ConfigurationError: If config is invalid or not found
        """
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a configuration setting by key.

        Args:
            key: Setting key (supports dot notation)
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        pass

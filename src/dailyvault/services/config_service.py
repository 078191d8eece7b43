"""Configuration service for DailyVault.

Loads and saves ``config.json`` and the credentials file under the platform
config directory.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel, ValidationError

from dailyvault.models.config_models import AppConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for managing application configuration and credentials."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path(user_config_dir("dailyvault"))
        self.config_path = self.config_dir / "config.json"
        self.credentials_path = self.config_dir / "credentials.json"

        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, falling back to defaults."""
        if not self.config_path.exists():
            return AppConfig()

        try:
            with open(self.config_path, encoding="utf-8") as f:
                return AppConfig.model_validate_json(f.read())
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

    def save_config(self) -> None:
        """Save the current configuration to disk."""
        # Serialize before opening: self.config may still load from this file
        data = self.config.model_dump_json(indent=4)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(data)
        self.config_path.chmod(0o600)

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, BaseModel):
                value = getattr(value, k, None)
            else:
                return None
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and save."""
        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                raise KeyError(f"Unknown config section: {k}")
            current = current[k]
        if keys[-1] not in current:
            raise KeyError(f"Unknown config key: {key}")

        current[keys[-1]] = value

        # Re-validate so bad values never reach disk
        self._config = AppConfig.model_validate(config_dict)
        self.save_config()
        logger.info("config updated: %s", key)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()

    def save_credentials(self, token: str, refresh_token: str | None = None) -> None:
        """Save authentication credentials."""
        credentials = {"token": token}
        if refresh_token:
            credentials["refresh_token"] = refresh_token

        with open(self.credentials_path, "w", encoding="utf-8") as f:
            json.dump(credentials, f, indent=2)

        # Readable only by owner
        self.credentials_path.chmod(0o600)

    def load_credentials(self) -> dict[str, str] | None:
        """Load authentication credentials, or ``None`` if absent or unreadable."""
        if not self.credentials_path.exists():
            return None
        try:
            with open(self.credentials_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, JSONDecodeError):
            logger.warning("credentials file is unreadable; ignoring it")
            return None

    def clear_credentials(self) -> None:
        """Clear authentication credentials."""
        if self.credentials_path.exists():
            self.credentials_path.unlink()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Return the process-wide ConfigService."""
    return ConfigService()

import json
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from .models import Config

ENV_OVERRIDES = {
    "PACKAGE_VIEWER_API_URL": "api_url",
    "PACKAGE_VIEWER_GAME_ID": "game_id",
    "PACKAGE_VIEWER_LAUNCHER_ID": "launcher_id",
    "PACKAGE_VIEWER_TIMEOUT": "request_timeout",
}


class ConfigManager:
    """Manages the application's configuration state."""

    def __init__(self, config_file: str = "config.json", env_file: Optional[str] = None):
        """Loads config.json (or defaults), then applies any environment overrides."""
        self.config_path = config_file
        self.env_file = env_file
        self.config: Config = self._load()
        self.overrides: dict = self._read_env_overrides()

    def _load(self) -> Config:
        """Loads config from file, or returns a default Config object."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                return Config(**data)
        except (FileNotFoundError, json.JSONDecodeError, TypeError, ValueError) as e:
            if not isinstance(e, FileNotFoundError):
                logging.warning(f"Ignoring unreadable config file {self.config_path}: {e}")
            return Config()

    def _read_env_overrides(self) -> dict:
        """Collects PACKAGE_VIEWER_* values from the environment and an optional .env file."""
        load_dotenv(self.env_file)
        overrides = {}
        for env_name, field in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if not value:
                continue
            try:
                overrides[field] = getattr(Config(**{field: value}), field)
            except ValueError as e:
                logging.warning(f"Ignoring invalid {env_name}={value!r}: {e}")
        if overrides:
            logging.info(f"Using environment overrides for: {', '.join(sorted(overrides))}")
        return overrides

    def _save(self):
        """Saves the current config state to the file."""
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(self.config.model_dump(), f, indent=4)

    def get_config(self) -> Config:
        """Returns the effective configuration, with environment overrides applied."""
        if not self.overrides:
            return self.config
        return Config(**{**self.config.model_dump(), **self.overrides})

    def update_config(self, **kwargs):
        """
        Updates configuration attributes and saves the changes.

        Args:
            **kwargs: The configuration fields to update (e.g., last_section="MAIN").
        """
        updated_fields = self.config.model_copy(update=kwargs)
        if updated_fields != self.config:
            self.config = updated_fields
            self._save()

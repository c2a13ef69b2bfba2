"""
Layered configuration for dailymuse.

Sources, highest precedence first:
    1. Environment variables (MUSE_SECTION__KEY)
    2. Config file (YAML or JSON)
    3. Built-in defaults

Usage:
    config = Config(config_file="~/.dailymuse/config.yaml")

    config.get("storage.entries")       # "file" | "memory" | "firestore"
    config.get("storage.entries_dir")   # resolved under paths.data_dir
"""

import json
import os
from typing import Any

import yaml

from .exceptions import ConfigurationError

_DEFAULT_ENV_PREFIX = "MUSE_"
_DEFAULT_DATA_DIR_NAME = ".dailymuse-data"


class Config:
    """
    Central configuration manager.

    Env vars use double-underscore to denote nesting:
    MUSE_STORAGE__ENTRIES=firestore -> config["storage"]["entries"] = "firestore"
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = _DEFAULT_ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: Path to YAML or JSON configuration file.
            env_prefix: Prefix for environment variable overrides.
            data_dir: Base directory for entries, assets and logs.
                Defaults to ~/.dailymuse-data.
            defaults: Additional default values to merge.
        """
        self.config_file = os.path.expanduser(config_file) if config_file else None
        self.env_prefix = env_prefix or ""
        self._data_dir = data_dir or os.path.join("~", _DEFAULT_DATA_DIR_NAME)
        self._extra_defaults = defaults or {}
        self.config_data: dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        self.config_data = self._get_default_config()

        if self._extra_defaults:
            self._update_dict(self.config_data, self._extra_defaults)

        if self.config_file and os.path.exists(self.config_file):
            file_config = self._load_file(self.config_file)
            self._update_dict(self.config_data, file_config)

        self._load_from_env()

    def _get_default_config(self) -> dict[str, Any]:
        data_dir = os.path.expanduser(self._data_dir)
        return {
            "paths": {
                "data_dir": data_dir,
                "log_dir": os.path.join(data_dir, "logs"),
            },
            "storage": {
                "entries": "file",
                "assets": "local",
                "entries_dir": os.path.join(data_dir, "muses"),
                "assets_dir": os.path.join(data_dir, "assets"),
                "public_base_url": "",
                "asset_prefix": "muses",
            },
            "firestore": {
                "project": "",
                "collection": "muses",
                "credentials_file": "",
            },
            "gcs": {
                "bucket": "",
                "credentials_file": "",
            },
            "generation": {
                "model": "gemini/imagen-3.0-generate-002",
                "size": "1024x1024",
            },
            "admin": {
                "password": "",
            },
        }

    @staticmethod
    def _load_file(path: str) -> dict[str, Any]:
        """Load a YAML or JSON config file."""
        ext = os.path.splitext(path)[1].lower()
        try:
            with open(path) as f:
                if ext in (".yaml", ".yml"):
                    return yaml.safe_load(f) or {}
                elif ext == ".json":
                    return json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e
        return {}

    def _update_dict(self, target: dict, source: dict) -> None:
        """Recursively merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _load_from_env(self) -> None:
        if not self.env_prefix:
            return
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(self.env_prefix):
                continue
            config_key = env_key[len(self.env_prefix) :].lower()
            key_parts = config_key.split("__")

            current = self.config_data
            for part in key_parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[key_parts[-1]] = env_value

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dot-notation path.

        Args:
            key_path: e.g. "storage.entries", "gcs.bucket"
            default: Returned when key is not found.
        """
        current = self.config_data
        for part in key_path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def require(self, key_path: str) -> Any:
        """Like get(), but raise ConfigurationError when the value is missing or empty."""
        value = self.get(key_path)
        if value in (None, ""):
            env_key = self.env_prefix + key_path.replace(".", "__").upper()
            raise ConfigurationError(f"Missing required setting '{key_path}' (or env var {env_key}).")
        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set a config value by dot-notation path, creating intermediate dicts."""
        parts = key_path.split(".")
        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def get_data_dir(self) -> str:
        """Return the resolved data directory path."""
        return os.path.expanduser(self.get("paths.data_dir", self._data_dir))

    def ensure_directories(self) -> None:
        """Create the configured data and log directories if they don't exist."""
        for path_value in self.config_data.get("paths", {}).values():
            if isinstance(path_value, str):
                os.makedirs(os.path.expanduser(path_value), exist_ok=True)


_config_instance: Config | None = None


def get_config(
    config_file: str | None = None,
    env_prefix: str = _DEFAULT_ENV_PREFIX,
    data_dir: str | None = None,
) -> Config:
    """Get or create the global Config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file=config_file, env_prefix=env_prefix, data_dir=data_dir)
    return _config_instance


def reset_config() -> None:
    """Reset the global Config singleton (useful for testing)."""
    global _config_instance
    _config_instance = None

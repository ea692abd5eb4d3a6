"""Configuration loader for task-cli (TOML file + environment overrides)."""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Any, Dict

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for Python <3.11
    import tomli as tomllib  # type: ignore

APP_NAME = "task-cli"
ENV_PREFIX = "TASKCLI_"
TRUTHY = {"1", "true", "yes", "on"}


class ConfigLoader:
    """
    Handles configuration loading from multiple sources with priority resolution.

    Priority (highest → lowest):
    1. Command-line options (applied by the CLI, not here)
    2. Environment variables (TASKCLI_<SECTION>__<KEY>)
    3. Config file (~/.config/task-cli/config.toml)
    4. Built-in defaults
    """

    def __init__(self) -> None:
        self.config_dir = self.get_config_dir()
        self.config: Dict[str, Any] = self._get_default_config()
        self._load_all()

    # ------------------------------------------------------------------ #
    # Public getters
    # ------------------------------------------------------------------ #
    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot-separated key."""
        keys = key.split(".")
        value: Any = self.config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a boolean value; strings coming from the environment are coerced."""
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in TRUTHY
        return bool(value)

    def data_dir(self) -> Path:
        """Directory holding the task file; configured or the OS default."""
        configured = self.get("storage.data_dir")
        if configured:
            return Path(str(configured)).expanduser()
        return self.get_data_dir()

    # ------------------------------------------------------------------ #
    # Load/merge helpers
    # ------------------------------------------------------------------ #
    def _load_all(self) -> None:
        self._load_config_file()
        self._apply_env_overrides()

    def _load_config_file(self) -> None:
        """Merge the user config file over the defaults, creating it on first run."""
        config_file = self.config_dir / "config.toml"
        if config_file.exists():
            with open(config_file, "rb") as f:
                self._deep_merge(self.config, tomllib.load(f))
        else:
            self._create_default_config()

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides (TASKCLI_STORAGE__DATA_DIR → storage.data_dir)."""
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            config_key = key[len(ENV_PREFIX) :].lower().replace("__", ".")
            self._set_nested(self.config, config_key, value)

    # ------------------------------------------------------------------ #
    # Static paths/helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def get_config_dir() -> Path:
        """Get platform-specific config directory following XDG spec."""
        system = platform.system()
        if system == "Windows":
            base = Path(os.environ.get("APPDATA", "~\\AppData\\Roaming")).expanduser()
        elif system == "Darwin":
            xdg = os.environ.get("XDG_CONFIG_HOME")
            base = Path(xdg) if xdg else Path.home() / ".config"
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
        return base / APP_NAME

    @staticmethod
    def get_data_dir() -> Path:
        """Get platform-specific per-user data directory."""
        xdg = os.environ.get("XDG_DATA_HOME")
        if xdg:
            return Path(xdg).expanduser() / APP_NAME
        system = platform.system()
        if system == "Windows":
            base = Path(os.environ.get("LOCALAPPDATA", "~\\AppData\\Local")).expanduser()
        elif system == "Darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path.home() / ".local" / "share"
        return base / APP_NAME

    # ------------------------------------------------------------------ #
    # Default content
    # ------------------------------------------------------------------ #
    def _create_default_config(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config_file = self.config_dir / "config.toml"
        with open(config_file, "w", encoding="utf-8") as f:
            f.write(self._get_default_config_toml())

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        return {
            "general": {
                "version": "1.0.0",
                "event_log": True,
            },
            "storage": {
                "data_dir": "",
                "file_name": "tasks.json",
                "strict_load": False,
            },
        }

    def _get_default_config_toml(self) -> str:
        """Default config TOML text for first-run creation."""
        default = self._get_default_config()
        return "\n".join(
            [
                "[general]",
                f'version = "{default["general"]["version"]}"',
                "# Append task events to <data_dir>/logs/tasks.log",
                "event_log = true",
                "",
                "[storage]",
                "# Empty means the per-user data directory of the OS",
                'data_dir = ""',
                f'file_name = "{default["storage"]["file_name"]}"',
                "# Fail instead of treating an unreadable tasks file as empty",
                "strict_load = false",
                "",
            ]
        )

    # ------------------------------------------------------------------ #
    # Utility helpers
    # ------------------------------------------------------------------ #
    def _deep_merge(self, base: dict, override: dict) -> None:
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _set_nested(self, d: dict, path: str, value: Any) -> None:
        keys = path.split(".")
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value


Config = ConfigLoader

__all__ = ["ConfigLoader", "Config", "APP_NAME"]

"""Configuration management for CommitCraft."""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from commitcraft.errors import (
    ConfigAlreadyExistsError,
    ConfigNotFoundError,
    InvalidConfigError,
    IoFailureError,
)

from .settings import Settings

# Singleton instance
_settings: Optional[Settings] = None

# Default config directory
CONFIG_DIR = Path.home() / ".config" / "commitcraft"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
DEFAULTS_FILE = Path(__file__).parent / "defaults.yaml"


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${ENV_VAR} syntax in strings."""
    if isinstance(value, str):
        pattern = r"\$\{([^}]+)\}"
        matches = re.findall(pattern, value)
        for var_name in matches:
            env_value = os.environ.get(var_name, "")
            value = value.replace(f"${{{var_name}}}", env_value)
        return value if value else None
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file and return its contents."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigError(str(path), "<file>", f"not valid YAML: {e}") from e
    except OSError as e:
        raise IoFailureError(str(path), "read config file", e) from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise InvalidConfigError(str(path), type(content).__name__, "top level must be a mapping")
    return content


def _write_yaml_file(path: Path, data: dict) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise IoFailureError(str(path), "write config file", e) from e


def load_settings(config_path: Optional[Path] = None, force_reload: bool = False) -> Settings:
    """
    Load settings with priority: user config > env vars > built-in defaults.

    Args:
        config_path: Optional path to a custom config file
        force_reload: Force reload even if settings are cached

    Returns:
        Settings instance

    Raises:
        InvalidConfigError: If the configuration does not validate.
    """
    global _settings

    if _settings is not None and not force_reload:
        return _settings

    user_config = _load_yaml_file(config_path or CONFIG_FILE)

    # Expand environment variables; keys that expand to nothing fall back
    # to env vars and defaults
    expanded = _expand_env_vars(user_config)
    settings_dict = {k: v for k, v in expanded.items() if v is not None}

    try:
        _settings = Settings(**settings_dict)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "settings"
        raise InvalidConfigError(field, first.get("input"), first.get("msg", "invalid value")) from e

    return _settings


def get_settings() -> Settings:
    """Get the current settings instance, loading if necessary."""
    if _settings is None:
        return load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None


def create_config_file(editor: str, config_path: Optional[Path] = None) -> Path:
    """Create the user config file from the packaged defaults.

    Raises:
        ConfigAlreadyExistsError: If the file already exists.
    """
    path = config_path or CONFIG_FILE
    if path.exists():
        raise ConfigAlreadyExistsError(str(path))

    config = _deep_merge(_load_yaml_file(DEFAULTS_FILE), {"editor": editor})
    _write_yaml_file(path, config)
    reset_settings()
    return path


def set_editor(editor: str, config_path: Optional[Path] = None) -> None:
    """Change the editor in an existing user config file.

    Raises:
        ConfigNotFoundError: If the file does not exist yet.
    """
    path = config_path or CONFIG_FILE
    if not path.exists():
        raise ConfigNotFoundError(str(path))

    config = _load_yaml_file(path)
    config["editor"] = editor
    _write_yaml_file(path, config)
    reset_settings()


def get_editor() -> str:
    """Get the editor command from the loaded settings."""
    return get_settings().editor


__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "create_config_file",
    "set_editor",
    "get_editor",
    "CONFIG_DIR",
    "CONFIG_FILE",
]

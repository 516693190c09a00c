"""TOML configuration loading.

`config/default.toml` holds the base configuration and
`config/{AUDITCHAIN_ENV}.toml` layers environment overrides on top.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "AUDITCHAIN_CONFIG_DIR"
ENVIRONMENT_ENV = "AUDITCHAIN_ENV"
DEFAULT_ENVIRONMENT = "development"

# How many directories above the working directory to search
SEARCH_DEPTH = 4


def get_config_dir() -> Path:
    """Locate the configuration directory.

    AUDITCHAIN_CONFIG_DIR wins when set (and must exist). Otherwise the
    nearest `config/` directory at or above the working directory is
    used, falling back to a relative `config/`.

    Raises:
        FileNotFoundError: If AUDITCHAIN_CONFIG_DIR names a missing directory
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    cwd = Path.cwd()
    for directory in [cwd, *cwd.parents][: SEARCH_DEPTH + 1]:
        candidate = directory / "config"
        if candidate.is_dir():
            return candidate

    return Path("config")


def get_environment() -> str:
    """Name of the active environment (AUDITCHAIN_ENV, default development)."""
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {file_path}") from None


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge `override` into a copy of `base`, recursing into tables."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """Load default.toml merged with the active environment's file.

    The environment file is optional; default.toml is not.

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    config_dir = get_config_dir()

    default_path = config_dir / "default.toml"
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/default.toml or set {CONFIG_DIR_ENV}."
        )
    config = load_toml(default_path)

    env_path = config_dir / f"{get_environment()}.toml"
    if env_path.is_file():
        config = deep_merge(config, load_toml(env_path))

    return config

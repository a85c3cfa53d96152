"""Locate and read Parley's layered TOML configuration."""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "PARLEY_CONFIG_DIR"
ENVIRONMENT_ENV = "PARLEY_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"

# parents searched for config/ when PARLEY_CONFIG_DIR is unset
_SEARCH_DEPTH = 5


def get_config_dir(start: Path | None = None) -> Path:
    """Return the directory holding default.toml and the environment files.

    PARLEY_CONFIG_DIR wins when set and must exist. Otherwise ``config/`` is
    looked up from `start` (the working directory by default) and up to four
    of its parents; ``config`` relative to the working directory is the
    fallback.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.exists():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} points to a missing directory: {override}")
        return path

    directory = start or Path.cwd()
    for candidate in [directory, *directory.parents][:_SEARCH_DEPTH]:
        if (candidate / "config").exists():
            return candidate / "config"
    return Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file is missing
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay `override` on `base` without mutating either.

    Tables present on both sides are merged key by key; anything else in
    `override` replaces the base value outright.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def load_config(config_dir: Path | None = None, environment: str | None = None) -> dict[str, Any]:
    """Read default.toml and overlay ``<environment>.toml`` when it exists.

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    config_dir = config_dir or get_config_dir()
    environment = environment or get_environment()

    default_path = config_dir / DEFAULT_FILE
    if not default_path.exists():
        raise FileNotFoundError(
            f"{DEFAULT_FILE} not found in {config_dir}; "
            f"add it or point {CONFIG_DIR_ENV} at a directory that has one"
        )

    config = load_toml(default_path)
    environment_path = config_dir / f"{environment}.toml"
    if environment_path.exists():
        config = deep_merge(config, load_toml(environment_path))
    return config

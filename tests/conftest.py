"""Shared test fixtures for the Parley test suite."""

from collections.abc import Callable, Generator, Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path

import pytest


@pytest.fixture
def config_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Callable[[dict[str, str]], Path]:
    """Write TOML files into a temp config dir and point PARLEY_CONFIG_DIR at it.

    Usage:
        def test_something(config_files):
            config_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PARLEY_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("PARLEY_ENV", "development")

    def _write(files: dict[str, str]) -> Path:
        for filename, content in files.items():
            (config_dir / filename).write_text(content)
        return config_dir

    return _write


@pytest.fixture
def env_override(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[[dict[str, str]], AbstractContextManager[None]]:
    """Set PARLEY_* variables for the duration of a with block.

    Usage:
        def test_something(env_override):
            with env_override({"PARLEY_DEBUG": "true"}):
                ...
    """

    @contextmanager
    def _override(overrides: dict[str, str]) -> Iterator[None]:
        with monkeypatch.context() as patch:
            for key, value in overrides.items():
                patch.setenv(key, value)
            yield

    return _override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Reset cached settings and loaded TOML around every test."""
    from parley.config import get_settings
    from parley.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})

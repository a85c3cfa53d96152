"""Parley configuration.

Settings come from ``config/default.toml``, the ``config/{PARLEY_ENV}.toml``
overlay and ``PARLEY_*`` environment variables:

    from parley.config import get_settings

    manager = DialogManager(root, conversation_state, config=get_settings().dialogs)
"""

from functools import lru_cache

from parley.config.loader import load_config
from parley.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process; `reload_settings` starts over."""
    set_toml_config(load_config())
    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]

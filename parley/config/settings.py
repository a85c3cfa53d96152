"""Parley settings: TOML files layered under PARLEY_* environment variables."""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from parley.config.models.dialogs import DialogsConfig
from parley.config.models.observability import ObservabilityConfig

# Merged default.toml + environment file, installed by get_settings()
_loaded_toml: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Install the merged TOML tables that new Settings instances read."""
    global _loaded_toml
    _loaded_toml = dict(config)


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Lowest-priority source backed by the installed TOML tables."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:  # noqa: ARG002
        return _loaded_toml.get(field_name), field_name, field_name in _loaded_toml

    def __call__(self) -> dict[str, Any]:
        return {
            name: _loaded_toml[name]
            for name in self.settings_cls.model_fields
            if name in _loaded_toml
        }


class Settings(BaseSettings):
    """Process-wide Parley configuration.

    Later entries win: field defaults, config/default.toml,
    config/{PARLEY_ENV}.toml, PARLEY_* variables (``__`` separates nested
    tables, e.g. ``PARLEY_DIALOGS__EXPIRE_AFTER_SECONDS``), then keyword
    arguments.

    Exposed to dialogs through the ``settings`` memory scope when passed to
    DialogManager as its configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="PARLEY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="parley", description="Name reported in startup events")
    debug: bool = Field(default=False, description="Log everything at DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    dialogs: DialogsConfig = Field(default_factory=DialogsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, TomlConfigSettingsSource(settings_cls)

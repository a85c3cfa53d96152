"""Unit tests for Settings class and get_settings function."""

import pytest
from pydantic import ValidationError

from parley.config import get_settings, reload_settings
from parley.config.models import DialogsConfig
from parley.config.settings import Settings


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self) -> None:
        """Settings has sensible defaults."""
        settings = Settings()
        assert settings.app_name == "parley"
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_dialogs_defaults(self) -> None:
        """Dialog configuration has defaults."""
        settings = Settings()
        assert settings.dialogs.state_property == "DialogState"
        assert settings.dialogs.expire_after_seconds is None
        assert settings.dialogs.log_state_snapshot is True

    def test_observability_defaults(self) -> None:
        """Observability configuration has defaults."""
        settings = Settings()
        assert settings.observability.logging.format == "json"
        assert settings.observability.logging.redact_pii is True
        assert settings.observability.metrics.enabled is True

    @pytest.mark.parametrize(
        ("debug", "log_level", "expected"),
        [(False, "WARNING", "WARNING"), (True, "WARNING", "DEBUG"), (False, "DEBUG", "DEBUG")],
    )
    def test_effective_log_level(self, debug: bool, log_level: str, expected: str) -> None:
        """debug forces DEBUG, otherwise log_level applies."""
        settings = Settings(debug=debug, log_level=log_level)
        assert settings.effective_log_level == expected


class TestDialogsConfig:
    """Tests for DialogsConfig validation."""

    def test_rejects_non_positive_expiration(self) -> None:
        """expire_after_seconds must be greater than zero."""
        with pytest.raises(ValidationError):
            DialogsConfig(expire_after_seconds=0)

    def test_rejects_empty_state_property(self) -> None:
        """state_property cannot be empty."""
        with pytest.raises(ValidationError):
            DialogsConfig(state_property="")


class TestGetSettings:
    """Tests for get_settings and reload_settings."""

    def test_returns_settings_instance(self, config_files) -> None:
        """Should build Settings from default.toml."""
        config_files({"default.toml": "app_name = 'test'"})

        settings = get_settings()

        assert isinstance(settings, Settings)
        assert settings.app_name == "test"

    def test_settings_cached(self, config_files) -> None:
        """Should return the cached instance on later calls."""
        config_files({"default.toml": "app_name = 'cached'"})

        assert get_settings() is get_settings()

    def test_reload_settings_clears_cache(self, config_files) -> None:
        """Should pick up edited files after reload_settings."""
        config_dir = config_files({"default.toml": "app_name = 'original'"})
        assert get_settings().app_name == "original"

        (config_dir / "default.toml").write_text("app_name = 'updated'")

        assert reload_settings().app_name == "updated"

    def test_toml_dialogs_section(self, config_files) -> None:
        """Should populate DialogsConfig from the [dialogs] table."""
        config_files(
            {"default.toml": "[dialogs]\nstate_property = 'Stack'\nexpire_after_seconds = 600"}
        )

        settings = get_settings()

        assert settings.dialogs.state_property == "Stack"
        assert settings.dialogs.expire_after_seconds == 600

    def test_environment_file_overlay(self, config_files) -> None:
        """Should overlay the PARLEY_ENV file on default.toml."""
        config_files(
            {
                "default.toml": "[observability.logging]\nformat = 'json'\nredact_pii = false",
                "development.toml": "[observability.logging]\nformat = 'console'",
            }
        )

        logging_config = get_settings().observability.logging

        assert logging_config.format == "console"
        assert logging_config.redact_pii is False


class TestEnvironmentVariableOverrides:
    """Tests for PARLEY_* environment overrides."""

    def test_top_level_override(self, config_files, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should override top-level values."""
        config_files({"default.toml": "debug = false"})
        monkeypatch.setenv("PARLEY_DEBUG", "true")

        assert get_settings().debug is True

    def test_nested_override(self, config_files, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should override nested values with a double underscore."""
        config_files({"default.toml": "[dialogs]\nstate_property = 'DialogState'"})
        monkeypatch.setenv("PARLEY_DIALOGS__STATE_PROPERTY", "OtherState")

        assert get_settings().dialogs.state_property == "OtherState"

    def test_deeply_nested_override(self, config_files, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should override values two tables deep."""
        config_files({"default.toml": "[observability.metrics]\nenabled = true"})
        monkeypatch.setenv("PARLEY_OBSERVABILITY__METRICS__ENABLED", "false")

        assert get_settings().observability.metrics.enabled is False

    def test_env_override_context(self, config_files, env_override) -> None:
        """Should apply env_override only inside the with block."""
        config_files({"default.toml": "log_level = 'INFO'"})

        with env_override({"PARLEY_LOG_LEVEL": "WARNING"}):
            assert reload_settings().log_level == "WARNING"
        assert reload_settings().log_level == "INFO"

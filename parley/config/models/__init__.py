"""Configuration model exports."""

from parley.config.models.dialogs import DialogsConfig
from parley.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)

__all__ = [
    "DialogsConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
]

"""Logging and metrics settings."""

from typing import Literal

from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    """How log events are rendered.

    The level itself is the top-level ``log_level`` setting.
    """

    format: Literal["json", "console"] = Field(
        default="json", description="json for production, console for a terminal"
    )
    redact_pii: bool = Field(
        default=True,
        description="Mask sensitive keys and personal data in events and state snapshots",
    )


class MetricsConfig(BaseModel):
    enabled: bool = Field(default=True, description="Record prometheus dialog metrics")


class ObservabilityConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

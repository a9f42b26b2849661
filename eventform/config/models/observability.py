"""Observability configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

LogFormat = Literal["json", "console"]


class LoggingConfig(BaseModel):
    """Structured logging configuration."""

    level: str = Field(default="INFO", description="Minimum log level")
    format: LogFormat = Field(default="json", description="Renderer: json or console")
    redact_pii: bool = Field(default=True, description="Redact personal data from logs")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

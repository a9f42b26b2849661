"""Configuration section models."""

from eventform.config.models.data import DataSourceConfig
from eventform.config.models.filters import FilterConfig
from eventform.config.models.form import FormDefaults
from eventform.config.models.observability import LoggingConfig, ObservabilityConfig

__all__ = [
    "DataSourceConfig",
    "FilterConfig",
    "FormDefaults",
    "LoggingConfig",
    "ObservabilityConfig",
]

"""Root settings model for eventform configuration."""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from eventform.config.loader import load_config
from eventform.config.models.data import DataSourceConfig
from eventform.config.models.filters import FilterConfig
from eventform.config.models.form import FormDefaults
from eventform.config.models.observability import ObservabilityConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that reads from an already-merged TOML mapping."""

    def __init__(self, settings_cls: type[BaseSettings], config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._config = config

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Get field value from TOML config."""
        value = self._config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        """Return the TOML config values."""
        return self._config.copy()


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{EVENTFORM_ENV}.toml (environment overrides)
    4. EVENTFORM_* environment variables (runtime overrides)
    5. Constructor arguments
    """

    model_config = SettingsConfigDict(
        env_prefix="EVENTFORM_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="eventform", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Logging level")

    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
    data: DataSourceConfig = Field(
        default_factory=DataSourceConfig,
        description="Reference dataset sources and cache",
    )
    form: FormDefaults = Field(
        default_factory=FormDefaults,
        description="Form defaults and operating modes",
    )
    filters: FilterConfig = Field(
        default_factory=FilterConfig,
        description="Allow-lists for cascading selectors",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (EVENTFORM_* environment variables)
        3. toml_settings (config/*.toml files)
        4. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, load_config()),
        )


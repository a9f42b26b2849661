"""Reference dataset source configuration."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from eventform.data.models import ResourceKey


class DataSourceConfig(BaseModel):
    """Where and how reference datasets are loaded.

    ``urls`` holds caller-supplied URLs per resource; they are tried before
    the built-in fallback URLs.
    """

    cache_enabled: bool = Field(default=False, description="Cache datasets in memory")
    cache_ttl_hours: float = Field(
        default=12,
        gt=0,
        description="Hours a cached dataset stays fresh",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout per request",
    )
    urls: dict[ResourceKey, str] = Field(
        default_factory=dict,
        description="Caller-supplied URL per resource (tried first)",
    )
    base_dir: Path = Field(
        default=Path("."),
        description="Directory that relative (non-HTTP) data URLs resolve against",
    )

    @field_validator("urls")
    @classmethod
    def drop_blank_urls(cls, value: dict[ResourceKey, str]) -> dict[ResourceKey, str]:
        """Blank entries mean 'no caller URL'."""
        return {key: url.strip() for key, url in value.items() if url and url.strip()}

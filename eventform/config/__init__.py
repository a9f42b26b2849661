"""Configuration loading for eventform.

Configuration is loaded from TOML files with environment variable
overrides. Every form builds its own ``Settings`` and hands it to its
components; there is no process-wide settings instance.

Usage:
    from eventform.config import load_settings

    settings = load_settings()
    ttl = settings.data.cache_ttl_hours
"""

from typing import Any

from eventform.config.settings import Settings


def load_settings(**overrides: Any) -> Settings:
    """Build a fresh Settings instance.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{EVENTFORM_ENV}.toml (environment overrides)
    4. EVENTFORM_* environment variables (runtime overrides)
    5. Keyword overrides passed to this function

    Returns:
        Settings instance with all configuration loaded and validated
    """
    return Settings(**overrides)


__all__ = ["Settings", "load_settings"]

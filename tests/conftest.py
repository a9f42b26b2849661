"""Shared test fixtures for the eventform test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
import structlog

from eventform.config import Settings
from eventform.config.models.data import DataSourceConfig
from eventform.data.cache import ResourceCache, shared_cache
from eventform.data.loader import DataLoader
from tests.factories.datasets import DatasetServer


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"EVENTFORM_DEBUG": "true"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def isolated_config(test_config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point configuration at an empty directory so repo files never leak in."""
    monkeypatch.setenv("EVENTFORM_CONFIG_DIR", str(test_config_dir))
    monkeypatch.setenv("EVENTFORM_ENV", "test")


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo structlog configuration made by a test (it binds the captured stderr)."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def reset_shared_cache() -> Generator[None, None, None]:
    """Clear the process-wide dataset cache before and after each test."""
    shared_cache().reset()
    yield
    shared_cache().reset()


class FakeClock:
    """Manually advanced clock (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 0, *, minutes: float = 0, hours: float = 0) -> None:
        self.now += seconds + minutes * 60 + hours * 3600


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResourceCache:
    return ResourceCache(clock=clock)


@pytest.fixture
def dataset_server() -> DatasetServer:
    """Fake HTTP server serving the reference datasets from the first fallback URLs."""
    return DatasetServer.with_defaults()


@pytest.fixture
def data_config(tmp_path: Path) -> DataSourceConfig:
    return DataSourceConfig(cache_enabled=True, cache_ttl_hours=1, base_dir=tmp_path)


@pytest.fixture
def make_loader(
    dataset_server: DatasetServer,
    cache: ResourceCache,
    data_config: DataSourceConfig,
) -> Callable[..., DataLoader]:
    """Build loaders backed by the fake server and the test cache."""

    def _make(config: DataSourceConfig | None = None, **kwargs: Any) -> DataLoader:
        client = httpx.AsyncClient(transport=dataset_server.transport())
        return DataLoader(
            config or data_config,
            client=client,
            cache=kwargs.pop("cache", cache),
            **kwargs,
        )

    return _make


@pytest.fixture
def settings(data_config: DataSourceConfig) -> Settings:
    return Settings(data=data_config)

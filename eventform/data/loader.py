"""Reference dataset loader with a fallback URL cascade.

``load_resource`` tries the caller-supplied URL for a dataset and then the
built-in fallback URLs, in order, until one returns JSON. Concurrent loads
of the same dataset share one fetch, and successful loads are cached for
``cache_ttl_hours`` when caching is enabled. The cache and the in-flight
registry are shared by every loader in the process.

Usage:
    async with DataLoader(settings.data) as loader:
        programs = await loader.load_resource(ResourceKey.PROGRAMS)
"""

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from eventform.data.cache import ResourceCache, shared_cache
from eventform.data.models import ResourceKey
from eventform.errors import DataSourceExhaustedError
from eventform.observability.logging import get_logger

if TYPE_CHECKING:
    from eventform.config.models.data import DataSourceConfig

RECURSOS_BASE = "https://www.javeriana.edu.co/recursosdb/1372208/10609114/"
CLOUD_BASE = "https://cloud.cx.javeriana.edu.co/"

# Built-in fallback URLs per dataset, in priority order
FALLBACK_URLS: dict[ResourceKey, tuple[str, ...]] = {
    ResourceKey.LOCATIONS: (
        RECURSOS_BASE + "ubicaciones.json",
        CLOUD_BASE + "paises.json",
        "../data/ubicaciones.json",
    ),
    ResourceKey.PREFIXES: (
        RECURSOS_BASE + "codigos_pais.json",
        CLOUD_BASE + "codigos_pais.Json",
        "../data/codigos_pais.json",
    ),
    ResourceKey.PROGRAMS: (
        RECURSOS_BASE + "programas.json",
        CLOUD_BASE + "Programas.json",
        "../data/programas.json",
    ),
    ResourceKey.PERIODS: (
        RECURSOS_BASE + "periodos.json",
        CLOUD_BASE + "periodos.json",
        "../data/periodos.json",
    ),
    ResourceKey.UNIVERSITIES: (
        RECURSOS_BASE + "universidades.json",
        CLOUD_BASE + "universidades.json",
        "../data/universidades.json",
    ),
    ResourceKey.COLLEGES: (
        "./data/Colegios PRD.json",
        "../data/Colegios PRD.json",
        RECURSOS_BASE + "Colegios+PRD.json",
        CLOUD_BASE + "Colegios+PRD.json",
    ),
}


def is_remote(url: str) -> bool:
    return url.startswith(("http://", "https://"))


class DataLoader:
    """Loads reference datasets for one form.

    Args:
        config: Dataset sources and cache settings
        client: HTTP client to use (created on first remote fetch if omitted)
        cache: Cache to use (the process-wide cache if omitted)
        logger: Logger bound to the owning form
    """

    def __init__(
        self,
        config: "DataSourceConfig",
        client: httpx.AsyncClient | None = None,
        cache: ResourceCache | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._cache = cache or shared_cache()
        self._logger = logger or get_logger(__name__)

    @property
    def cache(self) -> ResourceCache:
        return self._cache

    async def __aenter__(self) -> "DataLoader":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this loader created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def candidate_urls(self, key: ResourceKey) -> list[str]:
        """Caller URL first, then the built-in fallbacks, without duplicates."""
        urls: list[str] = []
        user_url = self.config.urls.get(key)
        if user_url:
            urls.append(user_url)
        urls.extend(FALLBACK_URLS.get(key, ()))
        return list(dict.fromkeys(urls))

    async def load_resource(self, key: ResourceKey) -> Any:
        """Load a dataset.

        Returns:
            The parsed JSON document

        Raises:
            DataSourceExhaustedError: If every candidate URL failed
        """
        pending = self._cache.in_flight(key)
        if pending is not None:
            self._logger.debug("dataset_load_joined", resource=key.value)
            return await asyncio.shield(pending)

        if self.config.cache_enabled:
            cached = self._cache.get(key, self.config.cache_ttl_hours)
            if cached is not None:
                return cached

        task = asyncio.ensure_future(self._load(key))
        self._cache.track(key, task)
        return await asyncio.shield(task)

    async def _load(self, key: ResourceKey) -> Any:
        try:
            return await self._load_with_fallback(key)
        finally:
            self._cache.release(key)

    async def _load_with_fallback(self, key: ResourceKey) -> Any:
        attempts: dict[str, str] = {}
        last_error: Exception | None = None

        for url in self.candidate_urls(key):
            try:
                self._logger.debug("dataset_load_attempt", resource=key.value, url=url)
                data = await self._fetch(url)
            except Exception as e:
                # Any failure (HTTP status, transport, malformed URL, bad JSON) moves on
                self._logger.warning(
                    "dataset_source_failed",
                    resource=key.value,
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                attempts[url] = str(e)
                last_error = e
                continue

            if self.config.cache_enabled:
                self._cache.set(key, data)
            self._logger.info("dataset_loaded", resource=key.value, url=url)
            return data

        self._logger.error(
            "dataset_sources_exhausted",
            resource=key.value,
            attempts=len(attempts),
        )
        raise DataSourceExhaustedError(key.value, attempts, last_error) from last_error

    async def _fetch(self, url: str) -> Any:
        if is_remote(url):
            response = await self._http().get(url)
            response.raise_for_status()
            return response.json()
        return self._read_local(url)

    def _read_local(self, url: str) -> Any:
        path = Path(url)
        if not path.is_absolute():
            path = Path(self.config.base_dir) / path
        with path.open(encoding="utf-8") as f:
            return json.load(f)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

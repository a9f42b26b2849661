"""Tests for the dataset loader."""

import asyncio
import json

import pytest

from eventform.config.models.data import DataSourceConfig
from eventform.data import FALLBACK_URLS, ResourceKey
from eventform.errors import DataSourceExhaustedError
from tests.factories.datasets import PROGRAMS, first_remote_url

USER_URL = "https://cdn.example.com/programas.json"


def remote_fallbacks(key: ResourceKey) -> list[str]:
    return [url for url in FALLBACK_URLS[key] if url.startswith("http")]


class TestCandidateUrls:
    def test_user_url_first(self, make_loader, tmp_path) -> None:
        config = DataSourceConfig(urls={"programs": USER_URL}, base_dir=tmp_path)
        loader = make_loader(config)

        urls = loader.candidate_urls(ResourceKey.PROGRAMS)
        assert urls[0] == USER_URL
        assert urls[1:] == list(FALLBACK_URLS[ResourceKey.PROGRAMS])

    def test_duplicates_removed(self, make_loader, tmp_path) -> None:
        builtin = FALLBACK_URLS[ResourceKey.PROGRAMS][0]
        config = DataSourceConfig(urls={"programs": builtin}, base_dir=tmp_path)

        urls = make_loader(config).candidate_urls(ResourceKey.PROGRAMS)
        assert urls == list(FALLBACK_URLS[ResourceKey.PROGRAMS])

    def test_blank_user_url_ignored(self, make_loader, tmp_path) -> None:
        config = DataSourceConfig(urls={"programs": "  "}, base_dir=tmp_path)

        urls = make_loader(config).candidate_urls(ResourceKey.PROGRAMS)
        assert urls == list(FALLBACK_URLS[ResourceKey.PROGRAMS])


class TestFallback:
    @pytest.mark.asyncio
    async def test_first_success_wins(self, make_loader, dataset_server) -> None:
        loader = make_loader()

        data = await loader.load_resource(ResourceKey.PROGRAMS)

        assert data == PROGRAMS
        assert dataset_server.requests == [first_remote_url(ResourceKey.PROGRAMS)]

    @pytest.mark.asyncio
    async def test_falls_through_in_order(self, make_loader, dataset_server, tmp_path) -> None:
        """A failing caller URL and first built-in URL fall through to the second."""
        first, second = remote_fallbacks(ResourceKey.PROGRAMS)[:2]
        dataset_server.fail(USER_URL)
        dataset_server.fail(first, status=503)
        dataset_server.serve(second, {"GRAD": []})
        config = DataSourceConfig(urls={"programs": USER_URL}, base_dir=tmp_path)

        data = await make_loader(config).load_resource(ResourceKey.PROGRAMS)

        assert data == {"GRAD": []}
        assert dataset_server.requests == [USER_URL, first, second]

    @pytest.mark.asyncio
    async def test_malformed_caller_url_falls_through(
        self, make_loader, dataset_server, tmp_path
    ) -> None:
        """A URL httpx refuses to send is recorded and the fallbacks still run."""
        bad_url = "http://cdn\x00example.com/programas.json"
        dataset_server.serve(first_remote_url(ResourceKey.PROGRAMS), {"GRAD": []})
        config = DataSourceConfig(urls={"programs": bad_url}, base_dir=tmp_path)

        data = await make_loader(config).load_resource(ResourceKey.PROGRAMS)

        assert data == {"GRAD": []}
        assert dataset_server.requests == [first_remote_url(ResourceKey.PROGRAMS)]

    @pytest.mark.asyncio
    async def test_malformed_url_listed_in_attempts(
        self, make_loader, dataset_server, tmp_path
    ) -> None:
        bad_url = "http://cdn\x00example.com/codigos.json"
        dataset_server.routes.clear()
        config = DataSourceConfig(urls={"prefixes": bad_url}, base_dir=tmp_path)

        with pytest.raises(DataSourceExhaustedError) as exc_info:
            await make_loader(config).load_resource(ResourceKey.PREFIXES)

        assert bad_url in exc_info.value.attempts

    @pytest.mark.asyncio
    async def test_invalid_json_falls_through(self, make_loader, dataset_server) -> None:
        first, second = remote_fallbacks(ResourceKey.PERIODS)[:2]
        dataset_server.serve_raw(first, b"<html>maintenance</html>")
        dataset_server.serve(second, {"PREG": {}})

        data = await make_loader().load_resource(ResourceKey.PERIODS)

        assert data == {"PREG": {}}

    @pytest.mark.asyncio
    async def test_local_file(self, make_loader, dataset_server, tmp_path) -> None:
        """Relative paths are read from base_dir."""
        (tmp_path / "data").mkdir()
        (tmp_path / "data" / "Colegios PRD.json").write_text(
            json.dumps({"cuentasInstitucionales": []}), encoding="utf-8"
        )

        data = await make_loader().load_resource(ResourceKey.COLLEGES)

        assert data == {"cuentasInstitucionales": []}
        assert dataset_server.requests == []

    @pytest.mark.asyncio
    async def test_exhausted(self, make_loader, dataset_server) -> None:
        dataset_server.routes.clear()

        with pytest.raises(DataSourceExhaustedError) as exc_info:
            await make_loader().load_resource(ResourceKey.PREFIXES)

        error = exc_info.value
        assert error.resource == "prefixes"
        assert list(error.attempts) == list(FALLBACK_URLS[ResourceKey.PREFIXES])
        assert error.__cause__ is not None

    @pytest.mark.asyncio
    async def test_failures_not_cached(self, make_loader, dataset_server, cache) -> None:
        dataset_server.routes.clear()
        with pytest.raises(DataSourceExhaustedError):
            await make_loader().load_resource(ResourceKey.PREFIXES)

        assert ResourceKey.PREFIXES not in cache
        assert cache.pending() == []


class TestCaching:
    @pytest.mark.asyncio
    async def test_second_load_served_from_cache(self, make_loader, dataset_server) -> None:
        loader = make_loader()
        await loader.load_resource(ResourceKey.PROGRAMS)
        await loader.load_resource(ResourceKey.PROGRAMS)

        assert len(dataset_server.requests) == 1

    @pytest.mark.asyncio
    async def test_cache_shared_between_loaders(self, make_loader, dataset_server) -> None:
        await make_loader().load_resource(ResourceKey.PROGRAMS)
        await make_loader().load_resource(ResourceKey.PROGRAMS)

        assert len(dataset_server.requests) == 1

    @pytest.mark.asyncio
    async def test_expired_entry_refetched(self, make_loader, dataset_server, clock) -> None:
        loader = make_loader()
        await loader.load_resource(ResourceKey.PROGRAMS)
        clock.advance(minutes=61)
        await loader.load_resource(ResourceKey.PROGRAMS)

        assert len(dataset_server.requests) == 2

    @pytest.mark.asyncio
    async def test_cache_disabled(self, make_loader, dataset_server, cache, tmp_path) -> None:
        loader = make_loader(DataSourceConfig(cache_enabled=False, base_dir=tmp_path))
        await loader.load_resource(ResourceKey.PROGRAMS)
        await loader.load_resource(ResourceKey.PROGRAMS)

        assert len(dataset_server.requests) == 2
        assert len(cache) == 0


class TestInFlightDedup:
    @pytest.mark.asyncio
    async def test_concurrent_loads_share_one_fetch(self, make_loader, dataset_server) -> None:
        dataset_server.delay = 0.01
        loaders = [make_loader(), make_loader()]

        results = await asyncio.gather(
            loaders[0].load_resource(ResourceKey.PROGRAMS),
            loaders[1].load_resource(ResourceKey.PROGRAMS),
            loaders[0].load_resource(ResourceKey.PROGRAMS),
        )

        assert results == [PROGRAMS, PROGRAMS, PROGRAMS]
        assert dataset_server.counts[first_remote_url(ResourceKey.PROGRAMS)] == 1

    @pytest.mark.asyncio
    async def test_dedup_without_cache(self, make_loader, dataset_server, tmp_path) -> None:
        dataset_server.delay = 0.01
        loader = make_loader(DataSourceConfig(cache_enabled=False, base_dir=tmp_path))

        await asyncio.gather(
            loader.load_resource(ResourceKey.PERIODS),
            loader.load_resource(ResourceKey.PERIODS),
        )

        assert len(dataset_server.requests) == 1

    @pytest.mark.asyncio
    async def test_joiners_share_failure(self, make_loader, dataset_server) -> None:
        dataset_server.routes.clear()
        dataset_server.delay = 0.01
        loader = make_loader()

        results = await asyncio.gather(
            loader.load_resource(ResourceKey.PREFIXES),
            loader.load_resource(ResourceKey.PREFIXES),
            return_exceptions=True,
        )

        assert all(isinstance(r, DataSourceExhaustedError) for r in results)
        assert len(dataset_server.requests) == len(remote_fallbacks(ResourceKey.PREFIXES))

    @pytest.mark.asyncio
    async def test_pending_cleared_after_load(self, make_loader, cache) -> None:
        await make_loader().load_resource(ResourceKey.PROGRAMS)
        assert cache.pending() == []


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_borrowed_client_left_open(self, make_loader) -> None:
        loader = make_loader()
        await loader.close()
        assert not loader._client.is_closed

    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path) -> None:
        from eventform.data import DataLoader

        async with DataLoader(DataSourceConfig(base_dir=tmp_path)) as loader:
            client = loader._http()
        assert client.is_closed

"""
Tests for the composed registration flow.

Covers both registration modes: atomic (allocation and insert in one
transaction) and two-step (allocation committed before the insert).
"""

import asyncio

import pytest

from shorturl.core.exceptions import (
    CodeNotFoundError,
    DuplicateCodeError,
    InvalidURLError,
    StorageUnavailableError,
)
from shorturl.services.counter_allocator import CounterAllocator
from shorturl.services.url_service import URLShorteningService
from shorturl.services.url_store import UrlMappingStore


class TestShortenScenario:

    @pytest.mark.asyncio
    async def test_allocate_register_resolve(self, session):
        allocator = CounterAllocator(session)
        store = UrlMappingStore(session)

        code = await allocator.allocate_next()
        assert code == 1

        await store.register(code, "https://example.com")
        assert (await store.resolve(1)).original_url == "https://example.com"

        assert await allocator.allocate_next() == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("atomic", [True, False])
    async def test_shorten_assigns_sequential_codes(self, session, sample_urls, atomic):
        service = URLShorteningService(session, atomic=atomic)

        entries = [await service.shorten(url) for url in sample_urls]

        assert [entry.code for entry in entries] == [1, 2, 3]
        for entry, url in zip(entries, sample_urls):
            assert (await service.resolve(str(entry.code))).original_url == url

    @pytest.mark.asyncio
    async def test_same_url_gets_a_new_code_each_time(self, session):
        service = URLShorteningService(session)

        first = await service.shorten("https://example.com")
        second = await service.shorten("https://example.com")

        assert (first.code, second.code) == (1, 2)

    @pytest.mark.asyncio
    async def test_resolve_unknown_code(self, session):
        with pytest.raises(CodeNotFoundError):
            await URLShorteningService(session).resolve("999")

    @pytest.mark.asyncio
    async def test_empty_url_does_not_consume_a_code(self, session):
        service = URLShorteningService(session, atomic=False)

        with pytest.raises(InvalidURLError):
            await service.shorten("")

        assert (await service.shorten("https://example.com")).code == 1


class TestConcurrentRegistration:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("atomic", [True, False])
    async def test_hundred_concurrent_flows_are_gapless(self, session_maker, atomic):
        async def shorten(i: int) -> int:
            async with session_maker() as session:
                entry = await URLShorteningService(session, atomic=atomic).shorten(
                    f"https://example.com/page/{i}"
                )
                return entry.code

        codes = await asyncio.gather(*(shorten(i) for i in range(100)))

        assert sorted(codes) == list(range(1, 101))

        async with session_maker() as session:
            service = URLShorteningService(session)
            for i, code in enumerate(codes):
                entry = await service.resolve(code)
                assert entry.original_url == f"https://example.com/page/{i}"


class TestRegistrationFailures:

    @pytest.mark.asyncio
    async def test_two_step_failure_leaves_a_gap(self, session, monkeypatch):
        async def failing_register(self, code, original_url):
            raise StorageUnavailableError("simulated outage")

        service = URLShorteningService(session, atomic=False)

        monkeypatch.setattr(UrlMappingStore, "register", failing_register)
        with pytest.raises(StorageUnavailableError):
            await service.shorten("https://example.com/lost")
        monkeypatch.undo()

        entry = await service.shorten("https://example.com/kept")

        assert entry.code == 2
        with pytest.raises(CodeNotFoundError):
            await service.resolve(1)

    @pytest.mark.asyncio
    async def test_atomic_failure_gives_the_code_back(self, session, monkeypatch):
        async def failing_add(self, code, original_url):
            raise StorageUnavailableError("simulated outage")

        service = URLShorteningService(session, atomic=True)

        monkeypatch.setattr(UrlMappingStore, "add", failing_add)
        with pytest.raises(StorageUnavailableError):
            await service.shorten("https://example.com/lost")
        monkeypatch.undo()

        entry = await service.shorten("https://example.com/kept")

        assert entry.code == 1

    @pytest.mark.asyncio
    async def test_atomic_duplicate_rolls_back_the_counter(self, session):
        await UrlMappingStore(session).register(1, "https://example.com/preexisting")
        service = URLShorteningService(session, atomic=True)

        with pytest.raises(DuplicateCodeError):
            await service.shorten("https://example.com/new")

        assert await CounterAllocator(session).peek() == 1
        assert (await service.resolve(1)).original_url == "https://example.com/preexisting"

    @pytest.mark.asyncio
    async def test_two_step_duplicate_consumes_the_code(self, session):
        await UrlMappingStore(session).register(1, "https://example.com/preexisting")
        service = URLShorteningService(session, atomic=False)

        with pytest.raises(DuplicateCodeError):
            await service.shorten("https://example.com/new")

        assert (await service.shorten("https://example.com/new")).code == 2

"""Integration tests for the SQLite catalog store."""

from collections.abc import Awaitable, Callable
from pathlib import Path

import pytest

from game_resolver.catalog.models import CatalogEntry
from game_resolver.catalog.store import CatalogStore, StoreError, escape_like


class TestCatalogStore:
    """Tests against a temporary database file."""

    @pytest.mark.asyncio
    async def test_initialize_creates_parent_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "catalog.db"
        store = CatalogStore(f"sqlite+aiosqlite:///{db_path}")
        try:
            await store.initialize()
            assert db_path.parent.is_dir()
            assert await store.count() == 0
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_upsert_replaces_by_id(self, store: CatalogStore) -> None:
        async with store.begin() as conn:
            await store.upsert_batch(conn, [CatalogEntry(10, "Counter Strike", 1)])
        async with store.begin() as conn:
            written = await store.upsert_batch(conn, [CatalogEntry(10, "Counter-Strike", 2)])

        assert written == 1
        assert await store.snapshot() == [CatalogEntry(10, "Counter-Strike", 2)]

    @pytest.mark.asyncio
    async def test_failed_transaction_rolls_back(self, store: CatalogStore) -> None:
        with pytest.raises(RuntimeError):
            async with store.begin() as conn:
                await store.upsert_batch(conn, [CatalogEntry(570, "Dota 2", 1)])
                raise RuntimeError("abort")

        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_prune_older_than(self, store: CatalogStore) -> None:
        async with store.begin() as conn:
            await store.upsert_batch(
                conn,
                [CatalogEntry(1, "Old", 100), CatalogEntry(2, "Current", 200)],
            )
            pruned = await store.prune_older_than(conn, 200)

        assert pruned == 1
        assert [e.id for e in await store.snapshot()] == [2]

    @pytest.mark.asyncio
    async def test_sync_metadata_roundtrip(self, store: CatalogStore) -> None:
        assert await store.get_sync_metadata() is None

        await store.set_last_sync(1_700_000_000_000)
        await store.set_last_sync(1_700_000_500_000)

        metadata = await store.get_sync_metadata()
        assert metadata is not None
        assert metadata.last_sync_timestamp == 1_700_000_500_000

    @pytest.mark.asyncio
    async def test_find_candidates_case_insensitive_shortest_first(
        self,
        store: CatalogStore,
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({620: "Portal 2", 400: "PORTAL", 317400: "Portal Stories: Mel", 570: "Dota 2"})

        candidates = await store.find_candidates(["%portal%"], limit=10)

        assert [c.id for c in candidates] == [400, 620, 317400]

    @pytest.mark.asyncio
    async def test_find_candidates_limit_and_or(
        self,
        store: CatalogStore,
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({1: "Alpha", 2: "Beta", 3: "Gamma"})

        both = await store.find_candidates(["%alpha%", "%beta%"], limit=10)
        limited = await store.find_candidates(["%a%"], limit=2)

        assert {c.id for c in both} == {1, 2}
        assert len(limited) == 2

    @pytest.mark.asyncio
    async def test_find_candidates_ranks_by_first_matching_pattern(
        self,
        store: CatalogStore,
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({1: "Sim Simulator", 2: "Bus Simulator", 3: "Farming Simulator 22"})

        candidates = await store.find_candidates(
            ["%farming simulator 22%", "%simulator%"], limit=2
        )

        assert [c.id for c in candidates] == [3, 1]

    @pytest.mark.asyncio
    async def test_like_metacharacters_escaped(
        self,
        store: CatalogStore,
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({1: "100% Orange Juice", 2: "1000 Cuts"})

        candidates = await store.find_candidates([f"%{escape_like('100%')}%"], limit=10)

        assert [c.id for c in candidates] == [1]

    @pytest.mark.asyncio
    async def test_get_entry(
        self,
        store: CatalogStore,
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({1245620: "ELDEN RING"})

        entry = await store.get_entry(1245620)
        assert entry is not None
        assert entry.name == "ELDEN RING"
        assert await store.get_entry(1) is None

    @pytest.mark.asyncio
    async def test_reads_fail_as_store_error(self, tmp_path: Path) -> None:
        store = CatalogStore(f"sqlite+aiosqlite:///{tmp_path / 'uninitialized.db'}")
        try:
            with pytest.raises(StoreError) as exc_info:
                await store.count()
            assert exc_info.value.operation == "count"
        finally:
            await store.close()

"""Shared fixtures."""

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from pathlib import Path

import pytest
import pytest_asyncio

from game_resolver.catalog.models import CatalogEntry
from game_resolver.catalog.store import CatalogStore
from game_resolver.config import get_settings



@pytest.fixture(autouse=True)
def mock_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Provide the required API key and a fresh settings cache for every test."""
    monkeypatch.setenv("STEAM_API_KEY", "test_api_key_123")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> AsyncIterator[CatalogStore]:
    """Empty catalog store backed by a temporary SQLite file."""
    catalog = CatalogStore(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await catalog.initialize()
    yield catalog
    await catalog.close()


@pytest.fixture
def seed(store: CatalogStore) -> Callable[[dict[int, str]], Awaitable[None]]:
    """Write ``{id: name}`` rows straight into the store."""

    async def _seed(rows: dict[int, str]) -> None:
        async with store.begin() as conn:
            await store.upsert_batch(
                conn,
                [CatalogEntry(id=app_id, name=name, last_updated=0) for app_id, name in rows.items()],
            )

    return _seed

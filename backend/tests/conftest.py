from __future__ import annotations

import sys
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import inventory_service.models  # noqa: E402,F401
from inventory_service.core.config import Settings, get_database_settings, get_settings  # noqa: E402
from inventory_service.core.db import create_session_factory  # noqa: E402
from inventory_service.core.enums import StoreBackend  # noqa: E402
from inventory_service.main import create_app  # noqa: E402
from inventory_service.models.base import Base  # noqa: E402
from inventory_service.services.inventory import InventoryStore  # noqa: E402
from inventory_service.services.memory_store import MemoryInventoryStore  # noqa: E402
from inventory_service.services.photos import PhotoStorage  # noqa: E402
from inventory_service.services.sql_store import SqlInventoryStore  # noqa: E402


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Iterator[Settings]:
    db_path = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    for name in ("INVENTORY_HOST", "INVENTORY_PORT", "INVENTORY_CACHE_DIR", "INVENTORY_STORE", "INVENTORY_PUBLIC_URL", "CORS_ORIGINS", "DB_AUTO_CREATE_SCHEMA"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_database_settings.cache_clear()

    cache_dir = tmp_path / "cache"
    cache_dir.mkdir(parents=True, exist_ok=True)
    yield Settings(host="localhost", port=3000, cache_dir=cache_dir)

    get_settings.cache_clear()
    get_database_settings.cache_clear()


@pytest.fixture
def photo_storage(settings: Settings) -> PhotoStorage:
    return PhotoStorage(settings.cache_dir)


@pytest_asyncio.fixture
async def db_engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(settings.sqlalchemy_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(db_engine)


@pytest.fixture
def memory_store(photo_storage: PhotoStorage) -> MemoryInventoryStore:
    return MemoryInventoryStore(photo_storage)


@pytest.fixture
def sql_store(
    session_factory: async_sessionmaker[AsyncSession],
    photo_storage: PhotoStorage,
) -> SqlInventoryStore:
    return SqlInventoryStore(session_factory, photo_storage)


@pytest_asyncio.fixture(params=[StoreBackend.MEMORY, StoreBackend.SQL])
async def store(request, settings: Settings, photo_storage: PhotoStorage) -> AsyncIterator[InventoryStore]:
    """Runs the test once per storage backend."""
    if request.param == StoreBackend.MEMORY:
        yield MemoryInventoryStore(photo_storage)
        return

    engine = create_async_engine(settings.sqlalchemy_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    sql = SqlInventoryStore(create_session_factory(engine), photo_storage, engine=engine)

    yield sql

    await sql.close()


@pytest_asyncio.fixture
async def client(settings: Settings, store: InventoryStore) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings, store=store)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from inventory_service.core.errors import NotFoundError, StorageError
from inventory_service.models.inventory_item import InventoryItem
from inventory_service.services.inventory import clean_name, is_valid_item_id
from inventory_service.services.photos import PhotoStorage, PhotoUpload


logger = logging.getLogger(__name__)


class SqlInventoryStore:
    """
    Inventory kept in the `inventory` table.

    Every operation runs in its own transaction. Mutations lock the row they
    checked (`SELECT ... FOR UPDATE`) so a concurrent delete cannot slip in
    between the existence check and the write.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        photos: PhotoStorage,
        *,
        engine: AsyncEngine | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.photos = photos
        self.engine = engine

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session, session.begin():
                yield session
        except SQLAlchemyError as e:
            logger.exception("Inventory database operation failed")
            raise StorageError("Database operation failed") from e

    @staticmethod
    async def _require(session: AsyncSession, item_id: int, *, for_update: bool = False) -> InventoryItem:
        # Out-of-range ids would overflow the driver's integer binding.
        if not is_valid_item_id(item_id):
            raise NotFoundError("Inventory item not found")
        stmt = select(InventoryItem).where(InventoryItem.id == item_id)
        if for_update:
            stmt = stmt.with_for_update()
        item = (await session.execute(stmt)).scalar_one_or_none()
        if item is None:
            raise NotFoundError("Inventory item not found")
        return item

    async def register(
        self,
        *,
        name: str | None,
        description: str | None = None,
        photo: PhotoUpload | None = None,
    ) -> InventoryItem:
        inventory_name = clean_name(name)
        photo_ref = self.photos.save(photo) if photo is not None else None

        try:
            async with self._transaction() as session:
                item = InventoryItem(inventory_name=inventory_name, description=description or "", photo=photo_ref)
                session.add(item)
                await session.flush()
                await session.refresh(item)
        except StorageError:
            if photo_ref:
                self.photos.delete(photo_ref)
            raise

        logger.info("Registered inventory item %s (%s)", item.id, item.inventory_name)
        return item

    async def list_items(self) -> list[InventoryItem]:
        async with self._transaction() as session:
            rows = (await session.execute(select(InventoryItem).order_by(InventoryItem.id.asc()))).scalars().all()
        return list(rows)

    async def get(self, item_id: int) -> InventoryItem:
        async with self._transaction() as session:
            return await self._require(session, item_id)

    async def update(
        self,
        item_id: int,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> InventoryItem:
        async with self._transaction() as session:
            item = await self._require(session, item_id, for_update=True)
            if name is not None:
                item.inventory_name = clean_name(name)
            if description is not None:
                item.description = description
            await session.flush()
            await session.refresh(item)
        return item

    async def replace_photo(self, item_id: int, photo: PhotoUpload | None) -> str | None:
        new_ref: str | None = None
        try:
            async with self._transaction() as session:
                item = await self._require(session, item_id, for_update=True)
                if item.photo:
                    self.photos.delete(item.photo)
                if photo is not None:
                    new_ref = self.photos.save(photo)
                item.photo = new_ref
                await session.flush()
        except StorageError:
            if new_ref:
                self.photos.delete(new_ref)
            raise

        logger.info("Replaced photo of inventory item %s", item_id)
        return new_ref

    async def delete(self, item_id: int) -> None:
        async with self._transaction() as session:
            item = await self._require(session, item_id, for_update=True)
            photo_ref = item.photo
            await session.delete(item)

        if photo_ref:
            self.photos.delete(photo_ref)
        logger.info("Deleted inventory item %s", item_id)

    async def read_photo(self, item_id: int) -> bytes:
        item = await self.get(item_id)
        if not item.photo:
            raise NotFoundError("Photo not found")
        return self.photos.read(item.photo)

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

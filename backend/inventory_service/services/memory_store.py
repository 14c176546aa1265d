from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from inventory_service.core.errors import NotFoundError
from inventory_service.services.inventory import InventoryRecord, clean_name
from inventory_service.services.photos import PhotoStorage, PhotoUpload


logger = logging.getLogger(__name__)


class MemoryInventoryStore:
    """
    Inventory kept in process memory; everything is lost on restart.

    Ids come from a counter starting at 1 and are never handed out twice, even
    after deletes. One lock guards the collection and the counter.
    """

    def __init__(self, photos: PhotoStorage) -> None:
        self.photos = photos
        self._items: dict[int, InventoryRecord] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def _require(self, item_id: int) -> InventoryRecord:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError("Inventory item not found")
        return item

    async def register(
        self,
        *,
        name: str | None,
        description: str | None = None,
        photo: PhotoUpload | None = None,
    ) -> InventoryRecord:
        inventory_name = clean_name(name)
        photo_ref = self.photos.save(photo) if photo is not None else None

        async with self._lock:
            item = InventoryRecord(
                id=self._next_id,
                inventory_name=inventory_name,
                description=description or "",
                photo=photo_ref,
            )
            self._next_id += 1
            self._items[item.id] = item

        logger.info("Registered inventory item %s (%s)", item.id, item.inventory_name)
        return replace(item)

    async def list_items(self) -> list[InventoryRecord]:
        async with self._lock:
            return [replace(item) for item in self._items.values()]

    async def get(self, item_id: int) -> InventoryRecord:
        async with self._lock:
            return replace(self._require(item_id))

    async def update(
        self,
        item_id: int,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> InventoryRecord:
        async with self._lock:
            item = self._require(item_id)
            if name is not None:
                item.inventory_name = clean_name(name)
            if description is not None:
                item.description = description
            return replace(item)

    async def replace_photo(self, item_id: int, photo: PhotoUpload | None) -> str | None:
        async with self._lock:
            item = self._require(item_id)
            if item.photo:
                self.photos.delete(item.photo)
                item.photo = None
            if photo is not None:
                item.photo = self.photos.save(photo)
            photo_ref = item.photo

        logger.info("Replaced photo of inventory item %s", item_id)
        return photo_ref

    async def delete(self, item_id: int) -> None:
        async with self._lock:
            item = self._require(item_id)
            del self._items[item_id]

        if item.photo:
            self.photos.delete(item.photo)
        logger.info("Deleted inventory item %s", item_id)

    async def read_photo(self, item_id: int) -> bytes:
        async with self._lock:
            photo_ref = self._require(item_id).photo
        if not photo_ref:
            raise NotFoundError("Photo not found")
        return self.photos.read(photo_ref)

    async def close(self) -> None:
        return None

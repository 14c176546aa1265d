from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from inventory_service.core.errors import NotFoundError, ValidationError
from inventory_service.services.photos import PhotoUpload


class InventoryItemLike(Protocol):
    id: int
    inventory_name: str
    description: str
    photo: str | None


@dataclass
class InventoryRecord:
    """In-memory counterpart of the `inventory` table row."""

    id: int
    inventory_name: str
    description: str = ""
    photo: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class SearchHit:
    item: InventoryItemLike
    description: str


class InventoryStore(Protocol):
    async def register(
        self,
        *,
        name: str | None,
        description: str | None = None,
        photo: PhotoUpload | None = None,
    ) -> InventoryItemLike: ...

    async def list_items(self) -> list[InventoryItemLike]: ...

    async def get(self, item_id: int) -> InventoryItemLike: ...

    async def update(
        self,
        item_id: int,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> InventoryItemLike: ...

    async def replace_photo(self, item_id: int, photo: PhotoUpload | None) -> str | None: ...

    async def delete(self, item_id: int) -> None: ...

    async def read_photo(self, item_id: int) -> bytes: ...

    async def close(self) -> None: ...


MAX_NAME_LENGTH = 255

# Ids live in a signed 32-bit INTEGER column; anything outside can never match.
MAX_ITEM_ID = 2**31 - 1

_ITEM_ID_PATTERN = re.compile(r"[+-]?\d+")


def is_valid_item_id(item_id: int) -> bool:
    return 1 <= item_id <= MAX_ITEM_ID


def parse_item_id(raw: str | None) -> int:
    """Parse an id taken from a URL or form; anything that cannot name an item is not found."""
    cleaned = (raw or "").strip()
    if not _ITEM_ID_PATTERN.fullmatch(cleaned):
        raise NotFoundError("Inventory item not found")
    try:
        item_id = int(cleaned)
    except ValueError as e:  # beyond the interpreter's digit limit
        raise NotFoundError("Inventory item not found") from e
    if not is_valid_item_id(item_id):
        raise NotFoundError("Inventory item not found")
    return item_id


def clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("inventory_name is required")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValidationError(f"inventory_name must be at most {MAX_NAME_LENGTH} characters")
    return cleaned


def photo_url(base_url: str, item: InventoryItemLike) -> str | None:
    if not item.photo:
        return None
    return f"{base_url}/inventory/{item.id}/photo"


async def search(
    store: InventoryStore,
    item_id: int,
    *,
    include_photo_link: bool,
    base_url: str,
) -> SearchHit:
    """Look an item up by id; optionally append its photo link to the returned description."""
    item = await store.get(item_id)
    description = item.description
    link = photo_url(base_url, item)
    if include_photo_link and link:
        description = f"{description}\n\nPhoto: {link}"
    return SearchHit(item=item, description=description)

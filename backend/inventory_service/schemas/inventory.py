from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, model_serializer

from inventory_service.services.inventory import InventoryItemLike, SearchHit, photo_url


class InventoryItemOut(BaseModel):
    id: int
    inventory_name: str
    description: str
    photo_url: str | None = None
    # Only the relational store keeps timestamps; omitted from the payload otherwise.
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_serializer(mode="wrap")
    def _drop_missing_timestamps(self, handler):
        data = handler(self)
        for key in ("created_at", "updated_at"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

    @classmethod
    def from_item(cls, item: InventoryItemLike, *, base_url: str) -> "InventoryItemOut":
        return cls(
            id=item.id,
            inventory_name=item.inventory_name,
            description=item.description,
            photo_url=photo_url(base_url, item),
            created_at=getattr(item, "created_at", None),
            updated_at=getattr(item, "updated_at", None),
        )

    @classmethod
    def from_search_hit(cls, hit: SearchHit, *, base_url: str) -> "InventoryItemOut":
        out = cls.from_item(hit.item, base_url=base_url)
        out.description = hit.description
        return out


class InventoryItemUpdate(BaseModel):
    inventory_name: str | None = None
    description: str | None = None


class InventoryItemEnvelope(BaseModel):
    message: str
    item: InventoryItemOut


class PhotoReplaceOut(BaseModel):
    message: str
    photo_url: str | None


class MessageOut(BaseModel):
    message: str

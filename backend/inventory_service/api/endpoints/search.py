from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException

from inventory_service.api.deps import get_app_settings, get_store, http_error
from inventory_service.core.config import Settings
from inventory_service.core.errors import InventoryError
from inventory_service.schemas.inventory import InventoryItemOut
from inventory_service.services.inventory import InventoryStore, parse_item_id, search


router = APIRouter()

PHOTO_FLAG_VALUES = {"on", "true"}


@router.post("/search", response_model=InventoryItemOut)
async def search_item(
    raw_item_id: str | None = Form(None, alias="id"),
    has_photo: str | None = Form(None),
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> InventoryItemOut:
    """
    Look an item up by id (form-encoded, as sent by SearchForm.html).

    With `has_photo` checked the photo link is appended to the returned description.
    """
    raw_id = (raw_item_id or "").strip()
    if not raw_id:
        raise HTTPException(status_code=400, detail="id is required")
    # The checkbox posts "on"; other values are taken literally.
    include_photo_link = has_photo in PHOTO_FLAG_VALUES
    try:
        item_id = parse_item_id(raw_id)
        hit = await search(
            store,
            item_id,
            include_photo_link=include_photo_link,
            base_url=settings.public_base_url,
        )
    except InventoryError as e:
        raise http_error(e) from e
    return InventoryItemOut.from_search_hit(hit, base_url=settings.public_base_url)

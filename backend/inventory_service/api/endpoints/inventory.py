from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from inventory_service.api.deps import get_app_settings, get_store, http_error, path_item_id, read_upload
from inventory_service.core.config import Settings
from inventory_service.core.errors import InventoryError
from inventory_service.schemas.inventory import (
    InventoryItemEnvelope,
    InventoryItemOut,
    InventoryItemUpdate,
    MessageOut,
    PhotoReplaceOut,
)
from inventory_service.services.inventory import InventoryStore


router = APIRouter()


@router.post("/register", response_model=InventoryItemEnvelope, status_code=status.HTTP_201_CREATED)
async def register_item(
    inventory_name: str | None = Form(None),
    description: str = Form(""),
    photo: UploadFile | None = File(None),
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> InventoryItemEnvelope:
    try:
        item = await store.register(name=inventory_name, description=description, photo=await read_upload(photo))
    except InventoryError as e:
        raise http_error(e) from e
    return InventoryItemEnvelope(
        message="Inventory item registered",
        item=InventoryItemOut.from_item(item, base_url=settings.public_base_url),
    )


@router.get("/inventory", response_model=list[InventoryItemOut])
async def list_items(
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> list[InventoryItemOut]:
    try:
        items = await store.list_items()
    except InventoryError as e:
        raise http_error(e) from e
    return [InventoryItemOut.from_item(item, base_url=settings.public_base_url) for item in items]


@router.get("/inventory/{item_id}", response_model=InventoryItemOut)
async def get_item(
    item_id: int = Depends(path_item_id),
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> InventoryItemOut:
    try:
        item = await store.get(item_id)
    except InventoryError as e:
        raise http_error(e) from e
    return InventoryItemOut.from_item(item, base_url=settings.public_base_url)


@router.put("/inventory/{item_id}", response_model=InventoryItemEnvelope)
async def update_item(
    data: InventoryItemUpdate,
    item_id: int = Depends(path_item_id),
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> InventoryItemEnvelope:
    try:
        item = await store.update(item_id, name=data.inventory_name, description=data.description)
    except InventoryError as e:
        raise http_error(e) from e
    return InventoryItemEnvelope(
        message="Inventory item updated",
        item=InventoryItemOut.from_item(item, base_url=settings.public_base_url),
    )


@router.get("/inventory/{item_id}/photo", response_class=Response)
async def get_item_photo(item_id: int = Depends(path_item_id), store: InventoryStore = Depends(get_store)) -> Response:
    try:
        content = await store.read_photo(item_id)
    except InventoryError as e:
        raise http_error(e) from e
    return Response(content=content, media_type="image/jpeg")


@router.put("/inventory/{item_id}/photo", response_model=PhotoReplaceOut)
async def replace_item_photo(
    item_id: int = Depends(path_item_id),
    photo: UploadFile | None = File(None),
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> PhotoReplaceOut:
    try:
        photo_ref = await store.replace_photo(item_id, await read_upload(photo))
    except InventoryError as e:
        raise http_error(e) from e

    url = f"{settings.public_base_url}/inventory/{item_id}/photo" if photo_ref else None
    return PhotoReplaceOut(message="Photo updated", photo_url=url)


@router.delete("/inventory/{item_id}", response_model=MessageOut)
async def delete_item(item_id: int = Depends(path_item_id), store: InventoryStore = Depends(get_store)) -> MessageOut:
    try:
        await store.delete(item_id)
    except InventoryError as e:
        raise http_error(e) from e
    return MessageOut(message="Inventory item deleted")

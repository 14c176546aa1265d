from __future__ import annotations

from fastapi import HTTPException, Request, UploadFile

from inventory_service.core.config import Settings
from inventory_service.core.errors import InventoryError, NotFoundError, ValidationError
from inventory_service.services.inventory import InventoryStore, parse_item_id
from inventory_service.services.photos import PhotoUpload


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store


def http_error(exc: InventoryError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    # StorageError: the cause was already logged where it happened.
    return HTTPException(status_code=500, detail="Internal server error")


async def read_upload(file: UploadFile | None) -> PhotoUpload | None:
    # Browsers submit an empty part with no filename when no file was chosen.
    if file is None or not file.filename:
        return None
    content = await file.read()
    return PhotoUpload(filename=file.filename, content=content)


def path_item_id(item_id: str) -> int:
    # Any path segment that cannot name a stored item is a plain 404, never a 422.
    try:
        return parse_item_id(item_id)
    except NotFoundError as e:
        raise http_error(e) from e

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse


router = APIRouter()

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"


@router.get("/RegisterForm.html", include_in_schema=False)
async def register_form() -> FileResponse:
    return FileResponse(path=str(STATIC_DIR / "RegisterForm.html"), media_type="text/html")


@router.get("/SearchForm.html", include_in_schema=False)
async def search_form() -> FileResponse:
    return FileResponse(path=str(STATIC_DIR / "SearchForm.html"), media_type="text/html")

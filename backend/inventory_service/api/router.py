from __future__ import annotations

from fastapi import APIRouter

from inventory_service.api.endpoints import forms, inventory, search


api_router = APIRouter()

api_router.include_router(forms.router, tags=["forms"])
api_router.include_router(inventory.router, tags=["inventory"])
api_router.include_router(search.router, tags=["search"])

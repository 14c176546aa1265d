from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncEngine

from inventory_service.api.router import api_router
from inventory_service.core.config import Settings, get_settings
from inventory_service.core.db import create_engine, create_schema, create_session_factory
from inventory_service.core.enums import StoreBackend
from inventory_service.services.inventory import InventoryStore
from inventory_service.services.memory_store import MemoryInventoryStore
from inventory_service.services.photos import PhotoStorage
from inventory_service.services.sql_store import SqlInventoryStore


logger = logging.getLogger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


@lru_cache
def _repo_head_revision() -> str | None:
    default_alembic_path = Path(__file__).resolve().parents[1] / "alembic.ini"
    alembic_path = Path(os.getenv("ALEMBIC_CONFIG_PATH", str(default_alembic_path)))
    if not alembic_path.exists():
        return None

    cfg = Config(str(alembic_path))
    script = ScriptDirectory.from_config(cfg)
    return script.get_current_head()


def build_store(settings: Settings) -> InventoryStore:
    photos = PhotoStorage(settings.cache_dir)
    if settings.store == StoreBackend.SQL:
        engine = create_engine(settings)
        return SqlInventoryStore(create_session_factory(engine), photos, engine=engine)
    return MemoryInventoryStore(photos)


async def _database_checks(engine: AsyncEngine, settings: Settings) -> tuple[bool, dict[str, Any]]:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
        has_inventory, has_alembic_version = await conn.run_sync(
            lambda sync_conn: (
                inspect(sync_conn).has_table("inventory"),
                inspect(sync_conn).has_table("alembic_version"),
            )
        )
        current_revision: str | None = None
        if has_alembic_version:
            current_revision = await conn.scalar(text("SELECT version_num FROM alembic_version LIMIT 1"))

    repo_head = _repo_head_revision()
    if not has_alembic_version:
        migration_state = "unversioned_schema" if has_inventory else "empty_schema"
    elif repo_head is None:
        migration_state = "unknown_repo_head"
    elif current_revision == repo_head:
        migration_state = "up_to_date"
    else:
        migration_state = "behind_head"

    healthy = migration_state in {"up_to_date", "unknown_repo_head"} or (
        migration_state == "unversioned_schema" and settings.db_auto_create_schema
    )
    return healthy, {
        "state": migration_state,
        "has_inventory_table": has_inventory,
        "has_alembic_version": has_alembic_version,
        "current_revision": current_revision,
        "repo_head_revision": repo_head,
    }


def create_app(settings: Settings | None = None, *, store: InventoryStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    settings.cache_dir.mkdir(parents=True, exist_ok=True)
    if store is None:
        store = build_store(settings)

    app = FastAPI(title="Inventory Service", version="1.0")
    app.state.settings = settings
    app.state.store = store

    @app.middleware("http")
    async def reject_unsupported_methods(request: Request, call_next):
        if request.method not in ALLOWED_METHODS:
            return PlainTextResponse("Method not allowed", status_code=405)
        return await call_next(request)

    # Added after the method guard so CORS preflight (OPTIONS) is answered first.
    if settings.cors_origins:
        origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=sorted(ALLOWED_METHODS),
            allow_headers=["*"],
        )

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz/deep")
    async def deep_healthz() -> JSONResponse:
        engine = getattr(store, "engine", None)
        cache_ok = settings.cache_dir.is_dir() and os.access(settings.cache_dir, os.W_OK)
        payload: dict[str, Any] = {
            "status": "ok",
            "checks": {
                "store": (StoreBackend.SQL if engine is not None else StoreBackend.MEMORY).value,
                "cache_dir": "ok" if cache_ok else "error",
            },
        }
        healthy = cache_ok

        if engine is not None:
            try:
                db_healthy, migration = await _database_checks(engine, settings)
            except Exception as exc:
                logger.exception("Database health check failed")
                payload["status"] = "error"
                payload["checks"]["database"] = "error"
                payload["error"] = f"{exc.__class__.__name__}: {exc}"
                return JSONResponse(status_code=503, content=payload)
            payload["checks"]["database"] = "ok"
            payload["checks"]["migration"] = migration
            healthy = healthy and db_healthy

        payload["status"] = "ok" if healthy else "degraded"
        return JSONResponse(status_code=200 if healthy else 503, content=payload)

    @app.on_event("startup")
    async def startup() -> None:
        engine = getattr(store, "engine", None)
        if engine is not None and settings.db_auto_create_schema:
            await create_schema(engine)
            logger.info("Inventory table ensured")

    @app.on_event("shutdown")
    async def shutdown() -> None:
        await store.close()

    app.include_router(api_router)
    return app

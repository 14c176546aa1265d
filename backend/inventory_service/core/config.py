from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from inventory_service.core.enums import StoreBackend


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Takes precedence over the DB_* parts below (tests point this at SQLite).
    database_url: str | None = Field(None, alias="DATABASE_URL")

    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("", alias="DB_PASSWORD")
    db_name: str = Field("inventory", alias="DB_NAME")

    db_auto_create_schema: bool = Field(False, alias="DB_AUTO_CREATE_SCHEMA")

    @field_validator("database_url", mode="before")
    @classmethod
    def _normalize_database_url(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @property
    def sqlalchemy_url(self) -> str | URL:
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


class Settings(DatabaseSettings):
    host: str = Field(..., alias="INVENTORY_HOST")
    port: int = Field(..., alias="INVENTORY_PORT", ge=1, le=65535)
    cache_dir: Path = Field(..., alias="INVENTORY_CACHE_DIR")

    store: StoreBackend = Field(StoreBackend.MEMORY, alias="INVENTORY_STORE")
    public_url: str | None = Field(None, alias="INVENTORY_PUBLIC_URL")

    cors_origins: str | None = Field(None, alias="CORS_ORIGINS")

    @field_validator("host", mode="before")
    @classmethod
    def _normalize_host(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("public_url", mode="before")
    @classmethod
    def _normalize_public_url(cls, v: object) -> object:
        if v is None:
            return None
        if isinstance(v, str):
            url = v.strip().rstrip("/")
            return url or None
        return v

    @property
    def public_base_url(self) -> str:
        """Base URL used when building `photo_url` links for clients."""
        if self.public_url:
            return self.public_url
        return f"http://{self.host}:{self.port}"


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings()

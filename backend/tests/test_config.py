from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from inventory_service.core.config import DatabaseSettings, Settings
from inventory_service.core.enums import StoreBackend


def test_public_base_url_defaults_to_listen_address(tmp_path: Path) -> None:
    settings = Settings(host=" 127.0.0.1 ", port=3000, cache_dir=tmp_path)

    assert settings.public_base_url == "http://127.0.0.1:3000"
    assert settings.store == StoreBackend.MEMORY


def test_public_url_override_is_normalized(tmp_path: Path) -> None:
    settings = Settings(host="0.0.0.0", port=8080, cache_dir=tmp_path, public_url="https://inventory.example.com/ ")
    assert settings.public_base_url == "https://inventory.example.com"


def test_settings_read_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("INVENTORY_HOST", "localhost")
    monkeypatch.setenv("INVENTORY_PORT", "3001")
    monkeypatch.setenv("INVENTORY_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("INVENTORY_STORE", "sql")

    settings = Settings()

    assert settings.port == 3001
    assert settings.cache_dir == tmp_path / "cache"
    assert settings.store == StoreBackend.SQL


def test_listen_options_are_required(monkeypatch) -> None:
    for name in ("INVENTORY_HOST", "INVENTORY_PORT", "INVENTORY_CACHE_DIR"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValidationError):
        Settings()


def test_database_url_built_from_parts(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_HOST", "db")
    monkeypatch.setenv("DB_PORT", "5433")
    monkeypatch.setenv("DB_USER", "inv")
    monkeypatch.setenv("DB_PASSWORD", "secret")
    monkeypatch.setenv("DB_NAME", "stock")

    url = DatabaseSettings().sqlalchemy_url

    assert url.render_as_string(hide_password=False) == "postgresql+asyncpg://inv:secret@db:5433/stock"


def test_database_url_override_wins(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./inventory.db")
    monkeypatch.setenv("DB_HOST", "db")

    assert DatabaseSettings().sqlalchemy_url == "sqlite+aiosqlite:///./inventory.db"


def test_blank_database_url_falls_back_to_parts(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "  ")
    monkeypatch.delenv("DB_PASSWORD", raising=False)

    url = DatabaseSettings().sqlalchemy_url

    assert not isinstance(url, str)
    assert url.drivername == "postgresql+asyncpg"

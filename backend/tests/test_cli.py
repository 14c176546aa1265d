from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from inventory_service import cli
from inventory_service.core.enums import StoreBackend


@pytest.fixture
def served(monkeypatch) -> dict:
    calls: dict = {}

    def _run(app, *, host, port, log_level):
        calls.update(app=app, host=host, port=port, log_level=log_level)

    monkeypatch.setattr(cli.uvicorn, "run", _run)
    for name in ("INVENTORY_HOST", "INVENTORY_PORT", "INVENTORY_CACHE_DIR", "INVENTORY_STORE", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    return calls


def test_cli_requires_host_port_and_cache(served: dict) -> None:
    result = CliRunner().invoke(cli.main, ["-H", "localhost", "-p", "3000"])

    assert result.exit_code == 2
    assert "--cache" in result.output
    assert served == {}


def test_cli_creates_cache_dir_and_serves(served: dict, tmp_path: Path) -> None:
    cache = tmp_path / "photos" / "cache"

    result = CliRunner().invoke(cli.main, ["-H", "127.0.0.1", "-p", "3000", "-c", str(cache)])

    assert result.exit_code == 0, result.output
    assert cache.is_dir()
    assert served["host"] == "127.0.0.1"
    assert served["port"] == 3000
    settings = served["app"].state.settings
    assert settings.cache_dir == cache
    assert settings.store == StoreBackend.MEMORY


def test_cli_rejects_unknown_store(served: dict, tmp_path: Path) -> None:
    result = CliRunner().invoke(cli.main, ["-H", "localhost", "-p", "3000", "-c", str(tmp_path), "--store", "redis"])

    assert result.exit_code == 2
    assert served == {}


def test_cli_rejects_out_of_range_port(served: dict, tmp_path: Path) -> None:
    result = CliRunner().invoke(cli.main, ["-H", "localhost", "-p", "70000", "-c", str(tmp_path)])
    assert result.exit_code == 2

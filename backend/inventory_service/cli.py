from __future__ import annotations

import logging
from pathlib import Path

import click
import uvicorn
from pydantic import ValidationError as SettingsError

from inventory_service.core.config import Settings
from inventory_service.core.enums import StoreBackend
from inventory_service.main import create_app


logger = logging.getLogger(__name__)

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def load_settings(host: str, port: int, cache: Path, store: str | None) -> Settings:
    overrides: dict[str, object] = {"host": host, "port": port, "cache_dir": cache}
    if store is not None:
        overrides["store"] = store
    return Settings(**overrides)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-H", "--host", required=True, envvar="INVENTORY_HOST", help="Address to listen on.")
@click.option("-p", "--port", required=True, type=click.IntRange(1, 65535), envvar="INVENTORY_PORT", help="Port to listen on.")
@click.option(
    "-c",
    "--cache",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    envvar="INVENTORY_CACHE_DIR",
    help="Directory for uploaded photos (created if missing).",
)
@click.option(
    "--store",
    type=click.Choice([b.value for b in StoreBackend]),
    default=None,
    help="Storage backend (default: INVENTORY_STORE or memory).",
)
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="info", show_default=True)
def main(host: str, port: int, cache: Path, store: str | None, log_level: str) -> None:
    """Inventory Service: register, list, update and search inventory items."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(host, port, cache, store)
    except SettingsError as e:
        raise click.UsageError(str(e)) from e

    if not settings.cache_dir.exists():
        settings.cache_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created cache directory %s", settings.cache_dir)

    app = create_app(settings)
    logger.info("Serving inventory on http://%s:%s/ (store: %s)", settings.host, settings.port, settings.store.value)
    logger.info("Cache directory: %s", settings.cache_dir)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=log_level)


if __name__ == "__main__":
    main()

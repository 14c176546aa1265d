from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

from inventory_service.core.errors import NotFoundError, StorageError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    content: bytes

    @property
    def suffix(self) -> str:
        return Path(self.filename or "").suffix


class PhotoStorage:
    """
    Photo files kept in the cache directory.

    Records only store the generated file name (the "photo reference"); every
    lookup resolves it against `cache_dir` and refuses names that would escape it.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir

    def path_for(self, reference: str) -> Path:
        base_dir = self.cache_dir.resolve()
        abs_path = (self.cache_dir / reference).resolve()
        try:
            abs_path.relative_to(base_dir)
        except ValueError as e:
            raise NotFoundError("Photo not found") from e
        if abs_path == base_dir:
            raise NotFoundError("Photo not found")
        return abs_path

    def exists(self, reference: str) -> bool:
        try:
            return self.path_for(reference).is_file()
        except NotFoundError:
            return False

    def save(self, upload: PhotoUpload) -> str:
        reference = f"{uuid.uuid4().hex}{upload.suffix}"
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            (self.cache_dir / reference).write_bytes(upload.content)
        except OSError as e:
            logger.exception("Failed to write photo %s", reference)
            raise StorageError("Failed to store photo") from e
        return reference

    def read(self, reference: str) -> bytes:
        path = self.path_for(reference)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as e:
            logger.warning("Photo file %s is missing from %s", reference, self.cache_dir)
            raise NotFoundError("Photo not found") from e
        except OSError as e:
            logger.exception("Failed to read photo %s", reference)
            raise StorageError("Failed to read photo") from e

    def delete(self, reference: str) -> None:
        try:
            path = self.path_for(reference)
        except NotFoundError:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.exception("Failed to delete photo %s", reference)
            raise StorageError("Failed to delete photo") from e

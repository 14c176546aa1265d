from __future__ import annotations

from enum import StrEnum


class StoreBackend(StrEnum):
    MEMORY = "memory"
    SQL = "sql"

from __future__ import annotations


class InventoryError(RuntimeError):
    """Base class for failures raised by the inventory stores."""


class ValidationError(InventoryError, ValueError):
    pass


class NotFoundError(InventoryError, LookupError):
    pass


class StorageError(InventoryError):
    """Database or filesystem failure; details are logged, not returned to clients."""

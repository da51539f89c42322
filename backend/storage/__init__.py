import logging

from config import settings

from .base import Storage
from .memory import MemoryStorage
from .sql import SqlStorage

logger = logging.getLogger(__name__)

_storage: Storage | None = None


def _build_storage() -> Storage:
    if settings.storage_backend == "sql":
        logger.info("Using SQL storage backend")
        return SqlStorage(settings.database_url)
    if settings.storage_backend != "memory":
        logger.warning(f"Unknown STORAGE_BACKEND {settings.storage_backend!r}, using memory")
    return MemoryStorage()


def get_storage() -> Storage:
    """FastAPI dependency returning the process-wide storage backend."""
    global _storage
    if _storage is None:
        _storage = _build_storage()
    return _storage


__all__ = ["Storage", "MemoryStorage", "SqlStorage", "get_storage"]

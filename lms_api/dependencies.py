from functools import lru_cache
from typing import Iterator

from lms_api.config import SessionLocal, settings
from lms_api.repositories import JsonStore, SqlStore, Store


@lru_cache(maxsize=None)
def get_json_store(data_dir: str) -> JsonStore:
    """One in-memory JsonStore per data directory for the life of the process."""
    return JsonStore(data_dir)


def open_store() -> Store:
    """Store for the configured backend. SQL stores own a session and must be closed."""
    if settings.storage_backend == "json":
        return get_json_store(settings.data_dir)
    return SqlStore(SessionLocal())


def get_store() -> Iterator[Store]:
    """Storage dependency"""
    store = open_store()
    try:
        yield store
    finally:
        store.close()

from .base import ProfileStore
from .filesystem import FileProfileStore
from .memory import InMemoryProfileStore

from jobdash.config import Settings
from jobdash.log import get_logger

log = get_logger(__name__)

__all__ = ["ProfileStore", "FileProfileStore", "InMemoryProfileStore", "get_store"]


def get_store(settings: Settings) -> ProfileStore:
    backend = settings.store_backend.lower()
    if backend == "file":
        log.info("Using file store at %s", settings.data_dir)
        return FileProfileStore(settings.data_dir)
    if backend == "memory":
        log.info("Using in-memory store (nothing is persisted)")
        return InMemoryProfileStore()
    raise ValueError(f"Unknown store backend: {settings.store_backend}")

"""Blob store registry.

The backend is chosen once from ``StorageSettings`` (``local`` or
``memory``) and shared for the life of the process.
"""

from marketplace.config import StorageSettings, get_settings
from marketplace.storage.blob_port import BlobStore

_store: BlobStore | None = None


def build_blob_store(settings: StorageSettings) -> BlobStore:
    if settings.backend == "memory":
        from marketplace.storage.memory import MemoryBlobStore

        return MemoryBlobStore(public_base_url=settings.public_base_url)
    if settings.backend == "local":
        from marketplace.storage.local import LocalBlobStore

        return LocalBlobStore(settings.root, public_base_url=settings.public_base_url)
    raise ValueError(f"Unknown storage backend: {settings.backend}")


def get_blob_store() -> BlobStore:
    global _store
    if _store is None:
        _store = build_blob_store(get_settings().storage)
    return _store


def reset_blob_store():
    """Drop the cached backend (useful for testing)."""
    global _store
    _store = None

"""Blob storage port — abstract interface for uploaded file storage."""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Abstract interface for blob storage backends."""

    @abstractmethod
    def put(self, bucket: str, key: str, data: bytes, content_type: str | None = None) -> str:
        """Store ``data`` under ``bucket``/``key`` and return the stored key."""
        ...

    @abstractmethod
    def url(self, bucket: str, key: str) -> str:
        """Public URL for a stored key."""
        ...

    @abstractmethod
    def exists(self, bucket: str, key: str) -> bool: ...

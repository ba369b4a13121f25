"""Local filesystem blob store, used in development and single-host deploys."""

from pathlib import Path

from marketplace.storage.blob_port import BlobStore
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class LocalBlobStore(BlobStore):
    def __init__(self, root: str, public_base_url: str = "/uploads"):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, bucket: str, key: str) -> Path:
        path = (self.root / bucket / key).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise ValueError(f"Key escapes storage root: {key!r}")
        return path

    def put(self, bucket: str, key: str, data: bytes, content_type: str | None = None) -> str:
        path = self._path(bucket, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("blob_stored", bucket=bucket, key=key, size=len(data), content_type=content_type)
        return key

    def url(self, bucket: str, key: str) -> str:
        return f"{self.public_base_url}/{bucket}/{key}"

    def exists(self, bucket: str, key: str) -> bool:
        return self._path(bucket, key).is_file()

"""In-memory blob store — keeps uploads in a dict for tests."""

from marketplace.storage.blob_port import BlobStore


class MemoryBlobStore(BlobStore):
    def __init__(self, public_base_url: str = "/uploads"):
        self.public_base_url = public_base_url.rstrip("/")
        self.blobs: dict[tuple[str, str], dict] = {}

    def put(self, bucket: str, key: str, data: bytes, content_type: str | None = None) -> str:
        self.blobs[(bucket, key)] = {"data": data, "content_type": content_type}
        return key

    def url(self, bucket: str, key: str) -> str:
        return f"{self.public_base_url}/{bucket}/{key}"

    def exists(self, bucket: str, key: str) -> bool:
        return (bucket, key) in self.blobs

    def reset(self):
        self.blobs.clear()

"""Tests for upload rules and the blob store backends."""

import pytest
from protean.exceptions import ValidationError

from marketplace.config import StorageSettings
from marketplace.storage import build_blob_store, get_blob_store
from marketplace.storage.local import LocalBlobStore
from marketplace.storage.memory import MemoryBlobStore
from marketplace.storage.uploads import MAX_UPLOAD_BYTES, UPLOAD_RULES, UploadKind, rule_for, store_upload


class TestUploadRules:
    def test_every_kind_has_a_rule(self):
        assert set(UPLOAD_RULES) == set(UploadKind)

    def test_product_image_rule(self):
        rule = rule_for(UploadKind.PRODUCT_IMAGE)
        assert rule.storage_bucket == "store"
        assert rule.path_prefix == "products"
        assert rule.derivative_sizes == {"thumb": 150, "medium": 600, "large": 1200}


class TestStoreUpload:
    def test_stores_under_owner_prefix(self):
        upload = store_upload(UploadKind.STORE_LOGO, "store-1", "logo.png", b"png-bytes", "image/png")

        assert upload.key.startswith("stores/logos/store-1/")
        assert upload.key.endswith(".png")
        assert upload.size == len(b"png-bytes")
        assert upload.derivatives == {"thumb": 150, "medium": 600}
        assert get_blob_store().exists("store", upload.key)

    def test_suffix_falls_back_to_content_type(self):
        upload = store_upload(UploadKind.PRODUCT_IMAGE, "p-1", "", b"data", "image/webp")
        assert upload.key.endswith(".webp")

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError):
            store_upload(UploadKind.PRODUCT_IMAGE, "p-1", "a.png", b"", "image/png")

    def test_oversized_file_rejected(self):
        with pytest.raises(ValidationError):
            store_upload(UploadKind.PRODUCT_IMAGE, "p-1", "a.png", b"x" * (MAX_UPLOAD_BYTES + 1), "image/png")

    def test_unsupported_type_rejected(self):
        with pytest.raises(ValidationError):
            store_upload(UploadKind.PRODUCT_IMAGE, "p-1", "a.gif", b"GIF89a", "image/gif")


class TestBackends:
    def test_build_memory_store(self):
        assert isinstance(build_blob_store(StorageSettings(backend="memory")), MemoryBlobStore)

    def test_local_store_writes_files(self, tmp_path):
        store = build_blob_store(StorageSettings(backend="local", root=str(tmp_path), public_base_url="/media/"))
        assert isinstance(store, LocalBlobStore)

        store.put("store", "products/p-1/a.png", b"data", content_type="image/png")

        assert (tmp_path / "store" / "products" / "p-1" / "a.png").read_bytes() == b"data"
        assert store.exists("store", "products/p-1/a.png")
        assert store.url("store", "products/p-1/a.png") == "/media/store/products/p-1/a.png"

    def test_local_store_refuses_escaping_keys(self, tmp_path):
        store = LocalBlobStore(str(tmp_path))
        with pytest.raises(ValueError):
            store.put("store", "../../etc/passwd", b"data")

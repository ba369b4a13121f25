"""Upload rules per kind of record and the uploader that applies them.

Each record kind that accepts files maps to an explicit ``UploadRule``: the
bucket it is stored in, the key prefix, and the derivative sizes (longest
edge, pixels) that image processing produces for it.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from uuid import uuid4

from protean.exceptions import ValidationError

from marketplace.storage import get_blob_store

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


class UploadKind(Enum):
    PRODUCT_IMAGE = "product_image"
    STORE_LOGO = "store_logo"
    STORE_BANNER = "store_banner"
    CATEGORY_IMAGE = "category_image"


@dataclass(frozen=True)
class UploadRule:
    storage_bucket: str
    path_prefix: str
    derivative_sizes: dict[str, int] = field(default_factory=dict)


_PRODUCT_SIZES = {"thumb": 150, "medium": 600, "large": 1200}

UPLOAD_RULES: dict[UploadKind, UploadRule] = {
    UploadKind.PRODUCT_IMAGE: UploadRule("store", "products", _PRODUCT_SIZES),
    UploadKind.STORE_LOGO: UploadRule("store", "stores/logos", {"thumb": 150, "medium": 600}),
    UploadKind.STORE_BANNER: UploadRule("store", "stores/banners", {"large": 1200}),
    UploadKind.CATEGORY_IMAGE: UploadRule("store", "categories", {"thumb": 150}),
}


def rule_for(kind: UploadKind) -> UploadRule:
    return UPLOAD_RULES[kind]


@dataclass(frozen=True)
class StoredUpload:
    key: str
    url: str
    content_type: str
    size: int
    derivatives: dict[str, int]


def store_upload(kind: UploadKind, owner_id, filename: str, data: bytes, content_type: str) -> StoredUpload:
    """Validate and store one uploaded image according to the rule for ``kind``."""
    if not data:
        raise ValidationError({"file": ["No file provided"]})
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationError({"file": ["must not be larger than 5MB"]})
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError({"file": ["must be a JPEG, PNG, or WebP image"]})

    rule = rule_for(kind)
    suffix = PurePosixPath(filename or "").suffix.lower() or ALLOWED_IMAGE_TYPES[content_type]
    key = f"{rule.path_prefix}/{owner_id}/{uuid4().hex}{suffix}"

    store = get_blob_store()
    store.put(rule.storage_bucket, key, data, content_type=content_type)
    return StoredUpload(
        key=key,
        url=store.url(rule.storage_bucket, key),
        content_type=content_type,
        size=len(data),
        derivatives=dict(rule.derivative_sizes),
    )

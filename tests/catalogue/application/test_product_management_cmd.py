"""Application tests for product listing, moderation, pricing and images."""

import base64

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.catalogue.product.images import UploadProductImage
from marketplace.catalogue.product.management import (
    DeactivateProduct,
    ListProduct,
    RejectProduct,
    RemoveProduct,
    RepriceProduct,
    RestockProduct,
    SubmitProductForReview,
)
from marketplace.catalogue.product.product import Product, ProductStatus
from marketplace.errors import PermissionDenied, ProductNotFound, StoreNotFound
from marketplace.storage import get_blob_store

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestListProduct:
    def test_list_product_starts_as_draft(self, make_store):
        store = make_store()
        product_id = current_domain.process(
            ListProduct(store_id=store.id, seller_id=store.owner_id, name="Trail Shoe", base_price="89.99"),
            asynchronous=False,
        )
        product = current_domain.repository_for(Product).get(product_id)
        assert product.status == ProductStatus.DRAFT.value
        assert product.slug == "trail-shoe"

    def test_slug_is_unique_within_store(self, make_store):
        store = make_store()
        for _ in range(2):
            current_domain.process(
                ListProduct(store_id=store.id, seller_id=store.owner_id, name="Trail Shoe", base_price="89.99"),
                asynchronous=False,
            )
        slugs = sorted(p.slug for p in current_domain.repository_for(Product).for_store(store.id))
        assert slugs == ["trail-shoe", "trail-shoe-1"]

    def test_only_the_owner_can_list(self, make_store, make_user):
        store = make_store()
        stranger = make_user()
        with pytest.raises(PermissionDenied):
            current_domain.process(
                ListProduct(store_id=store.id, seller_id=stranger.id, name="Trail Shoe", base_price="89.99"),
                asynchronous=False,
            )

    def test_unknown_store(self):
        with pytest.raises(StoreNotFound):
            current_domain.process(
                ListProduct(store_id="missing", seller_id="user", name="Trail Shoe", base_price="89.99"),
                asynchronous=False,
            )


class TestModeration:
    def test_submit_and_reject(self, make_product):
        product = make_product(active=False)
        current_domain.process(SubmitProductForReview(product_id=product.id), asynchronous=False)
        current_domain.process(RejectProduct(product_id=product.id, reason="Missing details"), asynchronous=False)

        product = current_domain.repository_for(Product).get(product.id)
        assert product.status == ProductStatus.REJECTED.value
        assert product.rejection_reason == "Missing details"

    def test_deactivate(self, make_product):
        product = make_product()
        current_domain.process(DeactivateProduct(product_id=product.id), asynchronous=False)
        assert current_domain.repository_for(Product).get(product.id).is_active is False

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            current_domain.process(SubmitProductForReview(product_id="missing"), asynchronous=False)


class TestPriceAndStock:
    def test_reprice(self, make_product):
        product = make_product(base_price="25.00")
        current_domain.process(RepriceProduct(product_id=product.id, base_price="19.99"), asynchronous=False)
        assert current_domain.repository_for(Product).get(product.id).base_price == "19.99"

    def test_restock(self, make_product):
        product = make_product(inventory=2)
        current_domain.process(RestockProduct(product_id=product.id, quantity=3), asynchronous=False)
        assert current_domain.repository_for(Product).get(product.id).inventory == 5

    def test_remove(self, make_product):
        product = make_product()
        current_domain.process(RemoveProduct(product_id=product.id), asynchronous=False)
        assert current_domain.repository_for(Product).find(product.id) is None


class TestUploadImage:
    def _upload(self, product, seller_id, content=None, content_type="image/png"):
        return current_domain.process(
            UploadProductImage(
                product_id=product.id,
                seller_id=seller_id,
                filename="front.PNG",
                content_type=content_type,
                content=content or base64.b64encode(PNG_BYTES).decode(),
                alt_text="Front",
            ),
            asynchronous=False,
        )

    def test_upload_stores_blob_and_adds_image(self, make_store, make_product):
        store = make_store()
        product = make_product(store=store)

        self._upload(product, store.owner_id)

        product = current_domain.repository_for(Product).get(product.id)
        assert len(product.images) == 1
        image = product.images[0]
        assert image.url.startswith(f"/uploads/store/products/{product.id}/")
        assert image.url.endswith(".png")
        assert image.alt_text == "Front"

        blobs = get_blob_store().blobs
        assert len(blobs) == 1
        assert list(blobs.values())[0]["data"] == PNG_BYTES

    def test_only_the_owner_can_upload(self, make_product, make_user):
        product = make_product()
        with pytest.raises(PermissionDenied):
            self._upload(product, make_user().id)

    def test_bad_base64_rejected(self, make_store, make_product):
        store = make_store()
        product = make_product(store=store)
        with pytest.raises(ValidationError):
            self._upload(product, store.owner_id, content="not base64!!")

    def test_unsupported_type_rejected(self, make_store, make_product):
        store = make_store()
        product = make_product(store=store)
        with pytest.raises(ValidationError) as exc:
            self._upload(product, store.owner_id, content_type="image/gif")
        assert "file" in exc.value.messages

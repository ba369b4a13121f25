"""Product image upload — command and handler."""

import base64
import binascii

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product.management import load_product
from marketplace.catalogue.product.product import Product
from marketplace.catalogue.store.store import Store
from marketplace.domain import marketplace
from marketplace.errors import PermissionDenied
from marketplace.storage.uploads import UploadKind, store_upload


@marketplace.command(part_of="Product")
class UploadProductImage:
    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)
    filename: String(required=True, max_length=255)
    content_type: String(required=True, max_length=100)
    content: Text(required=True)  # base64
    alt_text: String(max_length=255)
    position: Integer()


@marketplace.command_handler(part_of=Product)
class ProductImageHandler:
    @handle(UploadProductImage)
    def upload_image(self, command):
        product = load_product(command.product_id)
        store = current_domain.repository_for(Store).get(product.store_id)
        if not store.is_owned_by(command.seller_id):
            raise PermissionDenied("Only the store owner can upload product images")

        try:
            data = base64.b64decode(command.content, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError({"file": ["File content must be base64 encoded"]}) from None

        upload = store_upload(
            UploadKind.PRODUCT_IMAGE,
            owner_id=product.id,
            filename=command.filename,
            data=data,
            content_type=command.content_type,
        )
        image = product.add_image(upload.url, alt_text=command.alt_text, position=command.position)
        current_domain.repository_for(Product).add(product)
        return str(image.id)

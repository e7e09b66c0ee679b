"""Product catalog operations over the store."""

import logging
import uuid
from typing import Dict, List, Optional, Any

from config import DEFAULT_IMAGE
from errors import ConflictError, NotFound, ValidationError
from models import Product

logger = logging.getLogger(__name__)


class ProductService:
    """CRUD over products, including creation from an uploaded image."""

    def __init__(self, store, uploads, default_image: str = DEFAULT_IMAGE):
        self.store = store
        self.uploads = uploads
        self.default_image = default_image

    def list_products(self) -> List[Product]:
        return [Product.from_record(d) for d in self.store.find_products()]

    def get_product(self, product_id: str) -> Product:
        data = self.store.find_product(product_id)
        if data is None:
            raise NotFound("Product not found")
        return Product.from_record(data)

    def create_product(
        self,
        name: str,
        price: Optional[float],
        image: Optional[str] = None,
        description: Optional[str] = None,
        public_id: Optional[str] = None
    ) -> Product:
        """
        Insert a product.

        Args:
            name: Product name (required)
            price: Product price (required)
            image: Image path or URL (default: placeholder image)
            description: Free text
            public_id: Client-supplied public identifier (default: generated)
        """
        if not name or price is None:
            raise ValidationError("Name and price are required")

        record_id = uuid.uuid4().hex
        product = Product(
            id=record_id,
            product_id=public_id or record_id,
            name=name,
            price=price,
            image=image or self.default_image,
            description=description,
        )
        if not self.store.insert_product(product.to_record()):
            raise ConflictError(f"Product id already exists: {product.product_id}")

        logger.info(f"Created product {product.id} ({product.name})")
        return product

    def create_product_with_upload(
        self,
        name: str,
        price: Optional[float],
        file_bytes: Optional[bytes],
        filename: str,
        description: Optional[str] = None
    ) -> Product:
        """Store the uploaded image, then insert a product pointing at it."""
        if not file_bytes:
            raise ValidationError("Image is required")
        if not name or price is None:
            raise ValidationError("Name and price are required")

        image = self.uploads.store(file_bytes, filename)
        try:
            return self.create_product(name, price, image=image, description=description)
        except Exception:
            self.uploads.remove(image)
            raise

    def update_product(self, product_id: str, fields: Dict[str, Any]) -> Product:
        """
        Replace the given fields; omitted fields keep their values.

        Args:
            product_id: Store identifier
            fields: Any of name, price, image, description, product_id
        """
        product = self.get_product(product_id)
        previous_public_id = product.product_id

        for key in ('name', 'price', 'image', 'description', 'product_id'):
            if fields.get(key) is not None:
                setattr(product, key, fields[key])

        if not self.store.replace_product(product.to_record(), previous_public_id):
            raise ConflictError(f"Product id already exists: {product.product_id}")

        logger.info(f"Updated product {product.id}")
        return product

    def delete_product(self, product_id: str) -> None:
        if self.store.delete_product(product_id) is None:
            raise NotFound("Product not found")
        logger.info(f"Deleted product {product_id}")

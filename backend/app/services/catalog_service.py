"""
Catalog Service
Business rules for categories and products

Author: TM3
Date: 2026-10-19
"""
import logging
from typing import List, Optional, Sequence
from uuid import UUID

from fastapi import UploadFile

from app.core.config import Settings
from app.core.database import Database
from app.core.exceptions import InvalidAssetError, InvalidReferenceError, MissingAssetError, NotFoundError
from app.core.identifiers import parse_id
from app.domain.catalog import Category, CategoryCreate, CategoryUpdate, Product, ProductCreate, ProductUpdate
from app.repositories.category_repository import CategoryRepository
from app.repositories.product_repository import ProductRepository
from app.services.upload_service import UploadService

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service for the product catalog

    Handles:
    - Category CRUD
    - Product CRUD with category validation
    - Image and gallery assignment (files stored through UploadService)
    - Featured products and counts
    """

    def __init__(
        self,
        db: Database,
        settings: Settings,
        categories: Optional[CategoryRepository] = None,
        products: Optional[ProductRepository] = None,
        uploads: Optional[UploadService] = None,
    ):
        self.db = db
        self.settings = settings
        self.categories = categories or CategoryRepository(db)
        self.products = products or ProductRepository(db)
        self.uploads = uploads or UploadService(settings)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self) -> List[Category]:
        return self.categories.find_all()

    def get_category(self, category_id: str) -> Category:
        category = self.categories.find_by_id(parse_id(category_id, "Category"))
        if not category:
            raise NotFoundError("The category with the given ID was not found")
        return category

    def create_category(self, data: CategoryCreate) -> Category:
        category = self.categories.create(data)
        logger.info(f"Created category {category.id} ({category.name})")
        return category

    def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        category = self.categories.update(parse_id(category_id, "Category"), data)
        if not category:
            raise NotFoundError("The category with the given ID was not found")
        return category

    def delete_category(self, category_id: str) -> None:
        if not self.categories.delete(parse_id(category_id, "Category")):
            raise NotFoundError("category not found")
        logger.info(f"Deleted category {category_id}")

    def count_categories(self) -> int:
        return self.categories.count()

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self, category_ids: Optional[Sequence[UUID]] = None) -> List[Product]:
        """Every product, or only those whose category is in `category_ids` when it is non-empty"""
        return self.products.find_all(category_ids=category_ids or None)

    def get_product(self, product_id: str) -> Product:
        product = self.products.find_by_id(parse_id(product_id, "Product"))
        if not product:
            raise NotFoundError("The product with the given ID was not found")
        return product

    def _require_category(self, raw_category_id: str) -> UUID:
        category_id = parse_id(raw_category_id, "Category")
        if not self.categories.exists(category_id):
            raise InvalidReferenceError("Invalid Category")
        return category_id

    async def create_product(self, data: ProductCreate, image: Optional[UploadFile], base_url: str) -> Product:
        """
        Create a product

        The category must exist and an image must be attached; the image is
        only written to disk once both checks pass.

        Raises:
            InvalidReferenceError: unknown category
            MissingAssetError: no image attached
            InvalidAssetError: image of an unsupported type
        """
        category_id = self._require_category(data.category)
        if image is None:
            raise MissingAssetError("No Image in the request")

        image_url = await self.uploads.save(image, base_url)
        product = self.products.create(data, category_id=category_id, image=image_url)
        logger.info(f"Created product {product.id} ({product.name}) in category {category_id}")
        return product

    async def update_product(
        self,
        product_id: str,
        data: ProductUpdate,
        image: Optional[UploadFile] = None,
        base_url: str = "",
    ) -> Product:
        """
        Update a product

        Supplied fields overwrite; missing ones keep their stored value. A new
        image replaces the stored URL, otherwise the old one is kept.
        """
        parsed_id = parse_id(product_id, "Product")
        category_id = self._require_category(data.category)
        if not self.products.find_by_id(parsed_id):
            raise NotFoundError("The product with the given ID was not found")

        fields = data.model_dump(exclude={"category"})
        fields["category_id"] = category_id
        if image is not None:
            fields["image"] = await self.uploads.save(image, base_url)

        product = self.products.update(parsed_id, fields)
        if not product:
            raise NotFoundError("The product with the given ID was not found")
        return product

    async def update_gallery(self, product_id: str, images: Sequence[UploadFile], base_url: str) -> Product:
        """Replace the gallery wholesale with the uploaded images (at most MAX_GALLERY_IMAGES)"""
        parsed_id = parse_id(product_id, "Product")
        if len(images) > self.settings.MAX_GALLERY_IMAGES:
            raise InvalidAssetError(f"At most {self.settings.MAX_GALLERY_IMAGES} gallery images are allowed")
        if not self.products.find_by_id(parsed_id):
            raise NotFoundError("The product with the given ID was not found")

        image_urls = await self.uploads.save_many(images, base_url)
        product = self.products.set_images(parsed_id, image_urls)
        if not product:
            raise NotFoundError("The product with the given ID was not found")
        return product

    def delete_product(self, product_id: str) -> None:
        if not self.products.delete(parse_id(product_id, "Product")):
            raise NotFoundError("product not found")
        logger.info(f"Deleted product {product_id}")

    def count_products(self) -> int:
        return self.products.count()

    def featured_products(self, count: int) -> List[Product]:
        """A count of 0 means no limit; a negative count acts as its absolute value"""
        return self.products.find_featured(abs(count) or None)

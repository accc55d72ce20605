"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models
with their category populated.

Author: TM3
Date: 2026-10-19
"""
import uuid
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from app.domain.catalog import Category, Product, ProductCreate
from app.repositories.base import BaseRepository

PRODUCT_SELECT = """
    SELECT
        p.id, p.name, p.description, p.rich_description,
        p.image, p.images, p.brand, p.price, p.category_id,
        p.count_in_stock, p.rating, p.num_reviews, p.is_featured, p.date_created,
        c.name AS category_name,
        c.icon AS category_icon,
        c.color AS category_color
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
"""

# ProductUpdate attribute -> column
PRODUCT_COLUMNS = {
    "name": "name",
    "description": "description",
    "rich_description": "rich_description",
    "image": "image",
    "brand": "brand",
    "price": "price",
    "category_id": "category_id",
    "count_in_stock": "count_in_stock",
    "rating": "rating",
    "num_reviews": "num_reviews",
    "is_featured": "is_featured",
}


class ProductRepository(BaseRepository):
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        """
        Helper method to map database row to Product domain model.

        The category columns come from a LEFT JOIN; a product whose category
        has since been deleted is returned with category=None.
        """
        category = None
        if row.get('category_name') is not None:
            category = Category(
                id=row['category_id'],
                name=row['category_name'],
                icon=row.get('category_icon'),
                color=row.get('category_color'),
            )

        return Product(
            id=row['id'],
            name=row['name'],
            description=row['description'],
            rich_description=row['rich_description'],
            image=row['image'],
            images=list(row['images'] or []),
            brand=row['brand'],
            price=row['price'],
            category_id=row['category_id'],
            category=category,
            count_in_stock=row['count_in_stock'],
            rating=row['rating'],
            num_reviews=row['num_reviews'],
            is_featured=row['is_featured'],
            date_created=row.get('date_created'),
        )

    def find_all(self, category_ids: Optional[Sequence[UUID]] = None) -> List[Product]:
        """
        List products, optionally restricted to a set of categories

        Args:
            category_ids: Keep only products whose category is in this set;
                None or empty returns every product

        Returns:
            Products in creation order
        """
        with self._cursor() as cursor:
            if category_ids:
                cursor.execute(f"""
                    {PRODUCT_SELECT}
                    WHERE p.category_id = ANY(%s)
                    ORDER BY p.date_created, p.id
                """, (list(category_ids),))
            else:
                cursor.execute(f"""
                    {PRODUCT_SELECT}
                    ORDER BY p.date_created, p.id
                """)

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

    def find_by_id(self, product_id: UUID, cursor=None) -> Optional[Product]:
        with self._cursor(cursor) as cur:
            cur.execute(f"{PRODUCT_SELECT} WHERE p.id = %s", (product_id,))
            row = cur.fetchone()
            if not row:
                return None
            return self._map_row_to_product(row)

    def find_by_ids(self, product_ids: Sequence[UUID], cursor=None) -> Dict[UUID, Product]:
        """Fetch many products in one query, keyed by id (missing ids are simply absent)"""
        if not product_ids:
            return {}

        with self._cursor(cursor) as cur:
            cur.execute(f"{PRODUCT_SELECT} WHERE p.id = ANY(%s)", (list(set(product_ids)),))
            products = [self._map_row_to_product(row) for row in cur.fetchall()]
            return {product.id: product for product in products}

    def find_featured(self, limit: Optional[int]) -> List[Product]:
        """Featured products, oldest first; LIMIT NULL when limit is None returns all"""
        with self._cursor() as cursor:
            cursor.execute(f"""
                {PRODUCT_SELECT}
                WHERE p.is_featured = TRUE
                ORDER BY p.date_created, p.id
                LIMIT %s
            """, (limit,))
            return [self._map_row_to_product(row) for row in cursor.fetchall()]

    def create(self, data: ProductCreate, category_id: UUID, image: str, cursor=None) -> Product:
        """Insert a product and return it with its category populated"""
        product_id = uuid.uuid4()
        with self._cursor(cursor) as cur:
            cur.execute("""
                INSERT INTO products (
                    id, name, description, rich_description, image, images, brand,
                    price, category_id, count_in_stock, rating, num_reviews, is_featured
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                )
            """, (
                product_id,
                data.name,
                data.description,
                data.rich_description,
                image,
                [],
                data.brand,
                data.price,
                category_id,
                data.count_in_stock,
                data.rating,
                data.num_reviews,
                data.is_featured,
            ))
            return self.find_by_id(product_id, cursor=cur)

    def update(self, product_id: UUID, fields: dict, cursor=None) -> Optional[Product]:
        """
        Overwrite the supplied fields; None values are left untouched

        Args:
            product_id: Product to update
            fields: attribute name -> value (see PRODUCT_COLUMNS)

        Returns:
            Updated product or None if it does not exist
        """
        assignments = self._assignments(fields, PRODUCT_COLUMNS)

        with self._cursor(cursor) as cur:
            if assignments is not None:
                set_clause, params = assignments
                cur.execute(f"UPDATE products SET {set_clause} WHERE id = %s", params + [product_id])
                if cur.rowcount == 0:
                    return None
            return self.find_by_id(product_id, cursor=cur)

    def set_images(self, product_id: UUID, images: List[str]) -> Optional[Product]:
        """Replace the gallery wholesale"""
        with self._cursor() as cursor:
            cursor.execute("UPDATE products SET images = %s WHERE id = %s", (images, product_id))
            if cursor.rowcount == 0:
                return None
            return self.find_by_id(product_id, cursor=cursor)

    def delete(self, product_id: UUID) -> bool:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM products WHERE id = %s", (product_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._cursor() as cursor:
            cursor.execute("SELECT COUNT(*) AS total FROM products")
            return cursor.fetchone()['total']

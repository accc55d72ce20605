"""
Category Repository - Data Access Layer for Categories
"""
import uuid
from typing import List, Optional
from uuid import UUID

from app.domain.catalog import Category, CategoryCreate, CategoryUpdate
from app.repositories.base import BaseRepository

CATEGORY_COLUMNS = {"name": "name", "icon": "icon", "color": "color"}


class CategoryRepository(BaseRepository):

    def find_all(self) -> List[Category]:
        with self._cursor() as cursor:
            cursor.execute("SELECT id, name, icon, color FROM categories ORDER BY name")
            return [Category(**row) for row in cursor.fetchall()]

    def find_by_id(self, category_id: UUID, cursor=None) -> Optional[Category]:
        with self._cursor(cursor) as cur:
            cur.execute("SELECT id, name, icon, color FROM categories WHERE id = %s", (category_id,))
            row = cur.fetchone()
            return Category(**row) if row else None

    def exists(self, category_id: UUID, cursor=None) -> bool:
        with self._cursor(cursor) as cur:
            cur.execute("SELECT 1 FROM categories WHERE id = %s", (category_id,))
            return cur.fetchone() is not None

    def create(self, data: CategoryCreate) -> Category:
        with self._cursor() as cursor:
            cursor.execute("""
                INSERT INTO categories (id, name, icon, color)
                VALUES (%s, %s, %s, %s)
                RETURNING id, name, icon, color
            """, (uuid.uuid4(), data.name, data.icon, data.color))
            return Category(**cursor.fetchone())

    def update(self, category_id: UUID, data: CategoryUpdate) -> Optional[Category]:
        assignments = self._assignments(data.model_dump(), CATEGORY_COLUMNS)
        if assignments is None:
            return self.find_by_id(category_id)

        set_clause, params = assignments
        with self._cursor() as cursor:
            cursor.execute(f"""
                UPDATE categories SET {set_clause}
                WHERE id = %s
                RETURNING id, name, icon, color
            """, params + [category_id])
            row = cursor.fetchone()
            return Category(**row) if row else None

    def delete(self, category_id: UUID) -> bool:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM categories WHERE id = %s", (category_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._cursor() as cursor:
            cursor.execute("SELECT COUNT(*) AS total FROM categories")
            return cursor.fetchone()['total']

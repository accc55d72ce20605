"""
User Repository - Data Access Layer for Users

Returns UserRecord (hash included); the service decides what is exposed.
"""
import uuid
from typing import List, Optional
from uuid import UUID

from app.domain.user import UserRecord
from app.repositories.base import BaseRepository

USER_FIELDS = """
    id, name, email, password_hash, phone, is_admin,
    street, apartment, zip, city, country
"""

USER_COLUMNS = {
    "name": "name",
    "email": "email",
    "password_hash": "password_hash",
    "phone": "phone",
    "is_admin": "is_admin",
    "street": "street",
    "apartment": "apartment",
    "zip": "zip",
    "city": "city",
    "country": "country",
}


class UserRepository(BaseRepository):

    def find_all(self) -> List[UserRecord]:
        with self._cursor() as cursor:
            cursor.execute(f"SELECT {USER_FIELDS} FROM users ORDER BY name")
            return [UserRecord(**row) for row in cursor.fetchall()]

    def find_by_id(self, user_id: UUID, cursor=None) -> Optional[UserRecord]:
        with self._cursor(cursor) as cur:
            cur.execute(f"SELECT {USER_FIELDS} FROM users WHERE id = %s", (user_id,))
            row = cur.fetchone()
            return UserRecord(**row) if row else None

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        """
        Case-insensitive lookup; the first match wins

        Email is not unique at the storage level, and stored addresses have
        their domain lowercased by EmailStr while logins arrive as typed.
        """
        with self._cursor() as cursor:
            cursor.execute(f"""
                SELECT {USER_FIELDS} FROM users
                WHERE lower(email) = lower(%s)
                LIMIT 1
            """, (email,))
            row = cursor.fetchone()
            return UserRecord(**row) if row else None

    def exists(self, user_id: UUID, cursor=None) -> bool:
        with self._cursor(cursor) as cur:
            cur.execute("SELECT 1 FROM users WHERE id = %s", (user_id,))
            return cur.fetchone() is not None

    def create(self, fields: dict) -> UserRecord:
        """
        Insert a user

        Args:
            fields: column values; must include name, email and password_hash
        """
        columns = ["id"] + [USER_COLUMNS[name] for name in fields if name in USER_COLUMNS]
        params = [uuid.uuid4()] + [value for name, value in fields.items() if name in USER_COLUMNS]
        placeholders = ", ".join(["%s"] * len(columns))

        with self._cursor() as cursor:
            cursor.execute(f"""
                INSERT INTO users ({", ".join(columns)})
                VALUES ({placeholders})
                RETURNING {USER_FIELDS}
            """, params)
            return UserRecord(**cursor.fetchone())

    def update(self, user_id: UUID, fields: dict) -> Optional[UserRecord]:
        """Overwrite the supplied fields; None values are left untouched"""
        assignments = self._assignments(fields, USER_COLUMNS)
        if assignments is None:
            return self.find_by_id(user_id)

        set_clause, params = assignments
        with self._cursor() as cursor:
            cursor.execute(f"""
                UPDATE users SET {set_clause}
                WHERE id = %s
                RETURNING {USER_FIELDS}
            """, params + [user_id])
            row = cursor.fetchone()
            return UserRecord(**row) if row else None

    def delete(self, user_id: UUID) -> bool:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM users WHERE id = %s", (user_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._cursor() as cursor:
            cursor.execute("SELECT COUNT(*) AS total FROM users")
            return cursor.fetchone()['total']

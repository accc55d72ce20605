"""
Base class for repositories

A repository method either runs inside a transaction the caller already
holds (cursor passed in) or opens its own.
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from app.core.database import Database


class BaseRepository:

    def __init__(self, db: Database):
        self.db = db

    @contextmanager
    def _cursor(self, cursor=None) -> Iterator:
        if cursor is not None:
            yield cursor
            return
        with self.db.transaction() as own_cursor:
            yield own_cursor

    @staticmethod
    def _assignments(fields: dict, columns: dict) -> Optional[tuple]:
        """
        Build "col = %s, ..." for the non-None entries of `fields`

        Args:
            fields: attribute name -> new value
            columns: attribute name -> column name

        Returns:
            (set_clause, params) or None when nothing is to be updated
        """
        parts = []
        params = []
        for name, value in fields.items():
            if value is None or name not in columns:
                continue
            parts.append(f"{columns[name]} = %s")
            params.append(value)
        if not parts:
            return None
        return ", ".join(parts), params

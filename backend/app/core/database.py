"""
PostgreSQL database connection

This module owns the process-wide connection pool. Repositories never open
connections themselves; they borrow a cursor from Database.transaction().

- psycopg2 ThreadedConnectionPool, created lazily on first use
- Retry with exponential backoff when the server is unreachable
- One transaction per `with` block: commit on success, rollback on error

Author: TM3
Date: 2026-10-19
"""
import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
import psycopg2.extras
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from app.core.config import Settings
from app.core.exceptions import PersistenceError
from app.core.schema import SCHEMA_SQL

logger = logging.getLogger(__name__)

# uuid.UUID <-> uuid / uuid[] columns
psycopg2.extras.register_uuid()


class Database:
    """
    Connection pool wrapper used by every repository

    Usage:
        db = Database(settings)
        with db.transaction() as cursor:
            cursor.execute("SELECT * FROM products")
            rows = cursor.fetchall()  # list of dicts
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._pool: Optional[ThreadedConnectionPool] = None

    def _get_pool(self) -> ThreadedConnectionPool:
        if self._pool is None:
            if not self.settings.DATABASE_URL:
                raise PersistenceError("DATABASE_URL not configured")
            self._pool = self._create_pool_with_retry()
        return self._pool

    def _create_pool_with_retry(self) -> ThreadedConnectionPool:
        """
        Create the pool, retrying connection failures

        Retries up to DB_CONNECT_RETRIES times with exponential backoff
        starting at DB_RETRY_DELAY seconds.

        Raises:
            PersistenceError: If all attempts fail
        """
        max_retries = max(1, self.settings.DB_CONNECT_RETRIES)
        retry_delay = self.settings.DB_RETRY_DELAY
        last_error = None

        for attempt in range(1, max_retries + 1):
            try:
                logger.debug(f"Database connection attempt {attempt}/{max_retries}")
                pool = ThreadedConnectionPool(
                    self.settings.DB_POOL_MIN,
                    self.settings.DB_POOL_MAX,
                    self.settings.DATABASE_URL,
                )
                logger.info(f"Database pool ready on attempt {attempt}")
                return pool

            except psycopg2.OperationalError as e:
                last_error = e
                error_msg = str(e)

                if "SSL connection has been closed unexpectedly" in error_msg:
                    logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
                else:
                    logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

                if attempt < max_retries:
                    delay = retry_delay * (2 ** (attempt - 1))
                    logger.info(f"Retrying in {delay:.2f} seconds...")
                    time.sleep(delay)

        logger.error(f"All {max_retries} connection attempts failed")
        raise PersistenceError(f"Database unavailable: {last_error}") from last_error

    @contextmanager
    def transaction(self) -> Iterator[RealDictCursor]:
        """
        Borrow a connection and run one transaction on it

        Yields a RealDictCursor. Commits when the block exits normally,
        rolls back on any exception. psycopg2 errors are re-raised as
        PersistenceError; everything else propagates unchanged.
        """
        pool = self._get_pool()
        conn = pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                yield cursor
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Database error, transaction rolled back: {e}")
            raise PersistenceError(str(e).strip() or "Database operation failed") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            pool.putconn(conn)

    def ensure_schema(self) -> None:
        """Create tables and indexes that do not exist yet"""
        with self.transaction() as cursor:
            cursor.execute(SCHEMA_SQL)
        logger.info("Database schema verified")

    def ping(self) -> float:
        """Round-trip a trivial query; returns latency in milliseconds"""
        start = time.time()
        with self.transaction() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        return round((time.time() - start) * 1000, 2)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database pool closed")

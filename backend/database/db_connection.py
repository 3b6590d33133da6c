"""
PostgreSQL connection helper.
Provides the Database handle that every repository is constructed with.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2.extras import DictCursor

from backend.errors import InternalError


class Database:
    """
    Connection factory bound to a single DSN.

    The handle holds no open connection; each unit of work opens its own,
    commits on success and rolls back on failure.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url

    def connect(self) -> "psycopg2.extensions.connection":
        """
        Returns a new psycopg2 connection with dictionary-based row access.

        Raises:
            InternalError: If the connection cannot be established.
        """
        try:
            conn = psycopg2.connect(self.database_url)
        except psycopg2.Error as e:
            logging.error(f"Error connecting to database: {e}")
            raise InternalError(f"database connection failed: {e}") from e

        # Rows come back as dictionaries (e.g., {"id": 1, "email": "..."})
        conn.cursor_factory = DictCursor
        return conn

    @contextmanager
    def transaction(self) -> Iterator["psycopg2.extensions.connection"]:
        """
        Usage:
            with db.transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(...)

        Integrity violations are re-raised untouched so repositories can map
        them (e.g. UniqueViolation -> ConflictError). Any other driver error
        is wrapped in InternalError.
        """
        conn = self.connect()
        try:
            yield conn
            conn.commit()
        except psycopg2.IntegrityError:
            conn.rollback()
            raise
        except psycopg2.Error as e:
            conn.rollback()
            raise InternalError(f"database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

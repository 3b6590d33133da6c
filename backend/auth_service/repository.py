"""
User directory: account lookup and creation over the `users` table.
"""

from typing import Optional

import psycopg2.errors

from backend.database.db_connection import Database
from backend.errors import ConflictError
from backend.models import User


class UserRepository:
    def __init__(self, db: Database):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        sql = "SELECT id, email, password, role FROM users WHERE email = %s;"
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (email,))
                row = cur.fetchone()
        return User.from_row(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        sql = "SELECT id, email, password, role FROM users WHERE id = %s;"
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
        return User.from_row(row) if row else None

    def create(self, email: str, password_hash: str, role: str) -> User:
        """
        Insert a new account.

        Raises:
            ConflictError: If the email is already registered.
        """
        sql = """
            INSERT INTO users (email, password, role)
            VALUES (%s, %s, %s)
            RETURNING id, email, password, role;
        """
        try:
            with self.db.transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (email, password_hash, role))
                    row = cur.fetchone()
        except psycopg2.errors.UniqueViolation:
            raise ConflictError("user already exists")
        return User.from_row(row)

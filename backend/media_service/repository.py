"""
SQL access for media metadata rows.
"""

from typing import List, Optional

from backend.database.db_connection import Database
from backend.models import Media


class MediaRepository:
    def __init__(self, db: Database):
        self.db = db

    def list_for_event(self, event_id: int) -> List[Media]:
        sql = """
            SELECT id, event_id, file_path, type
            FROM media
            WHERE event_id = %s
            ORDER BY created_at DESC, id DESC;
        """
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id,))
                rows = cur.fetchall()
        return [Media.from_row(r) for r in rows]

    def get(self, media_id: int) -> Optional[Media]:
        sql = "SELECT id, event_id, file_path, type FROM media WHERE id = %s;"
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (media_id,))
                row = cur.fetchone()
        return Media.from_row(row) if row else None

    def create(self, media: Media) -> Media:
        sql = """
            INSERT INTO media (event_id, file_path, type)
            VALUES (%s, %s, %s)
            RETURNING id;
        """
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (media.event_id, media.file_path, media.type))
                row = cur.fetchone()
        media.id = row["id"]
        return media

    def delete(self, media_id: int) -> None:
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM media WHERE id = %s;", (media_id,))

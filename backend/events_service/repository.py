"""
SQL access for arrest events and the subscription index.
"""

from typing import List, Optional

from backend.database.db_connection import Database
from backend.models import ArrestEvent, Subscription, User

EVENT_COLUMNS = """
    id, time, latitude, longitude, police_count, arrested_count,
    car_plates, notes, created_by
"""


class EventRepository:
    def __init__(self, db: Database):
        self.db = db

    def list_all(self) -> List[ArrestEvent]:
        """All events, newest first. No filtering, no pagination."""
        sql = f"SELECT {EVENT_COLUMNS} FROM arrest_events ORDER BY time DESC;"
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                rows = cur.fetchall()
        return [ArrestEvent.from_row(r) for r in rows]

    def get(self, event_id: int) -> Optional[ArrestEvent]:
        sql = f"SELECT {EVENT_COLUMNS} FROM arrest_events WHERE id = %s;"
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id,))
                row = cur.fetchone()
        return ArrestEvent.from_row(row) if row else None

    def create(self, event: ArrestEvent) -> int:
        sql = """
            INSERT INTO arrest_events (
                time, latitude, longitude, police_count, arrested_count,
                car_plates, notes, created_by
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id;
        """
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    event.time, event.latitude, event.longitude,
                    event.police_count, event.arrested_count,
                    event.car_plates, event.notes, event.created_by,
                ))
                row = cur.fetchone()
        return row["id"]

    def update(self, event: ArrestEvent) -> None:
        # created_by is deliberately absent from the SET list
        sql = """
            UPDATE arrest_events
            SET time = %s, latitude = %s, longitude = %s,
                police_count = %s, arrested_count = %s,
                car_plates = %s, notes = %s
            WHERE id = %s;
        """
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    event.time, event.latitude, event.longitude,
                    event.police_count, event.arrested_count,
                    event.car_plates, event.notes, event.id,
                ))

    def delete(self, event_id: int) -> None:
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM arrest_events WHERE id = %s;", (event_id,))


class SubscriptionRepository:
    def __init__(self, db: Database):
        self.db = db

    def subscribe(self, event_id: int, user_id: int) -> None:
        """Idempotent: the (event_id, user_id) unique constraint absorbs duplicates."""
        sql = """
            INSERT INTO subscriptions (event_id, user_id)
            VALUES (%s, %s)
            ON CONFLICT (event_id, user_id) DO NOTHING;
        """
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id, user_id))

    def unsubscribe(self, event_id: int, user_id: int) -> None:
        sql = "DELETE FROM subscriptions WHERE event_id = %s AND user_id = %s;"
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id, user_id))

    def subscribers(self, event_id: int) -> List[User]:
        sql = """
            SELECT u.id, u.email, u.role
            FROM subscriptions s
            JOIN users u ON s.user_id = u.id
            WHERE s.event_id = %s
            ORDER BY u.id;
        """
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id,))
                rows = cur.fetchall()
        return [User.from_row(r) for r in rows]

    def is_subscribed(self, event_id: int, user_id: int) -> bool:
        sql = "SELECT COUNT(*) AS n FROM subscriptions WHERE event_id = %s AND user_id = %s;"
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id, user_id))
                row = cur.fetchone()
        return row["n"] > 0

    def for_user(self, user_id: int) -> List[Subscription]:
        sql = """
            SELECT id, event_id, user_id
            FROM subscriptions
            WHERE user_id = %s
            ORDER BY created_at DESC;
        """
        with self.db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                rows = cur.fetchall()
        return [Subscription.from_row(r) for r in rows]

"""
Create the protest tracker schema.

Run once against a fresh database (safe to re-run, every statement is
IF NOT EXISTS):

    python -m backend.database.init_db
"""

import logging
import sys

import psycopg2

from backend.config import Config
from backend.database.db_connection import Database
from backend.errors import InternalError

# The spatial extension is provisioned for later use; nothing queries it yet.
POSTGIS_SQL = "CREATE EXTENSION IF NOT EXISTS postgis;"

SCHEMA_SQL = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        email VARCHAR(255) UNIQUE NOT NULL,
        password VARCHAR(255) NOT NULL,
        role VARCHAR(50) NOT NULL DEFAULT 'spotter'
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS arrest_events (
        id SERIAL PRIMARY KEY,
        time TIMESTAMP NOT NULL,
        latitude FLOAT NOT NULL,
        longitude FLOAT NOT NULL,
        police_count INTEGER NOT NULL DEFAULT 0,
        arrested_count INTEGER NOT NULL DEFAULT 0,
        car_plates TEXT,
        notes TEXT,
        created_by INTEGER REFERENCES users(id),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS media (
        id SERIAL PRIMARY KEY,
        event_id INTEGER NOT NULL REFERENCES arrest_events(id) ON DELETE CASCADE,
        file_path VARCHAR(500) NOT NULL,
        type VARCHAR(50) NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS subscriptions (
        id SERIAL PRIMARY KEY,
        event_id INTEGER NOT NULL REFERENCES arrest_events(id) ON DELETE CASCADE,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (event_id, user_id)
    );
    """,
]


def init_db(db: Database) -> None:
    """
    Create every table the services read and write.

    The postgis extension runs in its own transaction: hosts without it
    still get a working schema.
    """
    try:
        with db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(POSTGIS_SQL)
    except (InternalError, psycopg2.Error) as e:
        logging.warning(f"Could not enable postgis, continuing without it: {e}")

    with db.transaction() as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA_SQL:
                cur.execute(statement)

    logging.info("Database schema initialized.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    try:
        init_db(Database(Config.from_env().database_url))
    except InternalError as e:
        logging.error(f"Schema initialization failed: {e}")
        sys.exit(1)

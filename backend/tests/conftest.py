import os
from dataclasses import replace

import pytest
from flask import Flask

from backend.config import Config
from backend.context import AppContext
from backend.errors import ConflictError
from backend.gateway.server import create_app
from backend.media_service.storage import BlobStore
from backend.models import Subscription, User

# Ensure JWT_SECRET is set for tests
os.environ["JWT_SECRET"] = "test_secret"


# --- IN-MEMORY REPOSITORIES ---
# Same method surface as the psycopg2 repositories; the unique constraints
# the database enforces are enforced here by hand.

class InMemoryUsers:
    def __init__(self):
        self.rows = {}
        self.next_id = 1

    def get_by_email(self, email):
        for user in self.rows.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id):
        user = self.rows.get(user_id)
        return replace(user) if user else None

    def create(self, email, password_hash, role):
        if self.get_by_email(email) is not None:
            raise ConflictError("user already exists")
        user = User(id=self.next_id, email=email, role=role, password_hash=password_hash)
        self.rows[user.id] = user
        self.next_id += 1
        return replace(user)


class InMemoryEvents:
    def __init__(self):
        self.rows = {}
        self.next_id = 1

    def list_all(self):
        return sorted((replace(e) for e in self.rows.values()), key=lambda e: e.time, reverse=True)

    def get(self, event_id):
        event = self.rows.get(event_id)
        return replace(event) if event else None

    def create(self, event):
        event_id = self.next_id
        self.next_id += 1
        self.rows[event_id] = replace(event, id=event_id)
        return event_id

    def update(self, event):
        stored = self.rows[event.id]
        self.rows[event.id] = replace(event, created_by=stored.created_by)

    def delete(self, event_id):
        self.rows.pop(event_id, None)


class InMemorySubscriptions:
    def __init__(self, users):
        self.users = users
        self.rows = []
        self.next_id = 1

    def subscribe(self, event_id, user_id):
        if self.is_subscribed(event_id, user_id):
            return
        self.rows.append(Subscription(id=self.next_id, event_id=event_id, user_id=user_id))
        self.next_id += 1

    def unsubscribe(self, event_id, user_id):
        self.rows = [s for s in self.rows if not (s.event_id == event_id and s.user_id == user_id)]

    def subscribers(self, event_id):
        return [self.users.get_by_id(s.user_id) for s in self.rows if s.event_id == event_id]

    def is_subscribed(self, event_id, user_id):
        return any(s.event_id == event_id and s.user_id == user_id for s in self.rows)

    def for_user(self, user_id):
        return [s for s in reversed(self.rows) if s.user_id == user_id]


class InMemoryMedia:
    def __init__(self):
        self.rows = {}
        self.next_id = 1

    def list_for_event(self, event_id):
        found = [replace(m) for m in self.rows.values() if m.event_id == event_id]
        return sorted(found, key=lambda m: m.id, reverse=True)

    def get(self, media_id):
        media = self.rows.get(media_id)
        return replace(media) if media else None

    def create(self, media):
        stored = replace(media, id=self.next_id)
        self.rows[stored.id] = stored
        self.next_id += 1
        return replace(stored)

    def delete(self, media_id):
        self.rows.pop(media_id, None)


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def dispatch(self, event_id, recipients, message):
        self.calls.append((event_id, list(recipients), message))
        return len(recipients)


# --- FIXTURES ---

@pytest.fixture
def media_dir(tmp_path):
    return tmp_path / "media"


@pytest.fixture
def config(media_dir):
    return Config(
        database_url="postgresql://unused",
        jwt_secret="test_secret",
        media_dir=str(media_dir),
        password_time_cost=1,
    )


@pytest.fixture
def users():
    return InMemoryUsers()


@pytest.fixture
def events():
    return InMemoryEvents()


@pytest.fixture
def subscriptions(users):
    return InMemorySubscriptions(users)


@pytest.fixture
def media_repo():
    return InMemoryMedia()


@pytest.fixture
def blobs(config):
    return BlobStore(config.media_dir)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def context(config, users, events, subscriptions, media_repo, blobs, notifier):
    return AppContext(
        config,
        users=users,
        events=events,
        subscriptions=subscriptions,
        media=media_repo,
        blobs=blobs,
        notifier=notifier,
    )


@pytest.fixture
def app(context) -> Flask:
    app = create_app(context=context)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(context):
    """
    Register a user straight through the auth service and return
    (user, auth_headers).
    """
    def _make(email, role="spotter", password="password123"):
        user = context.auth.register(email, password, role)
        token = context.credentials.issue(user.id, user.role)
        return user, {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def spotter(make_user):
    return make_user("spotter@example.com", "spotter")


@pytest.fixture
def advocate(make_user):
    return make_user("advocate@example.com", "advocate")


@pytest.fixture
def event_id(client, spotter):
    _, headers = spotter
    response = client.post("/api/events", json={"latitude": 1.0, "longitude": 2.0}, headers=headers)
    return response.get_json()["id"]


@pytest.fixture
def mock_db(mocker):
    """
    Mocks the psycopg2 connection and cursor.
    """
    mock_conn = mocker.MagicMock()
    mock_cursor = mocker.MagicMock()

    # Setup the context manager for cursor
    mock_conn.cursor.return_value.__enter__.return_value = mock_cursor
    mock_conn.cursor.return_value.__exit__.return_value = None

    mocker.patch("backend.database.db_connection.psycopg2.connect", return_value=mock_conn)

    return mock_conn, mock_cursor

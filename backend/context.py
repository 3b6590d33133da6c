"""
Application context: the one object that owns configuration and every
service, built once per process and handed to the Flask app.
"""

from flask import current_app

from backend.auth_service.repository import UserRepository
from backend.auth_service.service import AuthService
from backend.auth_service.utils import CredentialService
from backend.config import Config
from backend.database.db_connection import Database
from backend.events_service.repository import EventRepository, SubscriptionRepository
from backend.events_service.service import EventService
from backend.media_service.repository import MediaRepository
from backend.media_service.service import MediaService
from backend.media_service.storage import BlobStore
from backend.witness_service.notifier import LogNotifier
from backend.witness_service.service import WitnessService

EXTENSION_KEY = "protest_tracker"


class AppContext:
    """
    Wires services from explicitly supplied collaborators.

    Args:
        config (Config): Process configuration.
        users, events, subscriptions, media: Repositories (SQL in production).
        blobs: Blob store for uploaded media.
        notifier: Witness message transport.
    """

    def __init__(self, config: Config, users, events, subscriptions, media, blobs, notifier):
        self.config = config
        self.credentials = CredentialService(config.jwt_secret, time_cost=config.password_time_cost)
        self.auth = AuthService(users, self.credentials)
        self.events = EventService(events, subscriptions, blobs)
        self.media = MediaService(media, events, blobs)
        self.witnesses = WitnessService(subscriptions, events, notifier)

    @classmethod
    def from_config(cls, config: Config) -> "AppContext":
        """Production wiring: PostgreSQL repositories, filesystem blobs, log notifier."""
        db = Database(config.database_url)
        return cls(
            config,
            users=UserRepository(db),
            events=EventRepository(db),
            subscriptions=SubscriptionRepository(db),
            media=MediaRepository(db),
            blobs=BlobStore(config.media_dir),
            notifier=LogNotifier(),
        )


def get_context() -> AppContext:
    """Context of the running Flask app."""
    return current_app.extensions[EXTENSION_KEY]

"""
Event store rules and the subscription index.

Validation happens here, before anything touches the database. Existence
checks raise NotFoundError so callers can tell "missing" from "malformed".
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from backend.errors import ForbiddenError, NotFoundError, ValidationError
from backend.models import ArrestEvent, Identity, Subscription, User


def parse_dt(val: Any) -> Optional[datetime]:
    """
    Safely parse an ISO-8601 string to a naive UTC datetime.

    Returns:
        datetime: The parsed datetime, or None if invalid.
    """
    if not isinstance(val, str) or not val:
        return None
    try:
        # Handles 'YYYY-MM-DDTHH:MM' and '...Z' or '...+00:00'
        if val.endswith("Z"):
            val = val[:-1] + "+00:00"
        parsed = datetime.fromisoformat(val)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _is_number(val: Any) -> bool:
    return isinstance(val, (int, float)) and not isinstance(val, bool)


def _count(data: Dict[str, Any], key: str, current: int) -> int:
    if key not in data or data[key] is None:
        return current
    val = data[key]
    if not isinstance(val, int) or isinstance(val, bool) or val < 0:
        raise ValidationError(f"{key} must be a non-negative integer")
    return val


def _text(data: Dict[str, Any], key: str, current: Optional[str]) -> Optional[str]:
    if key not in data:
        return current
    val = data[key]
    if val is not None and not isinstance(val, str):
        raise ValidationError(f"{key} must be a string")
    return val


def build_event(data: Dict[str, Any], base: Optional[ArrestEvent] = None) -> ArrestEvent:
    """
    Apply a JSON payload (wire names) onto an event and validate the result.

    Latitude and longitude of exactly 0 are treated as "unset" and rejected,
    so events on the equator or the prime meridian cannot be recorded.

    Raises:
        ValidationError: On any malformed or missing field.
    """
    if base is None:
        base = ArrestEvent(
            id=None,
            time=datetime.now(timezone.utc).replace(tzinfo=None),
            latitude=0,
            longitude=0,
        )

    event_time = base.time
    if "time" in data and data["time"] is not None:
        event_time = parse_dt(data["time"])
        if event_time is None:
            raise ValidationError("Invalid time format. Use ISO-8601.")

    latitude = data.get("latitude", base.latitude)
    longitude = data.get("longitude", base.longitude)
    if not _is_number(latitude) or not _is_number(longitude):
        raise ValidationError("latitude and longitude must be numbers")
    if latitude == 0 or longitude == 0:
        raise ValidationError("latitude and longitude are required")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ValidationError("latitude or longitude out of range")

    return replace(
        base,
        time=event_time,
        latitude=float(latitude),
        longitude=float(longitude),
        police_count=_count(data, "policeCount", base.police_count),
        arrested_count=_count(data, "arrestedCount", base.arrested_count),
        car_plates=_text(data, "carPlates", base.car_plates),
        notes=_text(data, "notes", base.notes),
    )


def can_modify_event(identity: Identity, event: ArrestEvent) -> bool:
    """
    Single policy point for event update/delete.

    Any authenticated caller may currently edit or delete any event. This is
    most likely too permissive; restricting it to the creator
    (`event.created_by == identity.user_id`) or to advocates only needs a
    change here.
    """
    return True


class EventService:
    def __init__(self, events, subscriptions, blobs=None):
        self.events = events
        self.subscriptions = subscriptions
        self.blobs = blobs

    # --- EVENTS ---
    def list_events(self) -> List[ArrestEvent]:
        return self.events.list_all()

    def get_event(self, event_id: int) -> ArrestEvent:
        event = self.events.get(event_id)
        if event is None:
            raise NotFoundError("event not found")
        return event

    def create_event(self, data: Dict[str, Any], identity: Identity) -> ArrestEvent:
        """
        Create an event owned by the authenticated caller.

        Any createdBy in the payload is ignored.
        """
        event = replace(build_event(data), created_by=identity.user_id)
        event.id = self.events.create(event)
        logging.info(f"[Events] User {identity.user_id} created event {event.id}")
        return event

    def update_event(self, event_id: int, data: Dict[str, Any], identity: Identity) -> ArrestEvent:
        current = self.get_event(event_id)
        if not can_modify_event(identity, current):
            raise ForbiddenError("permission denied")

        updated = build_event(data, base=current)
        self.events.update(updated)
        return updated

    def delete_event(self, event_id: int, identity: Identity) -> None:
        """
        Delete an event. Its media and subscription rows cascade in the
        database; the event's blob directory is removed afterwards.
        """
        current = self.get_event(event_id)
        if not can_modify_event(identity, current):
            raise ForbiddenError("permission denied")

        self.events.delete(event_id)
        logging.info(f"[Events] User {identity.user_id} deleted event {event_id}")

        if self.blobs is not None:
            try:
                self.blobs.remove_event_dir(event_id)
            except OSError as e:
                logging.warning(f"[Events] Could not remove media for event {event_id}: {e}")

    # --- SUBSCRIPTIONS ---
    def subscribe(self, event_id: int, user_id: int) -> None:
        """Subscribing twice is a no-op, not an error."""
        self.get_event(event_id)
        self.subscriptions.subscribe(event_id, user_id)

    def unsubscribe(self, event_id: int, user_id: int) -> None:
        """Removing a subscription that does not exist is a no-op."""
        self.subscriptions.unsubscribe(event_id, user_id)

    def is_subscribed(self, event_id: int, user_id: int) -> bool:
        return self.subscriptions.is_subscribed(event_id, user_id)

    def subscriptions_for(self, user_id: int) -> List[Subscription]:
        return self.subscriptions.for_user(user_id)

    def subscribers(self, event_id: int) -> List[User]:
        return self.subscriptions.subscribers(event_id)

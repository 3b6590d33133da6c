"""
Events service routes: create, read, update, delete arrest events, and
subscribe/unsubscribe as a witness.

Every route requires an authenticated caller of any role.
"""

from typing import Tuple

from flask import Blueprint, jsonify, Response

from backend.auth_service.gate import AUTHENTICATED, current_identity, requires
from backend.context import get_context
from backend.request_utils import read_json

events_bp = Blueprint("events", __name__)


@events_bp.route("/events", methods=["GET"])
@requires(AUTHENTICATED)
def list_events() -> Tuple[Response, int]:
    """
    Return all events, most recent first.

    Returns:
        200: List of event objects.
    """
    events = get_context().events.list_events()
    return jsonify([e.to_dict() for e in events]), 200


@events_bp.route("/events/<int:event_id>", methods=["GET"])
@requires(AUTHENTICATED)
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        404: Event not found.
    """
    event = get_context().events.get_event(event_id)
    return jsonify(event.to_dict()), 200


@events_bp.route("/events", methods=["POST"])
@requires(AUTHENTICATED)
def create_event() -> Tuple[Response, int]:
    """
    Create an event. The creator is always the caller.

    Expects JSON with latitude and longitude (non-zero), and optionally
    time, policeCount, arrestedCount, carPlates, notes.

    Returns:
        201: { "id": int }
        400: Validation error.
    """
    data = read_json()
    event = get_context().events.create_event(data, current_identity())
    return jsonify({"id": event.id}), 201


@events_bp.route("/events/<int:event_id>", methods=["PUT"])
@requires(AUTHENTICATED)
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Update an event. Supplied fields replace the stored ones.

    Returns:
        200: Message and the updated event.
        400: Validation error.
        404: Event not found.
    """
    data = read_json()
    event = get_context().events.update_event(event_id, data, current_identity())
    return jsonify({"message": "Event updated successfully", "event": event.to_dict()}), 200


@events_bp.route("/events/<int:event_id>", methods=["DELETE"])
@requires(AUTHENTICATED)
def delete_event(event_id: int) -> Tuple[Response, int]:
    get_context().events.delete_event(event_id, current_identity())
    return jsonify({"message": "Event deleted successfully"}), 200


# --- SUBSCRIPTIONS ---

@events_bp.route("/events/<int:event_id>/subscribe", methods=["POST"])
@requires(AUTHENTICATED)
def subscribe(event_id: int) -> Tuple[Response, int]:
    """
    Subscribe the caller to an event as a potential witness.
    Subscribing again is harmless.
    """
    get_context().events.subscribe(event_id, current_identity().user_id)
    return jsonify({"message": "Subscribed successfully"}), 200


@events_bp.route("/events/<int:event_id>/subscribe", methods=["DELETE"])
@requires(AUTHENTICATED)
def unsubscribe(event_id: int) -> Tuple[Response, int]:
    get_context().events.unsubscribe(event_id, current_identity().user_id)
    return jsonify({"message": "Unsubscribed successfully"}), 200


@events_bp.route("/events/<int:event_id>/subscribe", methods=["GET"])
@requires(AUTHENTICATED)
def subscription_status(event_id: int) -> Tuple[Response, int]:
    subscribed = get_context().events.is_subscribed(event_id, current_identity().user_id)
    return jsonify({"subscribed": subscribed}), 200


@events_bp.route("/subscriptions", methods=["GET"])
@requires(AUTHENTICATED)
def my_subscriptions() -> Tuple[Response, int]:
    subs = get_context().events.subscriptions_for(current_identity().user_id)
    return jsonify([s.to_dict() for s in subs]), 200

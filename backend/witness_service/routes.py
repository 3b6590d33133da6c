"""
Witness routes (advocates only).
"""

from typing import Tuple

from flask import Blueprint, jsonify, Response

from backend.auth_service.gate import ADVOCATE, requires
from backend.context import get_context
from backend.request_utils import read_json

witness_bp = Blueprint("witness", __name__)


@witness_bp.route("/events/<int:event_id>/contact-witnesses", methods=["POST"])
@requires(ADVOCATE)
def contact_witnesses(event_id: int) -> Tuple[Response, int]:
    """
    Message every witness subscribed to an event.

    Expects JSON: { "message": str }

    Returns:
        200: Confirmation with the number of witnesses contacted.
        400: Empty message or no witnesses subscribed.
        404: Event not found.
    """
    data = read_json()
    message = data.get("message")
    if not isinstance(message, str):
        message = ""

    emails = get_context().witnesses.contact_witnesses(event_id, message)
    return jsonify({"message": "Witnesses notified", "count": len(emails)}), 200


@witness_bp.route("/events/<int:event_id>/witness-count", methods=["GET"])
@requires(ADVOCATE)
def witness_count(event_id: int) -> Tuple[Response, int]:
    count = get_context().witnesses.witness_count(event_id)
    return jsonify({"count": count}), 200

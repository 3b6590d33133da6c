"""
Authentication route handlers.

Provides routes for:
- User registration
- User login

Hashing and token logic is delegated to `auth_service.utils` through the
application context.
"""

from typing import Tuple

from flask import Blueprint, jsonify, Response

from backend.context import get_context
from backend.request_utils import read_json

auth_bp = Blueprint("auth", __name__)


# --- REGISTER ---
@auth_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new user.

    Expects a JSON body with:
    - email (str): Unique email address (stored as given).
    - password (str)
    - role (str, optional): "spotter" (default) or "advocate".

    Returns:
        201: JSON with id, email and role.
        400: Missing fields or invalid role.
        409: Email already exists.
    """
    data = read_json()
    user = get_context().auth.register(
        data.get("email"),
        data.get("password"),
        data.get("role"),
    )
    return jsonify(user.to_dict()), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: JSON with token, user_id and role.
        400: Missing credentials.
        401: Invalid credentials (wrong password or email).
    """
    data = read_json()
    token, user = get_context().auth.login(
        data.get("email"),
        data.get("password"),
    )
    return jsonify({"token": token, "user_id": user.id, "role": user.role}), 200

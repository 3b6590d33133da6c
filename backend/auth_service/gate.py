"""
Access gate: request-level authentication and role authorization.

Every protected view is wrapped with `requires(<capability>)`. The check runs
in a fixed order, short-circuiting on the first failure:

    1. Authorization header present          -> 401 "authorization required"
    2. Header is "Bearer <token>"            -> 401 "invalid format"
    3. Token signature and expiry are valid  -> 401 "invalid token"
    4. Identity attached to flask.g (request-scoped, immutable)
    5. Capability predicate holds            -> 403 e.g. "advocate access required"

Nothing is cached between requests.
"""

from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional

from flask import g, request

from backend.auth_service.utils import CredentialService
from backend.context import get_context
from backend.errors import AuthError, ForbiddenError
from backend.models import Identity

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Capability:
    name: str
    predicate: Callable[[Identity], bool]
    denied_message: str = "permission denied"


AUTHENTICATED = Capability("authenticated", lambda identity: True)
ADVOCATE = Capability(
    "advocate",
    lambda identity: identity.is_advocate,
    "advocate access required",
)


def authenticate(credentials: CredentialService, header: Optional[str]) -> Identity:
    """
    Turn an Authorization header value into an Identity.

    Raises:
        AuthError: On a missing header, a header without the Bearer prefix,
            or a token that fails validation.
    """
    if not header:
        raise AuthError("authorization required")

    if not header.startswith(BEARER_PREFIX):
        raise AuthError("invalid format")

    token = header[len(BEARER_PREFIX):]
    claims = credentials.validate(token)
    return Identity(user_id=claims.user_id, role=claims.role)


def authorize(identity: Identity, capability: Capability) -> None:
    if not capability.predicate(identity):
        raise ForbiddenError(capability.denied_message)


def requires(capability: Capability):
    """
    Route decorator evaluating the gate for a single view.

    Usage:
        @events_bp.route("/events", methods=["POST"])
        @requires(AUTHENTICATED)
        def create_event(): ...
    """
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            credentials = get_context().credentials
            identity = authenticate(credentials, request.headers.get("Authorization"))
            g.identity = identity
            authorize(identity, capability)
            return view(*args, **kwargs)
        return wrapper
    return decorator


def current_identity() -> Identity:
    """Identity attached by the gate for the current request."""
    identity = g.get("identity")
    if identity is None:
        raise AuthError("authorization required")
    return identity

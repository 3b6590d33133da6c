"""
Credential helpers.
Provides password hashing/verification and token issuance/validation.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import Argon2Error, InvalidHashError

from backend.errors import AuthError, InternalError
from backend.models import Claims

TOKEN_LIFETIME = timedelta(hours=24)
JWT_ALGORITHM = "HS256"


class CredentialService:
    """
    Password hashing and signed-token handling bound to one signing secret.

    Args:
        jwt_secret (str): Shared HMAC secret for every token the process issues.
        time_cost (int): Argon2 cost factor (iterations).
    """

    def __init__(self, jwt_secret: str, time_cost: int = 3):
        self._secret = jwt_secret
        self._hasher = PasswordHasher(time_cost=time_cost)

    # --- PASSWORDS ---
    def hash(self, password: str) -> str:
        """
        One-way, salted Argon2 hash.

        Raises:
            InternalError: If the hashing library fails.
        """
        try:
            return self._hasher.hash(password)
        except Exception as e:
            raise InternalError(f"password hashing failed: {e}") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a password against a stored hash.

        Any mismatch, including a malformed hash or a non-string argument,
        is simply False.
        """
        if not isinstance(password, str) or not isinstance(password_hash, str):
            return False
        try:
            return self._hasher.verify(password_hash, password)
        except (Argon2Error, InvalidHashError, UnicodeEncodeError):
            return False

    # --- JWT CREATION ---
    def issue(self, user_id: int, role: str, now: Optional[datetime] = None) -> str:
        """
        Generates a new JWT for a given user.

        Args:
            user_id (int): The unique ID of the user.
            role (str): The role of the user (spotter, advocate).
            now (datetime, optional): Issue time, defaults to the current UTC time.

        Returns:
            str: Encoded JWT string.
        """
        now = now or datetime.now(timezone.utc)

        payload = {
            "user_id": user_id,
            "role": role,
            "iat": now,
            "exp": now + TOKEN_LIFETIME,
        }

        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    # --- JWT VALIDATION ---
    def validate(self, token: str) -> Claims:
        """
        Verify signature and expiry of a token.

        Expired, tampered and malformed tokens all raise the same error.

        Raises:
            AuthError: "invalid token".
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError:
            raise AuthError("invalid token")

        user_id = payload.get("user_id")
        role = payload.get("role")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(role, str):
            raise AuthError("invalid token")

        return Claims(
            user_id=user_id,
            role=role,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

"""
Registration and login rules.
"""

import logging
from typing import Tuple

from backend.auth_service.utils import CredentialService
from backend.errors import AuthError, ConflictError, ValidationError
from backend.models import ROLE_SPOTTER, VALID_ROLES, User


def _require_credentials(email, password) -> None:
    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise ValidationError("email and password are required")


class AuthService:
    def __init__(self, users, credentials: CredentialService):
        self.users = users
        self.credentials = credentials

    def register(self, email: str, password: str, role: str = ROLE_SPOTTER) -> User:
        """
        Create an account. The role is fixed at creation.

        Raises:
            ValidationError: Missing email/password or unknown role.
            ConflictError: The email is already registered. The stored
                account is left untouched.
        """
        _require_credentials(email, password)

        role = role or ROLE_SPOTTER
        if not isinstance(role, str) or role not in VALID_ROLES:
            raise ValidationError("invalid role. Must be 'spotter' or 'advocate'")

        if self.users.get_by_email(email) is not None:
            raise ConflictError("user already exists")

        password_hash = self.credentials.hash(password)
        user = self.users.create(email, password_hash, role)
        logging.info(f"[Auth] Registered user {user.id} as {user.role}")
        return user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Check credentials and issue a token.

        Returns:
            tuple: (token, user)

        Raises:
            ValidationError: Missing email/password.
            AuthError: Unknown email or wrong password (same message for both).
        """
        _require_credentials(email, password)

        user = self.users.get_by_email(email)
        if user is None or not self.credentials.verify(password, user.password_hash):
            raise AuthError("invalid credentials")

        return self.credentials.issue(user.id, user.role), user

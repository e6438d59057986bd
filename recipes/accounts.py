from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .errors import BadInput
from .models import User
from .storage import UserRepository
from .validation import validate_email, validate_password

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "ROLE_USER"


class AccountService:
    """Registers users and checks their credentials."""

    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def register(self, email: Optional[str], password: Optional[str]) -> None:
        if not validate_email(email) or not validate_password(password):
            raise BadInput("Email or password is invalid.")

        if self._users.user_exists(email):
            raise BadInput(f"User '{email}' is already registered.")

        self._users.add_user(
            User(email=email, password=generate_password_hash(password), role=DEFAULT_ROLE)
        )
        logger.info("Registered user %s", email)

    def authenticate(self, email: Optional[str], password: Optional[str]) -> Optional[str]:
        """Return the caller identity for valid credentials, otherwise ``None``."""

        if not email or password is None:
            return None

        try:
            user = self._users.get_user(email)
        except KeyError:
            return None

        if not check_password_hash(user.password, password):
            return None
        return user.email


__all__ = ["AccountService"]

from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.caller import Caller
from ..core.enums import Role, UserType
from ..core.exceptions import AuthenticationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role
    user_type: UserType
    user_verified: bool

    def to_caller(self) -> Caller:
        return Caller(user_id=self.user_id, role=self.role)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email is required").lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            user_type=user.user_type,
            user_verified=user.user_verified,
        )

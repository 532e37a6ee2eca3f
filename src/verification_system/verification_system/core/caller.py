from __future__ import annotations

from dataclasses import dataclass

from .enums import Role
from .exceptions import AuthenticationError, AuthorizationError


@dataclass(frozen=True)
class Caller:
    """Authenticated identity passed explicitly into every service call."""

    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def require_caller(caller: Caller | None) -> Caller:
    if caller is None:
        raise AuthenticationError("Unauthorized: Not authenticated")
    return caller


def require_admin(caller: Caller | None, action: str) -> Caller:
    caller = require_caller(caller)
    if not caller.is_admin:
        raise AuthorizationError(f"Forbidden: Cannot {action} UserVerification")
    return caller

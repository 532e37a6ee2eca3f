from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def update_names(self, user_id: int, fields: Mapping[str, Any]) -> None:
        """Write any of first_name / middle_initial / last_name."""

        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role, UserType


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object; persistence lives in the repository.
    """

    user_id: int
    email: str
    name: str
    password_hash: str
    role: Role
    user_type: UserType
    first_name: Optional[str] = None
    middle_initial: Optional[str] = None
    last_name: Optional[str] = None
    user_verified: bool = False
    is_active: bool = True

    @property
    def requires_education_and_job_history(self) -> bool:
        return requires_education_and_job_history(self.user_type)


def requires_education_and_job_history(user_type: UserType) -> bool:
    """Only employees fill in the education and job history steps."""
    return user_type == UserType.EMPLOYEE

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AuditAction, VerificationStatus


@dataclass(frozen=True)
class VerificationRecord:
    """One row per user tracking the overall verification status.

    `rejection_reason` carries the rejection text for REJECTED and the
    request message for INFO_REQUESTED.
    """

    verification_id: int
    user_id: int
    status: VerificationStatus
    created_at: datetime
    updated_at: datetime
    submitted_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    verified_by: Optional[int] = None
    rejection_reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "verification_id": self.verification_id,
            "user_id": self.user_id,
            "status": self.status.value,
            "submitted_at": _iso(self.submitted_at),
            "verified_at": _iso(self.verified_at),
            "verified_by": self.verified_by,
            "rejection_reason": self.rejection_reason,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class StatusView:
    """A user's own status; synthesized as DRAFT when no record exists yet."""

    status: VerificationStatus
    verification_id: Optional[int] = None
    submitted_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "verification_id": self.verification_id,
            "status": self.status.value,
            "submitted_at": _iso(self.submitted_at),
            "verified_at": _iso(self.verified_at),
            "rejection_reason": self.rejection_reason,
        }


@dataclass(frozen=True)
class AuditLogEntry:
    audit_id: int
    verification_id: int
    admin_user_id: int
    action: AuditAction
    previous_status: VerificationStatus
    new_status: VerificationStatus
    created_at: datetime
    reason: Optional[str] = None
    admin_name: Optional[str] = None
    admin_email: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "audit_id": self.audit_id,
            "verification_id": self.verification_id,
            "admin_user_id": self.admin_user_id,
            "admin": {"name": self.admin_name, "email": self.admin_email},
            "action": self.action.value,
            "reason": self.reason,
            "previous_status": self.previous_status.value,
            "new_status": self.new_status.value,
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class Decision:
    """One admin decision: the record's new state plus its audit row."""

    verification_id: int
    user_id: int
    admin_user_id: int
    action: AuditAction
    previous_status: VerificationStatus
    new_status: VerificationStatus
    decided_at: datetime
    rejection_reason: Optional[str]
    audit_reason: Optional[str]
    stamp_verifier: bool
    mark_user_verified: bool


@dataclass(frozen=True)
class BulkError:
    id: int
    error: str


@dataclass
class BulkActionResult:
    succeeded: int = 0
    failed: int = 0
    total: int = 0
    errors: list[BulkError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "total": self.total,
            "errors": [{"id": e.id, "error": e.error} for e in self.errors],
        }


SORT_FIELDS = ("submitted_at", "created_at", "name")


@dataclass(frozen=True)
class SubmissionFilters:
    status: str = "all"
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None
    sort_by: str = "submitted_at"
    sort_order: str = "desc"


@dataclass(frozen=True)
class SubmissionRow:
    """A verification joined with its user, as listed in the admin table."""

    verification_id: int
    user_id: int
    status: VerificationStatus
    name: str
    email: str
    user_type: str
    created_at: datetime
    updated_at: datetime
    submitted_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "verification_id": self.verification_id,
            "user_id": self.user_id,
            "status": self.status.value,
            "submitted_at": _iso(self.submitted_at),
            "verified_at": _iso(self.verified_at),
            "rejection_reason": self.rejection_reason,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "user": {
                "name": self.name,
                "email": self.email,
                "first_name": self.first_name,
                "last_name": self.last_name,
                "user_type": self.user_type,
            },
        }


@dataclass(frozen=True)
class Page:
    data: list
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.page_size) if self.page_size else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [row.to_dict() for row in self.data],
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
        }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None

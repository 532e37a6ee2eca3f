from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import parse_enum, require_non_empty
from ..core.caller import Caller, require_admin, require_caller
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import AuditAction, BulkAction, VerificationStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..review.progress import AdminProgress, admin_progress
from ..sections.service import SectionService
from ..users.repository import UserRepository
from .model import (
    SORT_FIELDS,
    BulkActionResult,
    BulkError,
    Decision,
    Page,
    StatusView,
    SubmissionFilters,
    VerificationRecord,
)
from .repository import VerificationRepository
from .stats import VerificationStats, stats_window

logger = logging.getLogger(__name__)


class VerificationService:
    """Status transitions for verification records, plus the admin read side.

    Every operation takes the caller explicitly; privileged ones require an
    admin. Each decision is written together with exactly one audit entry.
    """

    def __init__(
        self,
        verifications: VerificationRepository,
        users: UserRepository,
        sections: SectionService,
    ):
        self._verifications = verifications
        self._users = users
        self._sections = sections

    # -------- End user --------
    def get_status(self, caller: Optional[Caller]) -> StatusView:
        caller = require_caller(caller)
        record = self._verifications.get_by_user(caller.user_id)
        if not record:
            return StatusView(status=VerificationStatus.DRAFT)
        return StatusView(
            status=record.status,
            verification_id=record.verification_id,
            submitted_at=record.submitted_at,
            verified_at=record.verified_at,
            rejection_reason=record.rejection_reason,
        )

    def submit(
        self,
        caller: Optional[Caller],
        *,
        document_type: Any,
        front_image_url: str,
        back_image_url: Optional[str] = None,
    ) -> int:
        """Finalize the caller's document and move their record to SUBMITTED.

        Re-submitting from any status is allowed.
        """
        caller = require_caller(caller)
        self._sections.submit_identity_document(
            caller,
            document_type=document_type,
            front_image_url=front_image_url,
            back_image_url=back_image_url,
        )
        verification_id = self._verifications.upsert_submitted(user_id=caller.user_id, submitted_at=now_local())
        logger.info("User %s submitted verification %s", caller.user_id, verification_id)
        return verification_id

    def get_progress(self, caller: Optional[Caller]) -> AdminProgress:
        """The four-step stepper the user sees while under review."""
        caller = require_caller(caller)
        status = self.get_status(caller).status
        return admin_progress(status, self._sections.review(caller))

    # -------- Admin decisions --------
    def _load(self, verification_id: int) -> VerificationRecord:
        record = self._verifications.get_by_id(int(verification_id))
        if not record:
            raise NotFoundError("Verification not found")
        return record

    def _decide(
        self,
        admin: Caller,
        record: VerificationRecord,
        *,
        action: AuditAction,
        new_status: VerificationStatus,
        rejection_reason: Optional[str],
        audit_reason: Optional[str],
        stamp_verifier: bool,
        mark_user_verified: bool = False,
    ) -> None:
        self._verifications.apply_decision(
            Decision(
                verification_id=record.verification_id,
                user_id=record.user_id,
                admin_user_id=admin.user_id,
                action=action,
                previous_status=record.status,
                new_status=new_status,
                decided_at=now_local(),
                rejection_reason=rejection_reason,
                audit_reason=audit_reason,
                stamp_verifier=stamp_verifier,
                mark_user_verified=mark_user_verified,
            )
        )
        logger.info(
            "Verification %s: %s -> %s by admin %s",
            record.verification_id,
            record.status.value,
            new_status.value,
            admin.user_id,
        )

    def approve(self, caller: Optional[Caller], verification_id: int, note: Optional[str] = None) -> None:
        admin = require_admin(caller, "update")
        record = self._load(verification_id)
        self._decide(
            admin,
            record,
            action=AuditAction.APPROVED,
            new_status=VerificationStatus.VERIFIED,
            rejection_reason=None,
            audit_reason=(note or "").strip() or None,
            stamp_verifier=True,
            mark_user_verified=True,
        )

    def reject(self, caller: Optional[Caller], verification_id: int, reason: Optional[str]) -> None:
        admin = require_admin(caller, "update")
        reason = require_non_empty(reason, "Rejection reason is required")
        record = self._load(verification_id)
        self._decide(
            admin,
            record,
            action=AuditAction.REJECTED,
            new_status=VerificationStatus.REJECTED,
            rejection_reason=reason,
            audit_reason=reason,
            stamp_verifier=True,
        )

    def request_info(self, caller: Optional[Caller], verification_id: int, reason: Optional[str]) -> None:
        admin = require_admin(caller, "update")
        reason = require_non_empty(reason, "Please specify what additional information is needed")
        record = self._load(verification_id)
        self._decide(
            admin,
            record,
            action=AuditAction.INFO_REQUESTED,
            new_status=VerificationStatus.INFO_REQUESTED,
            rejection_reason=reason,
            audit_reason=reason,
            stamp_verifier=False,
        )

    def bulk_action(
        self,
        caller: Optional[Caller],
        verification_ids: Sequence[int],
        action: Any,
        reason: Optional[str] = None,
    ) -> BulkActionResult:
        """Apply one decision to many records, isolating per-item failures."""
        admin = require_admin(caller, "update")
        action = parse_enum(BulkAction, action, "Invalid bulk action")
        if action != BulkAction.APPROVE and not (reason or "").strip():
            raise ValidationError("Reason is required for rejection and info requests")

        handlers = {
            BulkAction.APPROVE: lambda vid: self.approve(admin, vid, reason),
            BulkAction.REJECT: lambda vid: self.reject(admin, vid, reason),
            BulkAction.REQUEST_INFO: lambda vid: self.request_info(admin, vid, reason),
        }
        handler = handlers[action]

        result = BulkActionResult(total=len(verification_ids))
        for vid in verification_ids:
            try:
                handler(vid)
                result.succeeded += 1
            except Exception as e:
                # One bad id must not abort the batch.
                logger.warning("Bulk %s failed for verification %s: %s", action.value, vid, e)
                result.failed += 1
                result.errors.append(BulkError(id=vid, error=str(e) or "Unknown error"))
        return result

    # -------- Admin queries --------
    def list_submissions(
        self,
        caller: Optional[Caller],
        filters: Optional[SubmissionFilters] = None,
        *,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        require_admin(caller, "read")
        filters = filters or SubmissionFilters()
        if filters.status != "all":
            parse_enum(VerificationStatus, filters.status, "Invalid status filter")
        if filters.sort_by not in SORT_FIELDS:
            raise ValidationError("Invalid sort field")
        if filters.sort_order not in ("asc", "desc"):
            raise ValidationError("Invalid sort order")
        if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
            raise ValidationError("date_from must be on or before date_to")

        page = max(1, int(page))
        page_size = min(max(1, int(page_size)), MAX_PAGE_SIZE)
        rows, total = self._verifications.list_submissions(
            filters=filters,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return Page(data=list(rows), total=int(total), page=page, page_size=page_size)

    def get_detail(self, caller: Optional[Caller], verification_id: int) -> dict:
        """Record, user, every section and the audit history for the detail sheet."""
        require_admin(caller, "read")
        record = self._load(verification_id)
        user = self._users.get_by_id(record.user_id)
        if not user:
            raise NotFoundError("User not found")

        snap = self._sections.user_sections(record.user_id)
        documents = self._sections.user_documents(record.user_id)
        audit_logs = self._verifications.list_audit_logs(record.verification_id)
        review = self._sections.review_for(user, snap)
        progress: AdminProgress = admin_progress(record.status, review)

        return {
            "verification": record.to_dict(),
            "user": {
                "user_id": user.user_id,
                "name": user.name,
                "email": user.email,
                "first_name": user.first_name,
                "middle_initial": user.middle_initial,
                "last_name": user.last_name,
                "user_type": user.user_type.value,
                "user_verified": user.user_verified,
            },
            "personal_info": snap.personal_info.to_dict() if snap.personal_info else None,
            "education": snap.education.to_dict() if snap.education else None,
            "identity_documents": [d.to_dict() for d in documents],
            "job_history": [j.to_dict() for j in snap.jobs],
            "audit_logs": [a.to_dict() for a in audit_logs],
            "review": review.to_dict(),
            "progress": progress.to_dict(),
        }

    def get_stats(self, caller: Optional[Caller]) -> VerificationStats:
        require_admin(caller, "read")
        return self._verifications.count_stats(stats_window(now_local()))

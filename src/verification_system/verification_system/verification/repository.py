from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AuditLogEntry, Decision, SubmissionFilters, SubmissionRow, VerificationRecord
from .stats import StatsWindow, VerificationStats


class VerificationRepository(Protocol):
    def get_by_id(self, verification_id: int) -> Optional[VerificationRecord]:
        raise NotImplementedError

    def get_by_user(self, user_id: int) -> Optional[VerificationRecord]:
        raise NotImplementedError

    def upsert_submitted(self, *, user_id: int, submitted_at: datetime) -> int:
        """Create or move the user's record to SUBMITTED; returns its id."""

        raise NotImplementedError

    def apply_decision(self, decision: Decision) -> None:
        """Write the status change, the user flag and the audit row atomically."""

        raise NotImplementedError

    def list_submissions(
        self,
        *,
        filters: SubmissionFilters,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[SubmissionRow], int]:
        """Return (rows for the page, total matching rows)."""

        raise NotImplementedError

    def list_audit_logs(self, verification_id: int) -> Sequence[AuditLogEntry]:
        raise NotImplementedError

    def count_stats(self, window: StatsWindow) -> VerificationStats:
        """Dashboard counts for the given window, aggregated by the database."""

        raise NotImplementedError

from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Sequence

from ..core.enums import AuditAction, VerificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AuditLogEntry, Decision, SubmissionFilters, SubmissionRow, VerificationRecord
from .repository import VerificationRepository
from .stats import StatsWindow, VerificationStats

_RECORD_COLUMNS = """
    verification_id, user_id, status, submitted_at, verified_at, verified_by,
    rejection_reason, created_at, updated_at
"""

_SORT_COLUMNS = {
    "submitted_at": "v.submitted_at",
    "created_at": "v.created_at",
    "name": "u.name",
}


def row_to_record(r: dict) -> VerificationRecord:
    return VerificationRecord(
        verification_id=int(r["verification_id"]),
        user_id=int(r["user_id"]),
        status=VerificationStatus(r["status"]),
        submitted_at=r.get("submitted_at"),
        verified_at=r.get("verified_at"),
        verified_by=r.get("verified_by"),
        rejection_reason=r.get("rejection_reason"),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


class MySQLVerificationRepository(VerificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, verification_id: int) -> Optional[VerificationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM user_verifications WHERE verification_id=%s",
                (int(verification_id),),
            )
            r = fetchone(cur)
            return row_to_record(r) if r else None

    def get_by_user(self, user_id: int) -> Optional[VerificationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM user_verifications WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return row_to_record(r) if r else None

    def upsert_submitted(self, *, user_id: int, submitted_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_verifications(user_id, status, submitted_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    verification_id=LAST_INSERT_ID(verification_id),
                    status=VALUES(status),
                    submitted_at=VALUES(submitted_at),
                    rejection_reason=NULL
                """,
                (int(user_id), VerificationStatus.SUBMITTED.value, submitted_at),
            )
            return int(cur.lastrowid)

    def apply_decision(self, decision: Decision) -> None:
        # Single cursor: the update, the user flag and the audit row commit together.
        with db_cursor(self._conn_factory) as (_, cur):
            if decision.stamp_verifier:
                cur.execute(
                    """
                    UPDATE user_verifications
                    SET status=%s, verified_at=%s, verified_by=%s, rejection_reason=%s, updated_at=%s
                    WHERE verification_id=%s
                    """,
                    (
                        decision.new_status.value,
                        decision.decided_at,
                        int(decision.admin_user_id),
                        decision.rejection_reason,
                        decision.decided_at,
                        int(decision.verification_id),
                    ),
                )
            else:
                cur.execute(
                    """
                    UPDATE user_verifications
                    SET status=%s, rejection_reason=%s, updated_at=%s
                    WHERE verification_id=%s
                    """,
                    (
                        decision.new_status.value,
                        decision.rejection_reason,
                        decision.decided_at,
                        int(decision.verification_id),
                    ),
                )

            if decision.mark_user_verified:
                cur.execute("UPDATE users SET user_verified=1 WHERE user_id=%s", (int(decision.user_id),))

            cur.execute(
                """
                INSERT INTO verification_audit_log(
                    verification_id, admin_user_id, action, reason, previous_status, new_status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(decision.verification_id),
                    int(decision.admin_user_id),
                    decision.action.value,
                    decision.audit_reason,
                    decision.previous_status.value,
                    decision.new_status.value,
                    decision.decided_at,
                ),
            )

    def list_submissions(
        self,
        *,
        filters: SubmissionFilters,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[SubmissionRow], int]:
        clauses = ["1=1"]
        params: list[object] = []

        if filters.status == "all":
            clauses.append("v.status<>%s")
            params.append(VerificationStatus.DRAFT.value)
        else:
            clauses.append("v.status=%s")
            params.append(filters.status)
        if filters.date_from is not None:
            clauses.append("v.submitted_at>=%s")
            params.append(datetime.combine(filters.date_from, time.min))
        if filters.date_to is not None:
            clauses.append("v.submitted_at<=%s")
            params.append(datetime.combine(filters.date_to, time.max))
        if filters.search:
            like = f"%{filters.search.lower()}%"
            clauses.append(
                "(LOWER(u.name) LIKE %s OR LOWER(u.email) LIKE %s"
                " OR LOWER(u.first_name) LIKE %s OR LOWER(u.last_name) LIKE %s)"
            )
            params.extend([like] * 4)

        where = " AND ".join(clauses)
        order_col = _SORT_COLUMNS.get(filters.sort_by, "v.submitted_at")
        direction = "ASC" if filters.sort_order == "asc" else "DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM user_verifications v
                JOIN users u ON u.user_id = v.user_id
                WHERE {where}
                """,
                tuple(params),
            )
            total = int((fetchone(cur) or {}).get("total", 0))

            cur.execute(
                f"""
                SELECT v.verification_id, v.user_id, v.status, v.submitted_at, v.verified_at,
                       v.rejection_reason, v.created_at, v.updated_at,
                       u.name, u.email, u.first_name, u.last_name, u.user_type
                FROM user_verifications v
                JOIN users u ON u.user_id = v.user_id
                WHERE {where}
                ORDER BY {order_col} {direction}, v.verification_id {direction}
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            rows = [
                SubmissionRow(
                    verification_id=int(r["verification_id"]),
                    user_id=int(r["user_id"]),
                    status=VerificationStatus(r["status"]),
                    submitted_at=r.get("submitted_at"),
                    verified_at=r.get("verified_at"),
                    rejection_reason=r.get("rejection_reason"),
                    created_at=r["created_at"],
                    updated_at=r["updated_at"],
                    name=r["name"],
                    email=r["email"],
                    first_name=r.get("first_name"),
                    last_name=r.get("last_name"),
                    user_type=r["user_type"],
                )
                for r in fetchall(cur)
            ]
            return rows, total

    def list_audit_logs(self, verification_id: int) -> Sequence[AuditLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.audit_id, a.verification_id, a.admin_user_id, a.action, a.reason,
                       a.previous_status, a.new_status, a.created_at,
                       u.name AS admin_name, u.email AS admin_email
                FROM verification_audit_log a
                JOIN users u ON u.user_id = a.admin_user_id
                WHERE a.verification_id=%s
                ORDER BY a.created_at DESC, a.audit_id DESC
                """,
                (int(verification_id),),
            )
            return [
                AuditLogEntry(
                    audit_id=int(r["audit_id"]),
                    verification_id=int(r["verification_id"]),
                    admin_user_id=int(r["admin_user_id"]),
                    action=AuditAction(r["action"]),
                    reason=r.get("reason"),
                    previous_status=VerificationStatus(r["previous_status"]),
                    new_status=VerificationStatus(r["new_status"]),
                    created_at=r["created_at"],
                    admin_name=r.get("admin_name"),
                    admin_email=r.get("admin_email"),
                )
                for r in fetchall(cur)
            ]

    def count_stats(self, window: StatsWindow) -> VerificationStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COALESCE(SUM(status=%s), 0) AS pending,
                    COALESCE(SUM(status=%s AND verified_at>=%s), 0) AS approved_today,
                    COALESCE(SUM(status=%s AND verified_at>=%s), 0) AS approved_this_week,
                    COALESCE(SUM(status=%s AND updated_at>=%s), 0) AS rejected_today,
                    COALESCE(SUM(status=%s AND updated_at>=%s), 0) AS rejected_this_week,
                    COALESCE(SUM(status=%s), 0) AS awaiting_response
                FROM user_verifications
                """,
                (
                    VerificationStatus.SUBMITTED.value,
                    VerificationStatus.VERIFIED.value,
                    window.today_start,
                    VerificationStatus.VERIFIED.value,
                    window.week_start,
                    VerificationStatus.REJECTED.value,
                    window.today_start,
                    VerificationStatus.REJECTED.value,
                    window.week_start,
                    VerificationStatus.INFO_REQUESTED.value,
                ),
            )
            r = fetchone(cur) or {}
            return VerificationStats(**{name: int(r.get(name) or 0) for name in VerificationStats.__dataclass_fields__})

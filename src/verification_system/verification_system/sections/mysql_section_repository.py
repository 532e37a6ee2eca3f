from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import DocumentStatus, DocumentType, EducationLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_value, fetchall, fetchone, set_clause
from .model import EDUCATION_FIELDS, PROFILE_FIELDS, Education, IdentityDocument, JobEntry
from .repository import SectionRepository

_DOCUMENT_COLUMNS = """
    document_id, user_id, document_type, front_image_url, back_image_url,
    status, submitted_at, created_at
"""


def row_to_education(r: dict) -> Education:
    return Education(
        education_id=int(r["education_id"]),
        user_id=int(r["user_id"]),
        level=EducationLevel(r["level"]),
        school_name=r["school_name"],
        school_address=r.get("school_address"),
        degree=r.get("degree"),
        course=r.get("course"),
        track=r.get("track"),
        strand=r.get("strand"),
        year_started=r.get("year_started"),
        year_graduated=r.get("year_graduated"),
        is_currently_enrolled=bool(r.get("is_currently_enrolled", False)),
        honors=r.get("honors"),
    )


def row_to_job(r: dict) -> JobEntry:
    return JobEntry(
        job_id=int(r["job_id"]),
        company_name=r["company_name"],
        position=r["position"],
        start_month=r["start_month"],
        end_month=r.get("end_month"),
        is_current_job=bool(r.get("is_current_job", False)),
        summary=r["summary"],
    )


def row_to_document(r: dict) -> IdentityDocument:
    return IdentityDocument(
        document_id=int(r["document_id"]),
        user_id=int(r["user_id"]),
        document_type=DocumentType(r["document_type"]),
        front_image_url=r["front_image_url"],
        back_image_url=r.get("back_image_url"),
        status=DocumentStatus(r["status"]),
        submitted_at=r["submitted_at"],
        created_at=r["created_at"],
    )


class MySQLSectionRepository(SectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Profile --------
    def get_profile(self, user_id: int) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT age, birthday, gender, marital_status, phone_number
                FROM profiles
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            return fetchone(cur)

    def upsert_profile(self, user_id: int, fields: Mapping[str, Any]) -> None:
        values = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        if not values:
            return
        cols = ", ".join(values)
        placeholders = ", ".join(["%s"] * len(values))
        updates = ", ".join(f"{c}=VALUES({c})" for c in values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO profiles(user_id, {cols})
                VALUES(%s, {placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                tuple([int(user_id)] + [db_value(v) for v in values.values()]),
            )

    # -------- Education --------
    def get_education(self, user_id: int) -> Optional[Education]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT education_id, user_id, level, school_name, school_address, degree,
                       course, track, strand, year_started, year_graduated,
                       is_currently_enrolled, honors
                FROM education
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return row_to_education(r) if r else None

    def insert_education(self, user_id: int, fields: Mapping[str, Any]) -> int:
        values = {k: v for k, v in fields.items() if k in EDUCATION_FIELDS}
        cols = ", ".join(values)
        placeholders = ", ".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO education(user_id, {cols}) VALUES(%s, {placeholders})",
                tuple([int(user_id)] + [db_value(v) for v in values.values()]),
            )
            return int(cur.lastrowid)

    def update_education(self, education_id: int, fields: Mapping[str, Any]) -> None:
        values = {k: v for k, v in fields.items() if k in EDUCATION_FIELDS}
        if not values:
            return
        clause, params = set_clause(values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE education SET {clause} WHERE education_id=%s",
                tuple(params + [int(education_id)]),
            )

    # -------- Job history --------
    def list_jobs(self, user_id: int) -> Sequence[JobEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT job_id, company_name, position, start_month, end_month,
                       is_current_job, summary
                FROM job_history
                WHERE user_id=%s
                ORDER BY created_at DESC, job_id ASC
                """,
                (int(user_id),),
            )
            return [row_to_job(r) for r in fetchall(cur)]

    def replace_jobs(self, user_id: int, jobs: Sequence[JobEntry]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM job_history WHERE user_id=%s", (int(user_id),))
            if not jobs:
                return
            cur.executemany(
                """
                INSERT INTO job_history(
                    user_id, company_name, position, start_month, end_month, is_current_job, summary
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        int(user_id),
                        j.company_name,
                        j.position,
                        j.start_month,
                        j.end_month,
                        int(j.is_current_job),
                        j.summary,
                    )
                    for j in jobs
                ],
            )

    # -------- Identity documents --------
    def get_current_document(self, user_id: int) -> Optional[IdentityDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DOCUMENT_COLUMNS}
                FROM identity_documents
                WHERE user_id=%s
                ORDER BY created_at DESC, document_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return row_to_document(r) if r else None

    def get_document(self, user_id: int, document_id: int) -> Optional[IdentityDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DOCUMENT_COLUMNS}
                FROM identity_documents
                WHERE document_id=%s AND user_id=%s
                """,
                (int(document_id), int(user_id)),
            )
            r = fetchone(cur)
            return row_to_document(r) if r else None

    def insert_document(
        self,
        *,
        user_id: int,
        document_type: DocumentType,
        front_image_url: str,
        back_image_url: Optional[str],
        status: DocumentStatus,
        submitted_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO identity_documents(
                    user_id, document_type, front_image_url, back_image_url, status, submitted_at
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    document_type.value,
                    front_image_url,
                    back_image_url,
                    status.value,
                    submitted_at,
                ),
            )
            return int(cur.lastrowid)

    def update_document(self, document_id: int, fields: Mapping[str, Any]) -> None:
        if not fields:
            return
        clause, params = set_clause(fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE identity_documents SET {clause} WHERE document_id=%s",
                tuple(params + [int(document_id)]),
            )

    def delete_document(self, document_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM identity_documents WHERE document_id=%s", (int(document_id),))

    def list_documents(self, user_id: int) -> Sequence[IdentityDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DOCUMENT_COLUMNS}
                FROM identity_documents
                WHERE user_id=%s
                ORDER BY created_at DESC, document_id DESC
                """,
                (int(user_id),),
            )
            return [row_to_document(r) for r in fetchall(cur)]

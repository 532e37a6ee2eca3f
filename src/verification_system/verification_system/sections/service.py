from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import parse_enum, require_max_length, require_month, require_non_empty
from ..core.caller import Caller, require_caller
from ..core.constants import JOB_SUMMARY_MAX_LENGTH
from ..core.enums import DocumentStatus, DocumentType, EducationLevel, Gender, MaritalStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..review.completeness import ReviewData, evaluate
from ..storage.files import FileStorage, file_keys
from ..users.model import User
from ..users.repository import UserRepository
from .model import (
    EDUCATION_FIELDS,
    HONORS,
    PROFILE_FIELDS,
    SENIOR_HIGH_STRANDS,
    SENIOR_HIGH_TRACKS,
    USER_NAME_FIELDS,
    Education,
    IdentityDocument,
    JobEntry,
    PersonalInfo,
    SaveDocumentResult,
    SectionSnapshot,
)
from .repository import SectionRepository

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"^\d*$")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class SectionService:
    """Use cases for the wizard sections, always scoped to the caller's own user."""

    def __init__(self, users: UserRepository, sections: SectionRepository, storage: FileStorage):
        self._users = users
        self._sections = sections
        self._storage = storage

    # -------- Personal info --------
    def get_personal_info(self, caller: Optional[Caller]) -> Optional[PersonalInfo]:
        """Combined name + profile fields, or None when nothing is filled in."""
        caller = require_caller(caller)
        return self._personal_info_for(caller.user_id)

    def _personal_info_for(self, user_id: int) -> Optional[PersonalInfo]:
        user = self._users.get_by_id(user_id)
        if not user:
            return None

        profile = self._sections.get_profile(user_id) or {}
        age = profile.get("age")
        birthday = profile.get("birthday")
        info = PersonalInfo(
            first_name=user.first_name,
            middle_initial=user.middle_initial,
            last_name=user.last_name,
            age=int(age) if age not in (None, "") else None,
            birthday=birthday.date() if hasattr(birthday, "date") else birthday,
            gender=profile.get("gender"),
            marital_status=profile.get("marital_status"),
            phone_number=profile.get("phone_number"),
        )
        return None if info.is_empty else info

    @staticmethod
    def _clean_personal_info(data: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key in USER_NAME_FIELDS + PROFILE_FIELDS:
            if key not in data:
                continue
            value = _blank_to_none(data[key])
            if value is None:
                out[key] = None
            elif key == "middle_initial":
                out[key] = require_max_length(str(value).strip(), "Middle initial", 1)
            elif key == "age":
                try:
                    age = int(value)
                except (TypeError, ValueError):
                    raise ValidationError("Age must be a number")
                if age < 1:
                    raise ValidationError("Age must be at least 1")
                if age > 150:
                    raise ValidationError("Age must be less than 150")
                out[key] = str(age)
            elif key == "birthday":
                try:
                    out[key] = parse_iso_date(str(value))
                except ValueError:
                    raise ValidationError("Birthday must use YYYY-MM-DD format")
            elif key == "gender":
                out[key] = parse_enum(Gender, value, "Please select a gender").value
            elif key == "marital_status":
                out[key] = parse_enum(MaritalStatus, value, "Please select a marital status").value
            elif key == "phone_number":
                phone = str(value).strip()
                if not _DIGITS_RE.match(phone):
                    raise ValidationError("Phone number must contain only digits")
                out[key] = phone
            else:
                out[key] = str(value).strip()
        return out

    def update_personal_info(self, caller: Optional[Caller], data: Mapping[str, Any]) -> None:
        """Partial update: only keys present in `data` are written."""
        caller = require_caller(caller)
        cleaned = self._clean_personal_info(data)

        user_fields = {k: v for k, v in cleaned.items() if k in USER_NAME_FIELDS}
        profile_fields = {k: v for k, v in cleaned.items() if k in PROFILE_FIELDS}

        if user_fields:
            self._users.update_names(caller.user_id, user_fields)
        if profile_fields:
            self._sections.upsert_profile(caller.user_id, profile_fields)

    # -------- Education --------
    def get_education(self, caller: Optional[Caller]) -> Optional[Education]:
        caller = require_caller(caller)
        return self._sections.get_education(caller.user_id)

    @staticmethod
    def _clean_education(data: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key in EDUCATION_FIELDS:
            if key not in data:
                continue
            value = _blank_to_none(data[key])
            if key == "is_currently_enrolled":
                out[key] = bool(value)
            elif value is None:
                out[key] = None
            elif key == "level":
                out[key] = parse_enum(EducationLevel, value, "Please select your education level")
            elif key == "track" and value not in SENIOR_HIGH_TRACKS:
                raise ValidationError("Invalid senior high track")
            elif key == "strand" and value not in SENIOR_HIGH_STRANDS:
                raise ValidationError("Invalid senior high strand")
            elif key == "honors" and value not in HONORS:
                raise ValidationError("Invalid honors value")
            else:
                out[key] = str(value).strip()
        return out

    def update_education(self, caller: Optional[Caller], data: Mapping[str, Any]) -> None:
        """Upsert the caller's single education row with the keys present in `data`."""
        caller = require_caller(caller)
        fields = self._clean_education(data)
        if not fields:
            return

        existing = self._sections.get_education(caller.user_id)
        if existing:
            if "level" in fields and fields["level"] is None:
                raise ValidationError("Please select your education level")
            if "school_name" in fields and not fields["school_name"]:
                raise ValidationError("School name is required")
            self._sections.update_education(existing.education_id, fields)
            return

        if not fields.get("level") or not fields.get("school_name"):
            raise ValidationError("Education level and school name are required")
        self._sections.insert_education(caller.user_id, fields)

    # -------- Job history --------
    def get_job_history(self, caller: Optional[Caller]) -> list[JobEntry]:
        caller = require_caller(caller)
        return list(self._sections.list_jobs(caller.user_id))

    @staticmethod
    def parse_job(data: Mapping[str, Any]) -> JobEntry:
        is_current = bool(data.get("is_current_job"))
        company = require_non_empty(data.get("company_name"), "Company name is required")
        position = require_non_empty(data.get("position"), "Position is required")
        start_month = require_month(data.get("start_month"), "Start date")
        end_month = _blank_to_none(data.get("end_month"))
        if is_current:
            end_month = None
        elif end_month is None:
            raise ValidationError("End date is required unless currently working here")
        else:
            end_month = require_month(end_month, "End date")
        summary = require_non_empty(data.get("summary"), "Job summary is required")
        require_max_length(summary, "Summary", JOB_SUMMARY_MAX_LENGTH)

        return JobEntry(
            company_name=company,
            position=position,
            start_month=start_month,
            end_month=end_month,
            is_current_job=is_current,
            summary=summary,
        )

    def update_job_history(self, caller: Optional[Caller], jobs: Sequence[Mapping[str, Any]]) -> None:
        """Replace the caller's job list; an empty list leaves it untouched."""
        caller = require_caller(caller)
        if not jobs:
            return
        entries = [self.parse_job(j) for j in jobs]
        self._sections.replace_jobs(caller.user_id, entries)

    # -------- Identity documents --------
    def get_identity_document(self, caller: Optional[Caller]) -> Optional[IdentityDocument]:
        caller = require_caller(caller)
        return self._sections.get_current_document(caller.user_id)

    def _delete_files_quietly(self, keys: list[str]) -> None:
        if not keys:
            return
        try:
            self._storage.delete_files(keys)
        except Exception:
            # A file that is already gone must not block the database update.
            logger.exception("Failed to delete stored files %s", keys)

    def save_identity_document(
        self,
        caller: Optional[Caller],
        *,
        document_type: Any,
        front_image_url: Optional[str] = None,
        back_image_url: Optional[str] = None,
    ) -> SaveDocumentResult:
        """Persist an in-progress document; only the URLs given are changed."""
        caller = require_caller(caller)
        doc_type = parse_enum(DocumentType, document_type, "Invalid document type")

        existing = self._sections.get_current_document(caller.user_id)
        if existing:
            stale = []
            if front_image_url and existing.front_image_url and existing.front_image_url != front_image_url:
                stale.append(existing.front_image_url)
            if back_image_url and existing.back_image_url and existing.back_image_url != back_image_url:
                stale.append(existing.back_image_url)
            self._delete_files_quietly(file_keys(*stale))

            fields: dict[str, Any] = {"document_type": doc_type}
            if front_image_url is not None:
                fields["front_image_url"] = front_image_url
            if back_image_url is not None:
                fields["back_image_url"] = back_image_url
            self._sections.update_document(existing.document_id, fields)
            return SaveDocumentResult(document_id=existing.document_id, is_new=False)

        document_id = self._sections.insert_document(
            user_id=caller.user_id,
            document_type=doc_type,
            front_image_url=front_image_url or "",
            back_image_url=back_image_url,
            status=DocumentStatus.PENDING,
            submitted_at=now_local(),
        )
        logger.info("Created identity document %s for user %s", document_id, caller.user_id)
        return SaveDocumentResult(document_id=document_id, is_new=True)

    def submit_identity_document(
        self,
        caller: Optional[Caller],
        *,
        document_type: Any,
        front_image_url: str,
        back_image_url: Optional[str],
    ) -> int:
        """Write the final URLs, reset the document to pending and stamp submitted_at."""
        caller = require_caller(caller)
        doc_type = parse_enum(DocumentType, document_type, "Invalid document type")
        front_image_url = require_non_empty(front_image_url, "Front image is required")
        back_image_url = _blank_to_none(back_image_url)
        now = now_local()

        existing = self._sections.get_current_document(caller.user_id)
        if existing:
            stale = []
            if existing.front_image_url and existing.front_image_url != front_image_url:
                stale.append(existing.front_image_url)
            if existing.back_image_url and existing.back_image_url != back_image_url:
                stale.append(existing.back_image_url)
            self._delete_files_quietly(file_keys(*stale))

            self._sections.update_document(
                existing.document_id,
                {
                    "document_type": doc_type,
                    "front_image_url": front_image_url,
                    "back_image_url": back_image_url,
                    "status": DocumentStatus.PENDING,
                    "submitted_at": now,
                },
            )
            return existing.document_id

        return self._sections.insert_document(
            user_id=caller.user_id,
            document_type=doc_type,
            front_image_url=front_image_url,
            back_image_url=back_image_url,
            status=DocumentStatus.PENDING,
            submitted_at=now,
        )

    def delete_identity_file(
        self,
        caller: Optional[Caller],
        *,
        file_type: str,
        document_id: Optional[int] = None,
    ) -> bool:
        """Remove the front (whole document) or back image.

        Returns False when there was no document to delete.
        """
        caller = require_caller(caller)
        if file_type not in ("front", "back"):
            raise ValidationError("file_type must be 'front' or 'back'")

        if document_id is not None:
            document = self._sections.get_document(caller.user_id, int(document_id))
        else:
            document = self._sections.get_current_document(caller.user_id)
        if not document:
            return False

        url = document.front_image_url if file_type == "front" else document.back_image_url
        self._delete_files_quietly(file_keys(url))

        if file_type == "front":
            self._sections.delete_document(document.document_id)
        else:
            self._sections.update_document(document.document_id, {"back_image_url": None})
        return True

    # -------- Review --------
    def user_sections(self, user_id: int) -> SectionSnapshot:
        """Load all four sections of `user_id`; callers do their own authorization."""
        return SectionSnapshot(
            personal_info=self._personal_info_for(user_id),
            education=self._sections.get_education(user_id),
            document=self._sections.get_current_document(user_id),
            jobs=list(self._sections.list_jobs(user_id)),
        )

    def user_documents(self, user_id: int) -> list[IdentityDocument]:
        return list(self._sections.list_documents(user_id))

    def review(self, caller: Optional[Caller]) -> ReviewData:
        caller = require_caller(caller)
        user = self._users.get_by_id(caller.user_id)
        if not user:
            raise NotFoundError("User not found")
        return self.review_for(user)

    def review_for(self, user: User, snapshot: Optional[SectionSnapshot] = None) -> ReviewData:
        snap = snapshot or self.user_sections(user.user_id)
        return evaluate(snap.personal_info, snap.education, snap.document, snap.jobs, user.user_type)

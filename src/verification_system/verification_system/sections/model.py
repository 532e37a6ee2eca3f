from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import DocumentStatus, DocumentType, EducationLevel

SENIOR_HIGH_TRACKS = ("academic", "tvl", "sports", "arts_design")
SENIOR_HIGH_STRANDS = ("stem", "abm", "humss", "gas", "he", "ict", "ia", "afa")
HONORS = (
    "none",
    "with_honors",
    "with_high_honors",
    "with_highest_honors",
    "cum_laude",
    "magna_cum_laude",
    "summa_cum_laude",
)


@dataclass(frozen=True)
class PersonalInfo:
    """Name fields live on the user row, the rest on the profile row."""

    first_name: Optional[str] = None
    middle_initial: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    birthday: Optional[date] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    phone_number: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value in (None, ""):
                continue
            out[f.name] = value.isoformat() if isinstance(value, date) else value
        return out

    @property
    def is_empty(self) -> bool:
        return not self.to_dict()


USER_NAME_FIELDS = ("first_name", "middle_initial", "last_name")
PROFILE_FIELDS = ("age", "birthday", "gender", "marital_status", "phone_number")


@dataclass(frozen=True)
class Education:
    education_id: int
    user_id: int
    level: EducationLevel
    school_name: str
    school_address: Optional[str] = None
    degree: Optional[str] = None
    course: Optional[str] = None
    track: Optional[str] = None
    strand: Optional[str] = None
    year_started: Optional[str] = None
    year_graduated: Optional[str] = None
    is_currently_enrolled: bool = False
    honors: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "education_id": self.education_id,
            "level": self.level.value,
            "school_name": self.school_name,
            "school_address": self.school_address,
            "degree": self.degree,
            "course": self.course,
            "track": self.track,
            "strand": self.strand,
            "year_started": self.year_started,
            "year_graduated": self.year_graduated,
            "is_currently_enrolled": self.is_currently_enrolled,
            "honors": self.honors,
        }


EDUCATION_FIELDS = (
    "level",
    "school_name",
    "school_address",
    "degree",
    "course",
    "track",
    "strand",
    "year_started",
    "year_graduated",
    "is_currently_enrolled",
    "honors",
)


@dataclass(frozen=True)
class JobEntry:
    company_name: str
    position: str
    start_month: str
    summary: str
    end_month: Optional[str] = None
    is_current_job: bool = False
    job_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "company_name": self.company_name,
            "position": self.position,
            "start_month": self.start_month,
            "end_month": self.end_month,
            "is_current_job": self.is_current_job,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class IdentityDocument:
    document_id: int
    user_id: int
    document_type: DocumentType
    front_image_url: str
    status: DocumentStatus
    submitted_at: datetime
    created_at: datetime
    back_image_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "document_type": self.document_type.value,
            "front_image_url": self.front_image_url,
            "back_image_url": self.back_image_url,
            "status": self.status.value,
            "submitted_at": self.submitted_at.isoformat(),
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class SaveDocumentResult:
    document_id: int
    is_new: bool


@dataclass(frozen=True)
class SectionSnapshot:
    """Everything the review step and the admin detail view need."""

    personal_info: Optional[PersonalInfo]
    education: Optional[Education]
    document: Optional[IdentityDocument]
    jobs: list[JobEntry] = field(default_factory=list)

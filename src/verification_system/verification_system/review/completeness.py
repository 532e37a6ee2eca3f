"""Per-section completeness for the review step.

Pure functions over already-loaded section data; nothing here touches the
database.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.enums import DocumentType, UserType
from ..sections.model import Education, IdentityDocument, JobEntry, PersonalInfo
from ..users.model import requires_education_and_job_history

NOT_COMPLETED = "Not completed"
NOT_REQUIRED = "Not required"

EDUCATION_LEVEL_LABELS = {
    "elementary": "Elementary",
    "junior_high": "Junior High",
    "high_school": "High School",
    "senior_high": "Senior High",
    "vocational": "Vocational",
    "college": "College",
    "postgraduate": "Post-Graduate",
    "graduate": "Graduate",
}

DOCUMENT_TYPE_LABELS = {
    DocumentType.IDENTITY_CARD.value: "Identity Card",
    DocumentType.DRIVER_LICENSE.value: "Driver's License",
    DocumentType.PASSPORT.value: "Passport",
}


@dataclass(frozen=True)
class ReviewStepData:
    is_complete: bool
    summary: str

    def to_dict(self) -> dict:
        return {"is_complete": self.is_complete, "summary": self.summary}


@dataclass(frozen=True)
class ReviewData:
    personal_info: ReviewStepData
    education: ReviewStepData
    document: ReviewStepData
    job_history: ReviewStepData

    @property
    def is_all_complete(self) -> bool:
        return (
            self.personal_info.is_complete
            and self.education.is_complete
            and self.document.is_complete
            and self.job_history.is_complete
        )

    def to_dict(self) -> dict:
        return {
            "personal_info": self.personal_info.to_dict(),
            "education": self.education.to_dict(),
            "document": self.document.to_dict(),
            "job_history": self.job_history.to_dict(),
            "is_all_complete": self.is_all_complete,
        }


def format_education_level(level: str) -> str:
    return EDUCATION_LEVEL_LABELS.get(level, level)


def format_document_type(document_type: str) -> str:
    return DOCUMENT_TYPE_LABELS.get(document_type, document_type)


def _value(v) -> str:
    return getattr(v, "value", v) or ""


def personal_info_step(info: Optional[PersonalInfo]) -> ReviewStepData:
    complete = bool(info and info.first_name and info.last_name and info.gender)
    if not complete:
        return ReviewStepData(False, NOT_COMPLETED)
    gender = _value(info.gender)
    return ReviewStepData(True, f"{info.first_name} {info.last_name} - {gender[:1].upper()}{gender[1:]}")


def education_step(education: Optional[Education], *, required: bool) -> ReviewStepData:
    has_data = bool(education and education.level and education.school_name)
    summary = NOT_COMPLETED if required else NOT_REQUIRED
    if has_data:
        if education.degree:
            summary = f"{education.degree} at {education.school_name}"
        else:
            summary = f"{format_education_level(_value(education.level))} at {education.school_name}"
    return ReviewStepData(has_data if required else True, summary)


def document_step(document: Optional[IdentityDocument]) -> ReviewStepData:
    complete = bool(document and document.front_image_url and document.back_image_url)
    if not complete:
        return ReviewStepData(False, NOT_COMPLETED)
    return ReviewStepData(True, f"{format_document_type(_value(document.document_type))} - Front & Back")


def job_history_step(jobs: Optional[Sequence[JobEntry]], *, required: bool) -> ReviewStepData:
    count = len(jobs) if jobs else 0
    if count == 0:
        return ReviewStepData(not required, NOT_COMPLETED if required else NOT_REQUIRED)
    return ReviewStepData(True, f"{count} {'job' if count == 1 else 'jobs'} added")


def evaluate(
    personal_info: Optional[PersonalInfo],
    education: Optional[Education],
    document: Optional[IdentityDocument],
    jobs: Optional[Sequence[JobEntry]],
    user_type: UserType = UserType.EMPLOYEE,
) -> ReviewData:
    required = requires_education_and_job_history(user_type)
    return ReviewData(
        personal_info=personal_info_step(personal_info),
        education=education_step(education, required=required),
        document=document_step(document),
        job_history=job_history_step(jobs, required=required),
    )

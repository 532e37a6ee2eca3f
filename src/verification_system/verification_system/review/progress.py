from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ProgressState, VerificationStatus
from .completeness import ReviewData

STEP_LABELS = (
    ("email", "Email Verification"),
    ("profile", "Profile Information"),
    ("documents", "Document Upload"),
    ("review", "Admin Review"),
)


@dataclass(frozen=True)
class ProgressStep:
    key: str
    label: str
    state: ProgressState

    def to_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "state": self.state.value}


@dataclass(frozen=True)
class AdminProgress:
    steps: tuple[ProgressStep, ...]

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.steps if s.state == ProgressState.COMPLETED)

    @property
    def total(self) -> int:
        return len(self.steps)

    @property
    def percentage(self) -> int:
        return round(self.completed_count * 100 / self.total) if self.total else 0

    def to_dict(self) -> dict:
        return {
            "steps": [s.to_dict() for s in self.steps],
            "completed_count": self.completed_count,
            "total": self.total,
            "percentage": self.percentage,
        }


_HANDED_IN = (VerificationStatus.SUBMITTED, VerificationStatus.VERIFIED)
_NEEDS_USER = (VerificationStatus.INFO_REQUESTED, VerificationStatus.REJECTED)


def _profile_state(status: VerificationStatus, all_complete: bool) -> ProgressState:
    if status in _HANDED_IN:
        return ProgressState.COMPLETED
    if status in _NEEDS_USER:
        return ProgressState.CURRENT
    return ProgressState.COMPLETED if all_complete else ProgressState.CURRENT


def _documents_state(status: VerificationStatus, all_complete: bool) -> ProgressState:
    if status in _HANDED_IN:
        return ProgressState.COMPLETED
    return ProgressState.CURRENT if all_complete else ProgressState.PENDING


def _review_state(status: VerificationStatus) -> ProgressState:
    if status == VerificationStatus.VERIFIED:
        return ProgressState.COMPLETED
    if status == VerificationStatus.SUBMITTED:
        return ProgressState.CURRENT
    return ProgressState.PENDING


def admin_progress(status: VerificationStatus, review: ReviewData) -> AdminProgress:
    """Stepper shown to the user while their verification is with the admins.

    Derived from the status and section completeness only; nothing is stored.
    """
    all_complete = review.is_all_complete
    states = {
        # Being logged in means the email was verified.
        "email": ProgressState.COMPLETED,
        "profile": _profile_state(status, all_complete),
        "documents": _documents_state(status, all_complete),
        "review": _review_state(status),
    }
    return AdminProgress(steps=tuple(ProgressStep(key, label, states[key]) for key, label in STEP_LABELS))

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role used for authorization checks."""

    ADMIN = "admin"
    USER = "user"
    PARTNER = "partner"


class UserType(str, Enum):
    EMPLOYEE = "Employee"
    EMPLOYER = "Employer"
    AGENCY = "Agency"


class VerificationStatus(str, Enum):
    """Overall verification status of a user (one record per user)."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    REJECTED = "rejected"
    INFO_REQUESTED = "info_requested"


class AuditAction(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
    INFO_REQUESTED = "info_requested"


class BulkAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_INFO = "request_info"


class DocumentType(str, Enum):
    IDENTITY_CARD = "identity_card"
    DRIVER_LICENSE = "driver_license"
    PASSPORT = "passport"


class DocumentStatus(str, Enum):
    """Document-level review status, separate from VerificationStatus."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class UploadStatus(str, Enum):
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


class WizardStep(str, Enum):
    PERSONAL_INFO = "personal_info"
    EDUCATION = "education"
    UPLOAD = "upload"
    JOB_HISTORY = "job_history"
    REVIEW = "review"


class ProgressState(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


class EducationLevel(str, Enum):
    ELEMENTARY = "elementary"
    JUNIOR_HIGH = "junior_high"
    SENIOR_HIGH = "senior_high"
    VOCATIONAL = "vocational"
    COLLEGE = "college"
    POSTGRADUATE = "postgraduate"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"

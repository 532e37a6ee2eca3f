from __future__ import annotations

from datetime import datetime

from src.verification_system.verification_system.core.enums import (
    DocumentStatus,
    DocumentType,
    EducationLevel,
    UserType,
)
from src.verification_system.verification_system.review.completeness import (
    NOT_COMPLETED,
    NOT_REQUIRED,
    document_step,
    education_step,
    evaluate,
    job_history_step,
    personal_info_step,
)
from src.verification_system.verification_system.sections.model import (
    Education,
    IdentityDocument,
    JobEntry,
    PersonalInfo,
)

T = datetime(2026, 3, 1, 8, 0, 0)

INFO = PersonalInfo(first_name="Maria", last_name="Santos", gender="female")
EDU = Education(education_id=1, user_id=2, level=EducationLevel.SENIOR_HIGH, school_name="Rizal High")
DOC = IdentityDocument(
    document_id=1,
    user_id=2,
    document_type=DocumentType.DRIVER_LICENSE,
    front_image_url="https://utfs.io/f/a",
    back_image_url="https://utfs.io/f/b",
    status=DocumentStatus.PENDING,
    submitted_at=T,
    created_at=T,
)
JOB = JobEntry(company_name="Acme", position="Clerk", start_month="2020-01", summary="Filing", is_current_job=True)


def test_personal_info_summary():
    step = personal_info_step(INFO)
    assert step.is_complete
    assert step.summary == "Maria Santos - Female"


def test_personal_info_needs_gender():
    step = personal_info_step(PersonalInfo(first_name="Maria", last_name="Santos"))
    assert not step.is_complete
    assert step.summary == NOT_COMPLETED
    assert not personal_info_step(None).is_complete


def test_education_summary_prefers_degree():
    assert education_step(EDU, required=True).summary == "Senior High at Rizal High"
    with_degree = Education(
        education_id=1, user_id=2, level=EducationLevel.COLLEGE, school_name="UP", degree="BS Nursing"
    )
    assert education_step(with_degree, required=True).summary == "BS Nursing at UP"


def test_education_not_required():
    step = education_step(None, required=False)
    assert step.is_complete
    assert step.summary == NOT_REQUIRED


def test_document_needs_both_sides():
    assert document_step(DOC).summary == "Driver's License - Front & Back"
    front_only = IdentityDocument(
        document_id=1,
        user_id=2,
        document_type=DocumentType.PASSPORT,
        front_image_url="https://utfs.io/f/a",
        status=DocumentStatus.PENDING,
        submitted_at=T,
        created_at=T,
    )
    assert not document_step(front_only).is_complete


def test_job_history_pluralizes():
    assert job_history_step([JOB], required=True).summary == "1 job added"
    assert job_history_step([JOB, JOB], required=True).summary == "2 jobs added"
    assert not job_history_step([], required=True).is_complete


def test_employee_needs_every_section():
    review = evaluate(INFO, None, DOC, [JOB], UserType.EMPLOYEE)
    assert not review.is_all_complete
    assert evaluate(INFO, EDU, DOC, [JOB], UserType.EMPLOYEE).is_all_complete


def test_agency_skips_education_and_jobs():
    review = evaluate(INFO, None, DOC, [], UserType.AGENCY)
    assert review.is_all_complete
    assert review.to_dict()["job_history"] == {"is_complete": True, "summary": NOT_REQUIRED}

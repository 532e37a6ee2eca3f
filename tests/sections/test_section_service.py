from __future__ import annotations

import pytest

from src.verification_system.verification_system.core.enums import DocumentStatus, EducationLevel
from src.verification_system.verification_system.core.exceptions import AuthenticationError, ValidationError

from conftest import EMPLOYEE_ID, FakeStorage


@pytest.fixture
def svc(container):
    return container.section_service


def test_personal_info_empty_is_none(svc, employee):
    assert svc.get_personal_info(employee) is None


def test_personal_info_splits_names_and_profile(svc, employee, users_repo, sections_repo):
    svc.update_personal_info(
        employee,
        {
            "first_name": " Ana ",
            "middle_initial": "B",
            "last_name": "Cruz",
            "age": "29",
            "birthday": "1996-04-02",
            "gender": "female",
            "phone_number": "09171234567",
        },
    )

    assert users_repo.get_by_id(EMPLOYEE_ID).first_name == "Ana"
    assert sections_repo.get_profile(EMPLOYEE_ID)["age"] == "29"

    info = svc.get_personal_info(employee)
    assert info.age == 29
    assert info.to_dict()["birthday"] == "1996-04-02"


def test_personal_info_partial_update_keeps_other_fields(svc, employee, sections_repo):
    svc.update_personal_info(employee, {"gender": "male", "phone_number": "0917"})
    svc.update_personal_info(employee, {"phone_number": "0918"})
    assert sections_repo.get_profile(EMPLOYEE_ID) == {"gender": "male", "phone_number": "0918"}


@pytest.mark.parametrize(
    "data, message",
    [
        ({"age": "0"}, "at least 1"),
        ({"age": "151"}, "less than 150"),
        ({"age": "old"}, "must be a number"),
        ({"birthday": "02/04/1996"}, "YYYY-MM-DD"),
        ({"gender": "unknown"}, "select a gender"),
        ({"phone_number": "+63 917"}, "only digits"),
        ({"middle_initial": "BC"}, "1 characters or less"),
    ],
)
def test_personal_info_validation(svc, employee, data, message):
    with pytest.raises(ValidationError, match=message):
        svc.update_personal_info(employee, data)


def test_sections_require_login(svc):
    with pytest.raises(AuthenticationError):
        svc.get_education(None)


def test_education_insert_then_partial_update(svc, employee, sections_repo):
    with pytest.raises(ValidationError, match="level and school name"):
        svc.update_education(employee, {"level": "college"})

    svc.update_education(employee, {"level": "senior_high", "school_name": "Rizal High", "strand": "stem"})
    svc.update_education(employee, {"school_address": "Manila"})

    edu = sections_repo.get_education(EMPLOYEE_ID)
    assert edu.level == EducationLevel.SENIOR_HIGH
    assert edu.strand == "stem"
    assert edu.school_address == "Manila"


def test_education_rejects_unknown_strand(svc, employee):
    with pytest.raises(ValidationError, match="strand"):
        svc.update_education(employee, {"level": "senior_high", "school_name": "X", "strand": "cooking"})


JOB = {
    "company_name": "Acme",
    "position": "Clerk",
    "start_month": "2020-01",
    "end_month": "2022-06",
    "summary": "Handled filing",
}


def test_job_history_replaces_list(svc, employee):
    svc.update_job_history(employee, [JOB, {**JOB, "company_name": "Globex", "is_current_job": True}])
    jobs = svc.get_job_history(employee)
    assert [j.company_name for j in jobs] == ["Acme", "Globex"]
    assert jobs[1].end_month is None

    svc.update_job_history(employee, [])
    assert len(svc.get_job_history(employee)) == 2


@pytest.mark.parametrize(
    "override, message",
    [
        ({"company_name": ""}, "Company name is required"),
        ({"position": " "}, "Position is required"),
        ({"end_month": ""}, "End date is required unless currently working here"),
        ({"start_month": "2020-13"}, "YYYY-MM"),
        ({"summary": "x" * 501}, "500 characters or less"),
    ],
)
def test_job_validation(svc, employee, override, message):
    with pytest.raises(ValidationError, match=message):
        svc.update_job_history(employee, [{**JOB, **override}])


def test_save_document_creates_then_updates(svc, employee, storage):
    first = svc.save_identity_document(employee, document_type="passport", front_image_url="https://utfs.io/f/a")
    assert first.is_new

    second = svc.save_identity_document(employee, document_type="passport", front_image_url="https://utfs.io/f/b")
    assert not second.is_new
    assert second.document_id == first.document_id
    assert storage.deleted == ["a"]


def test_save_document_rejects_bad_type(svc, employee):
    with pytest.raises(ValidationError, match="Invalid document type"):
        svc.save_identity_document(employee, document_type="library_card", front_image_url="https://utfs.io/f/a")


def test_submit_document_resets_status_and_drops_stale_back(svc, employee, sections_repo, storage):
    svc.save_identity_document(
        employee,
        document_type="identity_card",
        front_image_url="https://utfs.io/f/a",
        back_image_url="https://utfs.io/f/b",
    )
    doc_id = svc.submit_identity_document(
        employee, document_type="passport", front_image_url="https://utfs.io/f/a", back_image_url=None
    )

    doc = sections_repo.get_document(EMPLOYEE_ID, doc_id)
    assert doc.status == DocumentStatus.PENDING
    assert doc.back_image_url is None
    assert storage.deleted == ["b"]


def test_storage_failure_does_not_block_update(users_repo, sections_repo, employee):
    from src.verification_system.verification_system.sections.service import SectionService

    svc = SectionService(users_repo, sections_repo, FakeStorage(fail=True))
    svc.save_identity_document(employee, document_type="passport", front_image_url="https://utfs.io/f/a")
    svc.save_identity_document(employee, document_type="passport", front_image_url="https://utfs.io/f/b")

    assert sections_repo.get_current_document(EMPLOYEE_ID).front_image_url == "https://utfs.io/f/b"


def test_delete_back_keeps_document(svc, employee, sections_repo, storage):
    svc.save_identity_document(
        employee,
        document_type="passport",
        front_image_url="https://utfs.io/f/a",
        back_image_url="https://utfs.io/f/b",
    )

    assert svc.delete_identity_file(employee, file_type="back") is True
    doc = sections_repo.get_current_document(EMPLOYEE_ID)
    assert doc.back_image_url is None
    assert storage.deleted == ["b"]


def test_delete_front_removes_document(svc, employee, sections_repo):
    svc.save_identity_document(employee, document_type="passport", front_image_url="https://utfs.io/f/a")

    assert svc.delete_identity_file(employee, file_type="front") is True
    assert sections_repo.get_current_document(EMPLOYEE_ID) is None
    assert svc.delete_identity_file(employee, file_type="front") is False


def test_delete_file_type_is_validated(svc, employee):
    with pytest.raises(ValidationError):
        svc.delete_identity_file(employee, file_type="side")


def test_review_for_employee(svc, employee):
    svc.update_personal_info(employee, {"first_name": "Ana", "last_name": "Cruz", "gender": "female"})
    review = svc.review(employee)
    assert review.personal_info.is_complete
    assert not review.education.is_complete
    assert not review.is_all_complete

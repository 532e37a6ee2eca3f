from __future__ import annotations

import pytest

from src.verification_system.verification_system.core.enums import DocumentType, UploadStatus, UserType, WizardStep
from src.verification_system.verification_system.wizard.state import (
    FULL_STEPS,
    REDUCED_STEPS,
    GoBack,
    GoNext,
    SetBackFile,
    SetDocType,
    SetFrontFile,
    SetStep,
    SetStepData,
    SetStepValid,
    UploadedFile,
    can_continue,
    initial_state,
    reduce,
)

DONE = UploadedFile(name="front.jpg", progress=100, status=UploadStatus.SUCCESS, url="https://utfs.io/f/a")


def test_steps_depend_on_user_type():
    assert initial_state(UserType.EMPLOYEE).steps == FULL_STEPS
    assert initial_state(UserType.EMPLOYER).steps == REDUCED_STEPS
    assert initial_state(UserType.AGENCY).steps == REDUCED_STEPS


def test_initial_step_falls_back_to_first():
    assert initial_state(UserType.AGENCY, step=WizardStep.EDUCATION).current_step == WizardStep.PERSONAL_INFO
    assert initial_state(UserType.EMPLOYEE, step=WizardStep.UPLOAD).current_step == WizardStep.UPLOAD


def test_navigation_is_clamped():
    state = initial_state(UserType.AGENCY)
    assert reduce(state, GoBack()) == state

    state = reduce(state, GoNext())
    assert state.current_step == WizardStep.UPLOAD
    state = reduce(reduce(state, GoNext()), GoNext())
    assert state.current_step == WizardStep.REVIEW
    assert state.is_last_step


def test_employee_walks_all_steps_in_order():
    state = initial_state(UserType.EMPLOYEE)
    seen = [state.current_step]
    for _ in range(len(FULL_STEPS) - 1):
        state = reduce(state, GoNext())
        seen.append(state.current_step)
    assert tuple(seen) == FULL_STEPS


def test_set_step_outside_sequence_is_ignored():
    state = initial_state(UserType.EMPLOYER)
    assert reduce(state, SetStep(WizardStep.JOB_HISTORY)) == state
    assert reduce(state, SetStep(WizardStep.REVIEW)).current_step == WizardStep.REVIEW


def test_reduce_does_not_mutate():
    state = initial_state(UserType.EMPLOYEE)
    new = reduce(state, SetStepData(WizardStep.EDUCATION, {"level": "college"}))
    assert state.draft(WizardStep.EDUCATION).data == {}
    assert new.draft(WizardStep.EDUCATION).data == {"level": "college"}


def test_files_and_doc_type():
    state = initial_state(UserType.EMPLOYEE)
    state = reduce(state, SetDocType(DocumentType.PASSPORT))
    state = reduce(state, SetFrontFile(DONE))
    assert state.selected_doc_type == DocumentType.PASSPORT
    assert state.front_file.saved_url == "https://utfs.io/f/a"
    assert reduce(state, SetFrontFile(None)).front_file is None


def test_saved_url_only_after_success():
    uploading = UploadedFile(name="b.jpg", progress=40, url="https://utfs.io/f/b")
    assert uploading.saved_url is None


def test_can_continue_upload_needs_both_files():
    state = reduce(initial_state(UserType.AGENCY), SetStep(WizardStep.UPLOAD))
    state = reduce(state, SetFrontFile(DONE))
    assert not can_continue(state)
    state = reduce(state, SetBackFile(DONE))
    assert can_continue(state)


def test_can_continue_follows_step_validity():
    state = initial_state(UserType.EMPLOYEE)
    assert not can_continue(state)
    state = reduce(state, SetStepValid(WizardStep.PERSONAL_INFO, True))
    assert can_continue(state)
    assert can_continue(reduce(state, SetStep(WizardStep.REVIEW)))


def test_draft_actions_reject_non_draft_sections():
    state = initial_state(UserType.EMPLOYEE)
    with pytest.raises(ValueError):
        reduce(state, SetStepValid(WizardStep.UPLOAD, True))


def test_unknown_action():
    with pytest.raises(TypeError):
        reduce(initial_state(UserType.EMPLOYEE), object())

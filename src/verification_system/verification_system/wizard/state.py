"""Verification wizard as a closed finite-state machine.

`reduce(state, action)` is pure: it never mutates `state` and performs no I/O.
Persistence is driven from `wizard.session`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Union

from ..core.enums import DocumentType, UploadStatus, UserType, WizardStep
from ..users.model import requires_education_and_job_history

FULL_STEPS = (
    WizardStep.PERSONAL_INFO,
    WizardStep.EDUCATION,
    WizardStep.UPLOAD,
    WizardStep.JOB_HISTORY,
    WizardStep.REVIEW,
)
REDUCED_STEPS = (WizardStep.PERSONAL_INFO, WizardStep.UPLOAD, WizardStep.REVIEW)

DRAFT_SECTIONS = (WizardStep.PERSONAL_INFO, WizardStep.EDUCATION, WizardStep.JOB_HISTORY)


@dataclass(frozen=True)
class UploadedFile:
    name: str
    size: int = 0
    progress: int = 0
    status: UploadStatus = UploadStatus.UPLOADING
    url: Optional[str] = None

    @property
    def saved_url(self) -> Optional[str]:
        """The URL, but only once the upload has succeeded."""
        return self.url if self.status == UploadStatus.SUCCESS else None


@dataclass(frozen=True)
class StepDraft:
    is_valid: bool = False
    data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WizardState:
    steps: tuple[WizardStep, ...]
    current_step: WizardStep
    selected_doc_type: DocumentType = DocumentType.IDENTITY_CARD
    front_file: Optional[UploadedFile] = None
    back_file: Optional[UploadedFile] = None
    drafts: Mapping[WizardStep, StepDraft] = field(default_factory=dict)

    @property
    def step_index(self) -> int:
        return self.steps.index(self.current_step)

    @property
    def is_first_step(self) -> bool:
        return self.step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.step_index == len(self.steps) - 1

    def draft(self, section: WizardStep) -> StepDraft:
        return self.drafts.get(section, StepDraft())


# Actions


@dataclass(frozen=True)
class GoNext:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class SetStep:
    step: WizardStep


@dataclass(frozen=True)
class SetDocType:
    doc_type: DocumentType


@dataclass(frozen=True)
class SetFrontFile:
    file: Optional[UploadedFile]


@dataclass(frozen=True)
class SetBackFile:
    file: Optional[UploadedFile]


@dataclass(frozen=True)
class SetStepValid:
    section: WizardStep
    is_valid: bool


@dataclass(frozen=True)
class SetStepData:
    section: WizardStep
    data: Mapping[str, Any]


Action = Union[GoNext, GoBack, SetStep, SetDocType, SetFrontFile, SetBackFile, SetStepValid, SetStepData]

NAVIGATION_ACTIONS = (GoNext, GoBack, SetStep)


def steps_for(user_type: UserType) -> tuple[WizardStep, ...]:
    return FULL_STEPS if requires_education_and_job_history(user_type) else REDUCED_STEPS


def initial_state(user_type: UserType, *, step: Optional[WizardStep] = None) -> WizardState:
    steps = steps_for(user_type)
    current = step if step in steps else steps[0]
    return WizardState(steps=steps, current_step=current, drafts={s: StepDraft() for s in DRAFT_SECTIONS})


def _require_draft_section(section: WizardStep) -> None:
    if section not in DRAFT_SECTIONS:
        raise ValueError(f"{section.value} has no draft")


def _with_draft(state: WizardState, section: WizardStep, **changes) -> WizardState:
    drafts = dict(state.drafts)
    drafts[section] = replace(state.draft(section), **changes)
    return replace(state, drafts=drafts)


def reduce(state: WizardState, action: Action) -> WizardState:
    if isinstance(action, GoNext):
        if state.is_last_step:
            return state
        return replace(state, current_step=state.steps[state.step_index + 1])

    if isinstance(action, GoBack):
        if state.is_first_step:
            return state
        return replace(state, current_step=state.steps[state.step_index - 1])

    if isinstance(action, SetStep):
        # Jumping to a step the user type does not have is ignored.
        if action.step not in state.steps:
            return state
        return replace(state, current_step=action.step)

    if isinstance(action, SetDocType):
        return replace(state, selected_doc_type=action.doc_type)

    if isinstance(action, SetFrontFile):
        return replace(state, front_file=action.file)

    if isinstance(action, SetBackFile):
        return replace(state, back_file=action.file)

    if isinstance(action, SetStepValid):
        _require_draft_section(action.section)
        return _with_draft(state, action.section, is_valid=bool(action.is_valid))

    if isinstance(action, SetStepData):
        _require_draft_section(action.section)
        return _with_draft(state, action.section, data=dict(action.data))

    raise TypeError(f"Unknown wizard action: {action!r}")


def _uploaded(file: Optional[UploadedFile]) -> bool:
    return file is not None and file.status == UploadStatus.SUCCESS


def can_continue(state: WizardState) -> bool:
    step = state.current_step
    if step == WizardStep.UPLOAD:
        return _uploaded(state.front_file) and _uploaded(state.back_file)
    if step == WizardStep.REVIEW:
        # Review submits instead of navigating.
        return True
    return state.draft(step).is_valid

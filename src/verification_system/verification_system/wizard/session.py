from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Optional

from ..core.caller import Caller, require_caller
from ..core.constants import AUTOSAVE_DEBOUNCE_SECONDS
from ..core.enums import DocumentType, UploadStatus, UserType, WizardStep
from ..core.exceptions import DomainError, ValidationError
from ..sections.service import SectionService
from ..verification.service import VerificationService
from .debounce import Debouncer
from .state import (
    DRAFT_SECTIONS,
    NAVIGATION_ACTIONS,
    Action,
    SetBackFile,
    SetDocType,
    SetFrontFile,
    SetStepData,
    SetStepValid,
    UploadedFile,
    WizardState,
    can_continue,
    initial_state,
    reduce,
)

logger = logging.getLogger(__name__)


def is_section_valid(section: WizardStep, data: Mapping[str, Any]) -> bool:
    if section == WizardStep.PERSONAL_INFO:
        return bool(data.get("first_name") and data.get("last_name") and data.get("gender"))
    if section == WizardStep.EDUCATION:
        return bool(data.get("level") and data.get("school_name"))
    if section == WizardStep.JOB_HISTORY:
        jobs = data.get("jobs") or []
        if not jobs:
            return False
        try:
            for job in jobs:
                SectionService.parse_job(job)
        except ValidationError:
            return False
        return True
    return False


class DocumentAutosave:
    """Persist the identity document draft once per new pair of uploaded URLs.

    Repeated "success" notifications for URLs already saved are no-ops.
    """

    def __init__(self, caller: Caller, sections: SectionService):
        self._caller = caller
        self._sections = sections
        self.last_saved: tuple[Optional[str], Optional[str]] = (None, None)

    def remember(self, front_url: Optional[str], back_url: Optional[str]) -> None:
        self.last_saved = (front_url, back_url)

    def maybe_save(self, state: WizardState) -> bool:
        front = state.front_file.saved_url if state.front_file else None
        back = state.back_file.saved_url if state.back_file else None
        if front is None and back is None:
            return False
        if (front, back) == self.last_saved:
            return False

        self._sections.save_identity_document(
            self._caller,
            document_type=state.selected_doc_type,
            front_image_url=front,
            back_image_url=back,
        )
        self.last_saved = (front, back)
        return True


class WizardSession:
    """Drives the wizard for one caller against the section and verification services.

    Edits are saved through one Debouncer per section; navigation and close()
    flush them. Uploaded document URLs are saved as soon as they succeed.
    """

    def __init__(
        self,
        caller: Optional[Caller],
        user_type: UserType,
        *,
        sections: SectionService,
        verifications: VerificationService,
        wait: float = AUTOSAVE_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.caller = require_caller(caller)
        self.state = initial_state(user_type)
        self._sections = sections
        self._verifications = verifications
        self._seeded: set[WizardStep] = set()
        self.last_error: Optional[str] = None
        self.documents = DocumentAutosave(self.caller, sections)

        savers = {
            WizardStep.PERSONAL_INFO: lambda data: sections.update_personal_info(self.caller, data),
            WizardStep.EDUCATION: lambda data: sections.update_education(self.caller, data),
            WizardStep.JOB_HISTORY: lambda data: sections.update_job_history(self.caller, data.get("jobs") or []),
        }
        self._debouncers = {
            section: Debouncer(self._guarded(section, save), wait=wait, clock=clock)
            for section, save in savers.items()
            if section in self.state.steps
        }

    def _guarded(self, section: WizardStep, save: Callable[[Mapping[str, Any]], None]):
        def run(data: Mapping[str, Any]) -> None:
            try:
                save(data)
                self.last_error = None
            except DomainError as e:
                # Partial drafts may not validate yet; keep editing and surface the message.
                logger.warning("Autosave of %s rejected: %s", section.value, e)
                self.last_error = str(e)

        return run

    # -------- Loading --------
    def _fetch(self, section: WizardStep) -> Optional[dict]:
        if section == WizardStep.PERSONAL_INFO:
            info = self._sections.get_personal_info(self.caller)
            return info.to_dict() if info else None
        if section == WizardStep.EDUCATION:
            education = self._sections.get_education(self.caller)
            if not education:
                return None
            data = education.to_dict()
            data.pop("education_id", None)
            return data
        jobs = self._sections.get_job_history(self.caller)
        return {"jobs": [j.to_dict() for j in jobs]} if jobs else None

    def load(self) -> None:
        """Seed drafts from persisted data, once per section.

        An empty fetch leaves the section unseeded, and a section the user has
        already edited is never overwritten.
        """
        for section in DRAFT_SECTIONS:
            if section not in self.state.steps or section in self._seeded:
                continue
            data = self._fetch(section)
            if not data:
                continue
            self._apply(SetStepData(section, data))
            self._apply(SetStepValid(section, is_section_valid(section, data)))
            self._seeded.add(section)

        if WizardStep.UPLOAD not in self._seeded:
            document = self._sections.get_identity_document(self.caller)
            if document:
                self._seed_document(document.document_type, document.front_image_url, document.back_image_url)
                self._seeded.add(WizardStep.UPLOAD)

    def _seed_document(self, doc_type: DocumentType, front_url: Optional[str], back_url: Optional[str]) -> None:
        self._apply(SetDocType(doc_type))
        if front_url:
            self._apply(SetFrontFile(self._saved_file("front", front_url)))
        if back_url:
            self._apply(SetBackFile(self._saved_file("back", back_url)))
        self.documents.remember(front_url or None, back_url or None)

    @staticmethod
    def _saved_file(name: str, url: str) -> UploadedFile:
        return UploadedFile(name=name, progress=100, status=UploadStatus.SUCCESS, url=url)

    # -------- Driving --------
    def _apply(self, action: Action) -> None:
        self.state = reduce(self.state, action)

    def dispatch(self, action: Action) -> WizardState:
        if isinstance(action, NAVIGATION_ACTIONS):
            self.flush()
        self._apply(action)
        if isinstance(action, (SetFrontFile, SetBackFile)):
            self.documents.maybe_save(self.state)
        return self.state

    def edit(self, section: WizardStep, data: Mapping[str, Any], *, is_valid: Optional[bool] = None) -> None:
        """Record a draft edit and schedule its debounced save."""
        if section not in self._debouncers:
            raise ValidationError(f"{section.value} is not part of this wizard")
        self._seeded.add(section)
        self._apply(SetStepData(section, data))
        valid = is_section_valid(section, data) if is_valid is None else is_valid
        self._apply(SetStepValid(section, valid))
        self._debouncers[section].push(dict(data))

    def tick(self) -> None:
        for debouncer in self._debouncers.values():
            debouncer.tick()

    def flush(self) -> None:
        for debouncer in self._debouncers.values():
            debouncer.flush()

    def close(self) -> None:
        self.flush()

    @property
    def can_continue(self) -> bool:
        return can_continue(self.state)

    def submit(self) -> int:
        if self.state.current_step != WizardStep.REVIEW:
            raise ValidationError("Submit is only available on the review step")
        front = self.state.front_file.saved_url if self.state.front_file else None
        if not front:
            raise ValidationError("Front image is required")
        back = self.state.back_file.saved_url if self.state.back_file else None

        self.flush()
        return self._verifications.submit(
            self.caller,
            document_type=self.state.selected_doc_type,
            front_image_url=front,
            back_image_url=back,
        )

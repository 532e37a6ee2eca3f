from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import DocumentStatus, DocumentType
from .model import Education, IdentityDocument, JobEntry


class SectionRepository(Protocol):
    """Persistence for the wizard sections (profile, education, jobs, documents)."""

    # Profile
    def get_profile(self, user_id: int) -> Optional[dict]:
        raise NotImplementedError

    def upsert_profile(self, user_id: int, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    # Education
    def get_education(self, user_id: int) -> Optional[Education]:
        raise NotImplementedError

    def insert_education(self, user_id: int, fields: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update_education(self, education_id: int, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    # Job history
    def list_jobs(self, user_id: int) -> Sequence[JobEntry]:
        raise NotImplementedError

    def replace_jobs(self, user_id: int, jobs: Sequence[JobEntry]) -> None:
        """Delete every entry for the user and insert `jobs`, in one transaction."""

        raise NotImplementedError

    # Identity documents
    def get_current_document(self, user_id: int) -> Optional[IdentityDocument]:
        raise NotImplementedError

    def get_document(self, user_id: int, document_id: int) -> Optional[IdentityDocument]:
        raise NotImplementedError

    def insert_document(
        self,
        *,
        user_id: int,
        document_type: DocumentType,
        front_image_url: str,
        back_image_url: Optional[str],
        status: DocumentStatus,
        submitted_at: datetime,
    ) -> int:
        raise NotImplementedError

    def update_document(self, document_id: int, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def delete_document(self, document_id: int) -> None:
        raise NotImplementedError

    def list_documents(self, user_id: int) -> Sequence[IdentityDocument]:
        """All documents of a user, newest first."""

        raise NotImplementedError

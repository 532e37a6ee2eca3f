from __future__ import annotations

from dataclasses import dataclass

from .database.connection import DBConfig, DatabaseConnection
from .sections.mysql_section_repository import MySQLSectionRepository
from .sections.repository import SectionRepository
from .sections.service import SectionService
from .storage.files import FileStorage, LocalFileStorage
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .verification.mysql_verification_repository import MySQLVerificationRepository
from .verification.repository import VerificationRepository
from .verification.service import VerificationService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    sections_repo: SectionRepository
    verifications_repo: VerificationRepository
    storage: FileStorage

    auth_service: AuthService
    section_service: SectionService
    verification_service: VerificationService


def build_services(
    *,
    users_repo: UserRepository,
    sections_repo: SectionRepository,
    verifications_repo: VerificationRepository,
    storage: FileStorage,
) -> Container:
    section_service = SectionService(users_repo, sections_repo, storage)
    return Container(
        users_repo=users_repo,
        sections_repo=sections_repo,
        verifications_repo=verifications_repo,
        storage=storage,
        auth_service=AuthService(users_repo),
        section_service=section_service,
        verification_service=VerificationService(verifications_repo, users_repo, section_service),
    )


def build_container(*, db_config: dict, upload_dir: str = "uploads") -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        sections_repo=MySQLSectionRepository(conn),
        verifications_repo=MySQLVerificationRepository(conn),
        storage=LocalFileStorage(upload_dir),
    )

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from src.verification_system.verification_system.container import build_services
from src.verification_system.verification_system.core.caller import Caller
from src.verification_system.verification_system.core.enums import Role, UserType, VerificationStatus
from src.verification_system.verification_system.sections.model import IdentityDocument
from src.verification_system.verification_system.users.model import User
from src.verification_system.verification_system.verification.model import AuditLogEntry, VerificationRecord
from src.verification_system.verification_system.verification.stats import tally

T0 = datetime(2026, 3, 2, 9, 0, 0)

ADMIN_ID = 1
EMPLOYEE_ID = 2
AGENCY_ID = 3


class FakeUserRepo:
    def __init__(self, users=None):
        self.users = {u.user_id: u for u in (users or [])}

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        for u in self.users.values():
            if u.email == email:
                return u
        return None

    def update_names(self, user_id, fields):
        self.users[user_id] = replace(self.users[user_id], **fields)


class FakeSectionRepo:
    def __init__(self):
        self.profiles = {}
        self.educations = {}
        self.jobs = {}
        self.documents = {}
        self._next_id = 100
        self.document_writes = 0

    def _id(self):
        self._next_id += 1
        return self._next_id

    def get_profile(self, user_id):
        return self.profiles.get(user_id)

    def upsert_profile(self, user_id, fields):
        self.profiles.setdefault(user_id, {}).update(fields)

    def get_education(self, user_id):
        return self.educations.get(user_id)

    def insert_education(self, user_id, fields):
        from src.verification_system.verification_system.sections.model import Education

        eid = self._id()
        self.educations[user_id] = Education(education_id=eid, user_id=user_id, **fields)
        return eid

    def update_education(self, education_id, fields):
        for uid, e in self.educations.items():
            if e.education_id == education_id:
                self.educations[uid] = replace(e, **fields)

    def list_jobs(self, user_id):
        return list(self.jobs.get(user_id, []))

    def replace_jobs(self, user_id, jobs):
        self.jobs[user_id] = list(jobs)

    def get_current_document(self, user_id):
        docs = [d for d in self.documents.values() if d.user_id == user_id]
        if not docs:
            return None
        return max(docs, key=lambda d: (d.created_at, d.document_id))

    def get_document(self, user_id, document_id):
        d = self.documents.get(document_id)
        return d if d and d.user_id == user_id else None

    def insert_document(self, *, user_id, document_type, front_image_url, back_image_url, status, submitted_at):
        did = self._id()
        self.documents[did] = IdentityDocument(
            document_id=did,
            user_id=user_id,
            document_type=document_type,
            front_image_url=front_image_url,
            back_image_url=back_image_url,
            status=status,
            submitted_at=submitted_at,
            created_at=submitted_at,
        )
        self.document_writes += 1
        return did

    def update_document(self, document_id, fields):
        self.documents[document_id] = replace(self.documents[document_id], **fields)
        self.document_writes += 1

    def delete_document(self, document_id):
        del self.documents[document_id]

    def list_documents(self, user_id):
        docs = [d for d in self.documents.values() if d.user_id == user_id]
        return sorted(docs, key=lambda d: (d.created_at, d.document_id), reverse=True)


class FakeStorage:
    def __init__(self, fail=False):
        self.deleted = []
        self.fail = fail

    def delete_files(self, keys):
        if self.fail:
            raise OSError("storage offline")
        self.deleted.extend(keys)


class FakeVerificationRepo:
    def __init__(self, users: FakeUserRepo):
        self.users = users
        self.records = {}
        self.audit = []
        self.stats_windows = []
        self._next_id = 1

    def add(self, user_id, status, **kwargs):
        vid = self._next_id
        self._next_id += 1
        self.records[vid] = VerificationRecord(
            verification_id=vid,
            user_id=user_id,
            status=status,
            created_at=kwargs.pop("created_at", T0),
            updated_at=kwargs.pop("updated_at", T0),
            **kwargs,
        )
        return vid

    def get_by_id(self, verification_id):
        return self.records.get(int(verification_id))

    def get_by_user(self, user_id):
        for r in self.records.values():
            if r.user_id == user_id:
                return r
        return None

    def upsert_submitted(self, *, user_id, submitted_at):
        existing = self.get_by_user(user_id)
        if existing:
            self.records[existing.verification_id] = replace(
                existing,
                status=VerificationStatus.SUBMITTED,
                submitted_at=submitted_at,
                updated_at=submitted_at,
                rejection_reason=None,
            )
            return existing.verification_id
        return self.add(user_id, VerificationStatus.SUBMITTED, submitted_at=submitted_at)

    def apply_decision(self, decision):
        record = self.records[decision.verification_id]
        changes = dict(
            status=decision.new_status,
            rejection_reason=decision.rejection_reason,
            updated_at=decision.decided_at,
        )
        if decision.stamp_verifier:
            changes.update(verified_at=decision.decided_at, verified_by=decision.admin_user_id)
        self.records[decision.verification_id] = replace(record, **changes)
        if decision.mark_user_verified:
            self.users.users[decision.user_id] = replace(self.users.users[decision.user_id], user_verified=True)
        self.audit.append(
            AuditLogEntry(
                audit_id=len(self.audit) + 1,
                verification_id=decision.verification_id,
                admin_user_id=decision.admin_user_id,
                action=decision.action,
                reason=decision.audit_reason,
                previous_status=decision.previous_status,
                new_status=decision.new_status,
                created_at=decision.decided_at,
                admin_name="Admin Demo",
                admin_email="admin@example.com",
            )
        )

    def list_submissions(self, *, filters, offset, limit):
        rows = [r for r in self.records.values() if r.status != VerificationStatus.DRAFT]
        self.last_query = {"filters": filters, "offset": offset, "limit": limit}
        return rows[offset : offset + limit], len(rows)

    def list_audit_logs(self, verification_id):
        logs = [a for a in self.audit if a.verification_id == verification_id]
        return list(reversed(logs))

    def count_stats(self, window):
        self.stats_windows.append(window)
        return tally(self.records.values(), window)


def make_user(user_id, *, role=Role.USER, user_type=UserType.EMPLOYEE, **kwargs):
    return User(
        user_id=user_id,
        email=kwargs.pop("email", f"user{user_id}@example.com"),
        name=kwargs.pop("name", f"User {user_id}"),
        password_hash=kwargs.pop("password_hash", "x"),
        role=role,
        user_type=user_type,
        **kwargs,
    )


@pytest.fixture
def users_repo():
    return FakeUserRepo(
        [
            make_user(ADMIN_ID, role=Role.ADMIN, user_type=UserType.EMPLOYER, name="Admin Demo"),
            make_user(EMPLOYEE_ID),
            make_user(AGENCY_ID, role=Role.PARTNER, user_type=UserType.AGENCY),
        ]
    )


@pytest.fixture
def sections_repo():
    return FakeSectionRepo()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def verifications_repo(users_repo):
    return FakeVerificationRepo(users_repo)


@pytest.fixture
def container(users_repo, sections_repo, verifications_repo, storage):
    return build_services(
        users_repo=users_repo,
        sections_repo=sections_repo,
        verifications_repo=verifications_repo,
        storage=storage,
    )


@pytest.fixture
def admin():
    return Caller(user_id=ADMIN_ID, role=Role.ADMIN)


@pytest.fixture
def employee():
    return Caller(user_id=EMPLOYEE_ID, role=Role.USER)


@pytest.fixture
def agency():
    return Caller(user_id=AGENCY_ID, role=Role.PARTNER)

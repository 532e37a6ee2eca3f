from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.verification_system.verification_system.core.enums import Role, UserType
from src.verification_system.verification_system.core.exceptions import AuthenticationError, ValidationError
from src.verification_system.verification_system.users.service import AuthService

from conftest import FakeUserRepo, make_user


@pytest.fixture
def auth():
    return AuthService(
        FakeUserRepo(
            [
                make_user(1, email="admin@example.com", role=Role.ADMIN, password_hash=generate_password_hash("admin123")),
                make_user(2, email="gone@example.com", is_active=False, password_hash=generate_password_hash("pw")),
                make_user(3, email="legacy@example.com", password_hash="not-a-hash"),
            ]
        )
    )


def test_login_ok_normalizes_email(auth):
    user = auth.authenticate("  Admin@Example.com ", "admin123")
    assert user.user_id == 1
    assert user.to_caller().is_admin
    assert user.user_type == UserType.EMPLOYEE


@pytest.mark.parametrize(
    "email, password",
    [
        ("admin@example.com", "wrong"),
        ("nobody@example.com", "admin123"),
        ("gone@example.com", "pw"),
        ("legacy@example.com", "anything"),
    ],
)
def test_login_failures_share_message(auth, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.authenticate(email, password)


def test_login_requires_email(auth):
    with pytest.raises(ValidationError):
        auth.authenticate("", "x")

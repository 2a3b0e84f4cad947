from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest

from attendfy.auth import passwords
from attendfy.auth.passwords import PasswordHasher
from attendfy.auth.service import SessionAuthenticator, extract_bearer_token
from attendfy.auth.tokens import TokenService
from attendfy.core.enums import Role
from attendfy.core.exceptions import (
    AccountDeactivated,
    InvalidCredentials,
    InvalidToken,
    NoToken,
    UserNotFound,
)
from tests.fakes import PASSWORD, TEST_JWT_SECRET


def test_login_returns_token_for_valid_credentials(container, make_user):
    user = make_user(Role.EMPLOYEE, email="jane@example.com")

    result = container.auth_service.login("Jane@Example.com ", PASSWORD)

    assert result.user.user_id == user.user_id
    claims = container.token_service.decode(result.token)
    assert claims.user_id == user.user_id
    assert claims.role == Role.EMPLOYEE


def test_login_failures_share_one_message(container, make_user):
    make_user(Role.EMPLOYEE, email="active@example.com")
    make_user(Role.EMPLOYEE, email="inactive@example.com", is_active=False)

    messages = set()
    for email, password in [
        ("nobody@example.com", PASSWORD),
        ("active@example.com", "wrong-password"),
        ("inactive@example.com", PASSWORD),
    ]:
        with pytest.raises(InvalidCredentials) as exc:
            container.auth_service.login(email, password)
        messages.add(str(exc.value))

    assert messages == {"Invalid credentials"}


def test_token_expires_after_ttl(make_user):
    tokens = TokenService(TEST_JWT_SECRET, ttl=timedelta(hours=24))
    user = make_user()
    issued_at = datetime.now(timezone.utc) - timedelta(hours=25)

    with pytest.raises(InvalidToken):
        tokens.decode(tokens.issue(user, now=issued_at))


def test_token_signed_with_other_secret_is_rejected(make_user):
    token = TokenService("another-secret").issue(make_user())

    with pytest.raises(InvalidToken):
        TokenService(TEST_JWT_SECRET).decode(token)


def test_token_claims_carry_expiry(make_user):
    tokens = TokenService(TEST_JWT_SECRET)
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)

    claims = tokens.decode(tokens.issue(make_user(), now=now))

    assert claims.expires_at == now + timedelta(hours=24)


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Token abc", None),
        ("Bearer", None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_authenticator_error_kinds(container, users_repo, make_user):
    auth: SessionAuthenticator = container.session_authenticator
    active = make_user()
    inactive = make_user(is_active=False)
    gone = make_user()
    gone_token = container.token_service.issue(gone)
    users_repo.delete_by_id(gone.user_id)

    assert auth.authenticate(f"Bearer {container.token_service.issue(active)}").user_id == active.user_id
    with pytest.raises(NoToken):
        auth.authenticate(None)
    with pytest.raises(InvalidToken):
        auth.authenticate("Bearer not-a-jwt")
    with pytest.raises(UserNotFound):
        auth.authenticate(f"Bearer {gone_token}")
    with pytest.raises(AccountDeactivated):
        auth.authenticate(f"Bearer {container.token_service.issue(inactive)}")


def test_password_check_timeout_counts_as_mismatch(monkeypatch):
    hasher = PasswordHasher(timeout=0.05)
    stored = hasher.hash("pw123456")

    def slow_check(password_hash, password):
        time.sleep(0.5)
        return True

    monkeypatch.setattr(passwords, "_check", slow_check)

    assert hasher.verify(stored, "pw123456") is False


def test_password_hasher_verifies_and_rejects():
    hasher = PasswordHasher()
    stored = hasher.hash("pw123456")

    assert hasher.verify(stored, "pw123456")
    assert not hasher.verify(stored, "nope")
    assert not hasher.verify("CHANGE_ME", "pw123456")


def test_password_hashers_share_one_worker_pool():
    stored = PasswordHasher().hash("pw123456")
    for _ in range(10):
        assert PasswordHasher().verify(stored, "pw123456")

    workers = [t for t in threading.enumerate() if t.name.startswith("password-check")]
    assert 1 <= len(workers) <= 4

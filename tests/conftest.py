from __future__ import annotations

import itertools
from datetime import datetime

import pytest

from attendfy.container import assemble_container
from attendfy.core.enums import Role
from attendfy.main import create_app
from tests.fakes import PASSWORD_HASH, TEST_JWT_SECRET, InMemoryAttendance, InMemoryDevices, InMemoryUsers


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def attendance_repo(users_repo):
    return InMemoryAttendance(users_repo)


@pytest.fixture
def devices_repo():
    return InMemoryDevices()


@pytest.fixture
def container(users_repo, attendance_repo, devices_repo):
    return assemble_container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        devices_repo=devices_repo,
        jwt_secret=TEST_JWT_SECRET,
    )


@pytest.fixture
def app(container):
    return create_app("attendfy.settings.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(users_repo):
    counter = itertools.count(1)

    def _make(
        role: Role = Role.EMPLOYEE,
        *,
        first_name: str = "Test",
        last_name: str = "User",
        email: str | None = None,
        department: str = "Engineering",
        assigned_admin_id: int | None = None,
        is_active: bool = True,
    ):
        n = next(counter)
        user_id = users_repo.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email or f"{role.value}{n}@example.com",
            password_hash=PASSWORD_HASH,
            role=role,
            department=department,
            employee_id=f"EMP{n:04d}",
            assigned_admin_id=assigned_admin_id,
        )
        if not is_active:
            users_repo.set_active(user_id, is_active=False)
        return users_repo.get_by_id(user_id)

    return _make


@pytest.fixture
def auth_header(container):
    def _header(user):
        return {"Authorization": f"Bearer {container.token_service.issue(user)}"}

    return _header


@pytest.fixture
def fixed_now():
    # A Monday, before the late cutoff.
    return datetime(2024, 3, 4, 8, 30)

from __future__ import annotations

import pytest

from attendfy.core.enums import Role
from attendfy.core.exceptions import Forbidden
from attendfy.core.permissions import (
    ADMIN_OR_HIGHER,
    HR_OR_HIGHER,
    SUPER_ADMIN_ONLY,
    can_assign_role,
    can_create_role,
    check_roles,
    check_self_or_privileged,
)
from attendfy.users.model import User


def _user(role: Role, user_id: int = 1) -> User:
    return User(
        user_id=user_id,
        first_name="A",
        last_name="B",
        email="a@example.com",
        password_hash="x",
        role=role,
        department="Ops",
        employee_id=f"E{user_id}",
    )


def test_role_ranks_are_strictly_ordered():
    ordered = [Role.SUPER_ADMIN, Role.ADMIN, Role.HR_MANAGER, Role.SUPERVISOR, Role.EMPLOYEE]
    for higher, lower in zip(ordered, ordered[1:]):
        assert higher.outranks(lower)
        assert not lower.outranks(higher)
    assert Role.ADMIN.at_least(Role.ADMIN)


def test_check_roles_names_requirement_in_message():
    with pytest.raises(Forbidden) as exc:
        check_roles(_user(Role.EMPLOYEE), ADMIN_OR_HIGHER)

    assert str(exc.value) == "User role employee is not authorized to access this route (Admin or higher required)"


def test_check_roles_allows_members():
    check_roles(_user(Role.SUPER_ADMIN), SUPER_ADMIN_ONLY)
    check_roles(_user(Role.SUPERVISOR), HR_OR_HIGHER)


def test_employee_may_only_access_self():
    employee = _user(Role.EMPLOYEE, user_id=7)

    check_self_or_privileged(employee, 7)
    with pytest.raises(Forbidden, match="only access your own data"):
        check_self_or_privileged(employee, 8)


def test_admin_may_access_anyone():
    check_self_or_privileged(_user(Role.ADMIN, user_id=1), 99)


@pytest.mark.parametrize(
    "caller, current, new, allowed",
    [
        (Role.SUPER_ADMIN, Role.EMPLOYEE, Role.ADMIN, True),
        (Role.SUPER_ADMIN, Role.ADMIN, Role.HR_MANAGER, True),
        (Role.SUPER_ADMIN, Role.EMPLOYEE, Role.SUPER_ADMIN, False),
        (Role.SUPER_ADMIN, Role.SUPER_ADMIN, Role.ADMIN, False),
        (Role.ADMIN, Role.EMPLOYEE, Role.HR_MANAGER, True),
        (Role.ADMIN, Role.EMPLOYEE, Role.ADMIN, False),
        (Role.ADMIN, Role.ADMIN, Role.EMPLOYEE, False),
        (Role.HR_MANAGER, Role.EMPLOYEE, Role.SUPERVISOR, False),
    ],
)
def test_can_assign_role(caller, current, new, allowed):
    assert can_assign_role(caller, current, new) is allowed


def test_only_super_admin_creates_admins():
    assert can_create_role(Role.SUPER_ADMIN, Role.ADMIN)
    assert not can_create_role(Role.ADMIN, Role.ADMIN)
    assert can_create_role(Role.ADMIN, Role.SUPERVISOR)
    assert not can_create_role(Role.SUPER_ADMIN, Role.SUPER_ADMIN)
    assert not can_create_role(Role.HR_MANAGER, Role.EMPLOYEE)

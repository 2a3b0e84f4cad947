"""Role authorization checks.

Pure functions of (caller, requirement); the Flask guards in
``auth.guards`` call these and let the raised ``Forbidden`` propagate.
"""

from __future__ import annotations

from typing import Iterable

from .enums import Role
from .exceptions import Forbidden

SUPER_ADMIN_ONLY = frozenset({Role.SUPER_ADMIN})
ADMIN_OR_HIGHER = frozenset({Role.SUPER_ADMIN, Role.ADMIN})
HR_OR_HIGHER = frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.HR_MANAGER, Role.SUPERVISOR})

# Roles restricted to their own attendance rows when listing.
SELF_SCOPED_ATTENDANCE = frozenset({Role.EMPLOYEE, Role.SUPERVISOR})

REQUIREMENT_LABELS = {
    SUPER_ADMIN_ONLY: "Super Admin",
    ADMIN_OR_HIGHER: "Admin or higher",
    HR_OR_HIGHER: "HR Manager or higher",
}


def check_roles(user, allowed: Iterable[Role], requirement: str | None = None) -> None:
    allowed = frozenset(allowed)
    if user.role in allowed:
        return
    label = requirement or REQUIREMENT_LABELS.get(allowed) or ", ".join(sorted(r.value for r in allowed))
    raise Forbidden(f"User role {user.role.value} is not authorized to access this route ({label} required)")


def check_self_or_privileged(user, target_id: int) -> None:
    if user.role in ADMIN_OR_HIGHER or int(user.user_id) == int(target_id):
        return
    raise Forbidden("Access denied. You can only access your own data.")


def can_assign_role(caller_role: Role, current_role: Role, new_role: Role) -> bool:
    """Whether `caller_role` may move an account from `current_role` to `new_role`."""
    if caller_role not in ADMIN_OR_HIGHER:
        return False
    if new_role == Role.SUPER_ADMIN:
        return False
    if caller_role == Role.SUPER_ADMIN:
        return current_role != Role.SUPER_ADMIN
    return caller_role.outranks(current_role) and caller_role.outranks(new_role)


def can_create_role(caller_role: Role, new_role: Role) -> bool:
    """Only super admins create admins; admins create anything below them."""
    if new_role == Role.SUPER_ADMIN:
        return False
    if new_role == Role.ADMIN:
        return caller_role == Role.SUPER_ADMIN
    return caller_role in ADMIN_OR_HIGHER

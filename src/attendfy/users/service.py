from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Optional

from ..auth.passwords import PasswordHasher
from ..auth.tokens import TokenService
from ..common.validators import normalize_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    Forbidden,
    InvalidCredentials,
    NotFoundError,
    ValidationError,
)
from ..core.permissions import (
    ADMIN_OR_HIGHER,
    SUPER_ADMIN_ONLY,
    can_assign_role,
    can_create_role,
    check_roles,
    check_self_or_privileged,
)
from .model import User, UserFilter
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User


@dataclass(frozen=True)
class NewAccount:
    """Validated registration input."""

    first_name: str
    last_name: str
    email: str
    password: str
    department: str
    employee_id: Optional[str] = None
    assigned_admin_id: Optional[int] = None
    device_id: Optional[str] = None


class AuthService:
    """Use case: verify credentials (login) and issue a session token."""

    def __init__(self, users: UserRepository, passwords: PasswordHasher, tokens: TokenService):
        self._users = users
        self._passwords = passwords
        self._tokens = tokens

    def login(self, email: str, password: str) -> LoginResult:
        # Unknown email, inactive account and wrong password share one message.
        user = self._users.get_by_email(normalize_email(email))
        if not user or not user.is_active:
            raise InvalidCredentials()

        if not self._passwords.verify(user.password_hash, password):
            raise InvalidCredentials()

        logger.info("User %s logged in", user.user_id)
        return LoginResult(token=self._tokens.issue(user), user=user)

    def issue_token(self, user: User) -> str:
        return self._tokens.issue(user)


class UserService:
    """Use cases: registration and management of user accounts."""

    def __init__(self, users: UserRepository, passwords: PasswordHasher):
        self._users = users
        self._passwords = passwords

    # -- registration -------------------------------------------------

    def _ensure_unique(self, *, email: str, employee_id: str) -> None:
        if self._users.get_by_email(email):
            raise ConflictError("Email already registered")
        if self._users.get_by_employee_id(employee_id):
            raise ConflictError("Employee ID already exists")

    def _resolve_admin(self, admin_id: Optional[int]) -> User:
        admin = self._users.get_by_id(admin_id) if admin_id is not None else None
        if not admin or admin.role not in ADMIN_OR_HIGHER or not admin.is_active:
            raise ValidationError(
                "Validation failed",
                errors=[{"field": "assignedAdmin", "message": "assignedAdmin must be an active admin"}],
            )
        return admin

    def _create(self, account: NewAccount, role: Role) -> User:
        employee_id = require_non_empty(account.employee_id or "", "employeeId")
        email = normalize_email(account.email)
        self._ensure_unique(email=email, employee_id=employee_id)

        assigned_admin_id = None
        if role == Role.EMPLOYEE:
            assigned_admin_id = self._resolve_admin(account.assigned_admin_id).user_id

        user_id = self._users.create_user(
            first_name=account.first_name,
            last_name=account.last_name,
            email=email,
            password_hash=self._passwords.hash(account.password),
            role=role,
            department=account.department,
            employee_id=employee_id,
            assigned_admin_id=assigned_admin_id,
            device_id=account.device_id,
        )
        logger.info("Created %s account %s", role.value, user_id)
        return self._users.get_by_id(user_id)

    def _employee_admin_for(self, caller: User, requested_admin_id: Optional[int]) -> int:
        # Super admins may file an employee under any admin; admins file under themselves.
        if caller.role == Role.SUPER_ADMIN and requested_admin_id is not None:
            return int(requested_admin_id)
        return caller.user_id

    def register_admin(self, caller: User, account: NewAccount) -> User:
        check_roles(caller, SUPER_ADMIN_ONLY)
        if not account.employee_id:
            account = replace(account, employee_id=f"ADM{str(int(time.time() * 1000))[-6:]}")
        return self._create(account, Role.ADMIN)

    def register_employee(self, caller: User, account: NewAccount) -> User:
        check_roles(caller, ADMIN_OR_HIGHER)
        admin_id = self._employee_admin_for(caller, account.assigned_admin_id)
        return self._create(replace(account, assigned_admin_id=admin_id), Role.EMPLOYEE)

    def register_public(self, account: NewAccount) -> User:
        return self._create(account, Role.EMPLOYEE)

    def register_with_role(self, caller: User, account: NewAccount, role: Role) -> User:
        if not can_create_role(caller.role, role):
            raise Forbidden(f"User role {caller.role.value} cannot create {role.value} accounts")
        if role == Role.EMPLOYEE:
            admin_id = self._employee_admin_for(caller, account.assigned_admin_id)
            account = replace(account, assigned_admin_id=admin_id)
        return self._create(account, role)

    # -- directory ----------------------------------------------------

    def get_user(self, caller: User, user_id: int) -> User:
        check_self_or_privileged(caller, user_id)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(
        self,
        caller: User,
        *,
        department: Optional[str] = None,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
        assigned_admin_id: Optional[int] = None,
    ) -> list[User]:
        check_roles(caller, ADMIN_OR_HIGHER)
        if caller.role != Role.SUPER_ADMIN:
            assigned_admin_id = caller.user_id

        filters = UserFilter(
            assigned_admin_id=assigned_admin_id,
            department=department,
            role=role,
            is_active=is_active,
        )
        return list(self._users.list_users(filters))

    def update_user(self, caller: User, user_id: int, changes: dict) -> User:
        check_self_or_privileged(caller, user_id)
        target = self._users.get_by_id(user_id)
        if not target:
            raise NotFoundError("User not found")

        changes = dict(changes)
        if changes.get("is_active") is False:
            self._check_deactivation(caller, target)
        privileged = {"role", "is_active", "assigned_admin_id"} & changes.keys()
        if privileged and caller.role not in ADMIN_OR_HIGHER:
            raise Forbidden("Not authorized to change role")

        new_role = changes.get("role", target.role)
        if new_role != target.role and not can_assign_role(caller.role, target.role, new_role):
            raise Forbidden("Not authorized to change role")
        if new_role == target.role:
            changes.pop("role", None)

        if new_role == Role.EMPLOYEE:
            if "assigned_admin_id" in changes or target.role != Role.EMPLOYEE:
                admin_id = changes.get("assigned_admin_id")
                if admin_id is None:
                    admin_id = caller.user_id
                changes["assigned_admin_id"] = self._resolve_admin(admin_id).user_id
        elif target.assigned_admin_id is not None or "assigned_admin_id" in changes:
            changes["assigned_admin_id"] = None

        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            if changes["email"] != target.email and self._users.get_by_email(changes["email"]):
                raise ConflictError("Email already exists")
        if "employee_id" in changes and changes["employee_id"] != target.employee_id:
            if self._users.get_by_employee_id(changes["employee_id"]):
                raise ConflictError("Employee ID already exists")

        self._users.update_user(user_id, changes)
        return self._users.get_by_id(user_id)

    def delete_user(self, caller: User, user_id: int) -> None:
        check_roles(caller, ADMIN_OR_HIGHER)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.role == Role.SUPER_ADMIN:
            raise Forbidden("Cannot delete super admin")
        if caller.role != Role.SUPER_ADMIN and user.assigned_admin_id != caller.user_id:
            raise Forbidden("Not authorized to delete this user")
        if self._users.list_users(UserFilter(assigned_admin_id=user.user_id)):
            raise ConflictError("Reassign this admin's users before deleting the account")

        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted by %s", user_id, caller.user_id)

    @staticmethod
    def _check_deactivation(caller: User, target: User) -> None:
        # Only a super admin may switch off their own account.
        if target.role == Role.SUPER_ADMIN and caller.user_id != target.user_id:
            raise Forbidden("Cannot deactivate super admin")

    def deactivate_user(self, caller: User, user_id: int) -> None:
        check_self_or_privileged(caller, user_id)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        self._check_deactivation(caller, user)

        self._users.set_active(user_id, is_active=False)
        logger.info("User %s deactivated by %s", user_id, caller.user_id)

    def change_password(self, caller: User, user_id: int, *, current_password: str, new_password: str) -> None:
        check_self_or_privileged(caller, user_id)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if not self._passwords.verify(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")

        self._users.set_password_hash(user_id, self._passwords.hash(new_password))

    # -- statistics ---------------------------------------------------

    def stats_overview(self, caller: User) -> dict:
        check_roles(caller, ADMIN_OR_HIGHER)
        users = self._users.list_users(UserFilter())

        by_department: "OrderedDict[str, dict]" = OrderedDict()
        for u in sorted(users, key=lambda u: u.department):
            d = by_department.setdefault(u.department, {"department": u.department, "count": 0, "activeCount": 0})
            d["count"] += 1
            d["activeCount"] += int(u.is_active)

        return {
            "overview": {
                "totalUsers": len(users),
                "activeUsers": sum(1 for u in users if u.is_active),
                "departments": sorted({u.department for u in users}),
                "roles": sorted({u.role.value for u in users}),
            },
            "departmentBreakdown": list(by_department.values()),
        }

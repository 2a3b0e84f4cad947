from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a user account.

    Plain data; repositories build it, services read it.
    """

    user_id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str
    role: Role
    department: str
    employee_id: str
    assigned_admin_id: Optional[int] = None
    device_id: Optional[str] = None
    is_active: bool = True
    join_date: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_public_dict(self) -> dict:
        """Serialised form without the password hash."""
        return {
            "id": self.user_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "employeeId": self.employee_id,
            "assignedAdmin": self.assigned_admin_id,
            "deviceId": self.device_id,
            "isActive": self.is_active,
            "joinDate": isoformat_or_none(self.join_date),
        }


@dataclass(frozen=True)
class UserFilter:
    assigned_admin_id: Optional[int] = None
    department: Optional[str] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None

    def matches(self, user: User) -> bool:
        if self.assigned_admin_id is not None and user.assigned_admin_id != self.assigned_admin_id:
            return False
        if self.department is not None and user.department != self.department:
            return False
        if self.role is not None and user.role != self.role:
            return False
        if self.is_active is not None and user.is_active != self.is_active:
            return False
        return True

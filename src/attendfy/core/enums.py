from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles, from most to least privileged."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    HR_MANAGER = "hr_manager"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def outranks(self, other: "Role") -> bool:
        return self.rank > other.rank

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank


_ROLE_RANK = {
    Role.SUPER_ADMIN: 4,
    Role.ADMIN: 3,
    Role.HR_MANAGER: 2,
    Role.SUPERVISOR: 1,
    Role.EMPLOYEE: 0,
}


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LEAVE = "leave"
    HOLIDAY = "holiday"


class WorkShift(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"


class LedgerState(str, Enum):
    """Per (user, day) check-in state."""

    NO_RECORD = "no_record"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"

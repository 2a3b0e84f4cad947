"""Read-only aggregates over the attendance ledger and the user directory."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_clock, now_local, trailing_days
from ..common.formatting import initials, percentage
from ..core.constants import DEFAULT_REPORT_DAYS, LATE_CUTOFF_HOUR, RECENT_ACTIVITY_LIMIT
from ..core.enums import AttendanceStatus, Role
from ..users.model import User
from ..users.repository import UserRepository


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    present_today: int
    late_today: int

    @property
    def absent_today(self) -> int:
        return max(self.total_employees - self.present_today, 0)

    def to_dict(self) -> dict:
        total = self.total_employees
        return {
            "totalEmployees": total,
            "presentToday": self.present_today,
            "lateToday": self.late_today,
            "absentToday": self.absent_today,
            "presentPercentage": percentage(self.present_today, total),
            "latePercentage": percentage(self.late_today, total),
            "absentPercentage": percentage(self.absent_today, total),
        }


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        late_cutoff_hour: int = LATE_CUTOFF_HOUR,
    ):
        self._attendance = attendance
        self._users = users
        self._late_cutoff_hour = late_cutoff_hour

    def _scope(self, caller: User, department: Optional[str]) -> tuple[Optional[int], Optional[str]]:
        """(user_id, department) filters the caller is allowed to see."""
        if caller.role == Role.EMPLOYEE:
            return caller.user_id, None
        return None, department

    def _count_present(self, rows) -> tuple[int, int]:
        present = sum(1 for r in rows if r.record.status == AttendanceStatus.PRESENT)
        late = sum(1 for r in rows if r.record.is_late(self._late_cutoff_hour))
        return present, late

    def summary(
        self,
        caller: User,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        department: Optional[str] = None,
    ) -> list[dict]:
        user_id, department = self._scope(caller, department)
        rows = self._attendance.list_rows(
            start_date=start_date, end_date=end_date, user_id=user_id, department=department
        )

        groups: "OrderedDict[AttendanceStatus, dict]" = OrderedDict((s, None) for s in AttendanceStatus)
        for row in rows:
            status = row.record.status
            if groups[status] is None:
                groups[status] = {"status": status.value, "count": 0, "users": []}
            g = groups[status]
            g["count"] += 1
            if row.record.user_id not in g["users"]:
                g["users"].append(row.record.user_id)
        return [g for g in groups.values() if g is not None]

    def dashboard_stats(
        self,
        caller: User,
        *,
        department: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> DashboardStats:
        today = (now or now_local()).date()
        user_id, department = self._scope(caller, department)

        if user_id is not None:
            total = 1
        else:
            total = self._users.count_users(role=Role.EMPLOYEE, department=department)

        rows = self._attendance.list_rows(start_date=today, end_date=today, user_id=user_id, department=department)
        present, late = self._count_present(rows)
        return DashboardStats(total_employees=total, present_today=present, late_today=late)

    def weekly_attendance(
        self,
        caller: User,
        *,
        department: Optional[str] = None,
        now: Optional[datetime] = None,
        days: int = DEFAULT_REPORT_DAYS,
    ) -> list[dict]:
        today = (now or now_local()).date()
        span = list(trailing_days(today, days))
        user_id, department = self._scope(caller, department)

        rows = self._attendance.list_rows(start_date=span[0], end_date=today, user_id=user_id, department=department)
        by_day: dict[date, list[AttendanceRow]] = {d: [] for d in span}
        for row in rows:
            if row.record.work_date in by_day:
                by_day[row.record.work_date].append(row)

        out = []
        for day in span:
            present, late = self._count_present(by_day[day])
            out.append({"day": day.strftime("%a"), "date": day.isoformat(), "present": present, "late": late})
        return out

    def recent_activity(
        self,
        caller: User,
        *,
        department: Optional[str] = None,
        limit: int = RECENT_ACTIVITY_LIMIT,
    ) -> list[dict]:
        user_id, department = self._scope(caller, department)
        rows = self._attendance.list_recent_rows(limit=limit, user_id=user_id, department=department)

        activities = []
        for row in rows:
            rec = row.record
            if rec.check_in_time is None:
                continue
            activities.append(
                {
                    "name": f"{row.first_name} {row.last_name}",
                    "action": "Checked out" if rec.check_out_time else "Checked in",
                    "time": format_clock(rec.check_out_time or rec.check_in_time),
                    "avatar": initials(row.first_name, row.last_name),
                }
            )
        return activities

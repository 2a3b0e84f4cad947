from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..common.formatting import round_half_up
from ..core.constants import LATE_CUTOFF_HOUR
from ..core.enums import AttendanceStatus, LedgerState, WorkShift


@dataclass(frozen=True)
class GeoPoint:
    x: float
    y: float

    @classmethod
    def from_pair(cls, pair) -> "GeoPoint":
        return cls(x=float(pair[0]), y=float(pair[1]))

    def to_dict(self) -> dict:
        return {"type": "Point", "coordinates": [self.x, self.y]}


def compute_work_hours(check_in: Optional[datetime], check_out: Optional[datetime]) -> float:
    """Hours between check-in and check-out, rounded half-up to 2 decimals (0 if either is missing)."""
    if check_in is None or check_out is None:
        return 0.0
    return round_half_up((check_out - check_in).total_seconds() / 3600, 2)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one calendar day."""

    attendance_id: int
    user_id: int
    work_date: date
    shift: WorkShift = WorkShift.MORNING
    status: AttendanceStatus = AttendanceStatus.ABSENT
    check_in_time: Optional[datetime] = None
    check_in_location: Optional[GeoPoint] = None
    check_out_time: Optional[datetime] = None
    check_out_location: Optional[GeoPoint] = None
    work_hours: float = 0.0
    notes: Optional[str] = None
    approved_by: Optional[int] = None

    @property
    def state(self) -> LedgerState:
        if self.check_in_time is None:
            return LedgerState.NO_RECORD
        if self.check_out_time is None:
            return LedgerState.CHECKED_IN
        return LedgerState.CHECKED_OUT

    def is_late(self, cutoff_hour: int = LATE_CUTOFF_HOUR) -> bool:
        return (
            self.status == AttendanceStatus.PRESENT
            and self.check_in_time is not None
            and self.check_in_time.hour >= cutoff_hour
        )

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "user": self.user_id,
            "date": self.work_date.isoformat(),
            "checkIn": _stamp(self.check_in_time, self.check_in_location),
            "checkOut": _stamp(self.check_out_time, self.check_out_location),
            "status": self.status.value,
            "shift": self.shift.value,
            "workHours": self.work_hours,
            "notes": self.notes,
            "approvedBy": self.approved_by,
        }


def _stamp(when: Optional[datetime], where: Optional[GeoPoint]) -> Optional[dict]:
    if when is None:
        return None
    return {"time": isoformat_or_none(when), "location": where.to_dict() if where else None}


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for listings and reports: a record joined with its owner and approver."""

    record: AttendanceRecord
    first_name: str
    last_name: str
    employee_id: str
    department: str
    approver_first_name: Optional[str] = None
    approver_last_name: Optional[str] = None

    def to_dict(self) -> dict:
        out = self.record.to_dict()
        out["user"] = {
            "id": self.record.user_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "employeeId": self.employee_id,
        }
        if self.record.approved_by is not None:
            out["approvedBy"] = {
                "id": self.record.approved_by,
                "firstName": self.approver_first_name,
                "lastName": self.approver_last_name,
            }
        return out

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, WorkShift
from .model import AttendanceRecord, AttendanceRow, GeoPoint


class AttendanceRepository(Protocol):
    """Ledger storage. At most one record per (user_id, work_date)."""

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def claim_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        shift: WorkShift,
        check_in_time: datetime,
        location: GeoPoint,
    ) -> bool:
        """Create the day's record, or fill an existing one that has no check-in.

        Sets status to present. Returns False when the day already has a
        check-in; this must be decided atomically by the store.
        """
        raise NotImplementedError

    def close_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: GeoPoint,
        work_hours: float,
    ) -> bool:
        """Set the check-out only if the record has a check-in and no check-out yet."""
        raise NotImplementedError

    def update_record(
        self,
        attendance_id: int,
        *,
        work_date: date,
        shift: WorkShift,
        status: AttendanceStatus,
        notes: Optional[str],
        approved_by: Optional[int],
        work_hours: float,
    ) -> bool:
        """HR override. Raises ConflictError if `work_date` collides with another record of the user."""
        raise NotImplementedError

    def list_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceRow]:
        """Rows ordered by date, newest first."""
        raise NotImplementedError

    def list_recent_rows(
        self,
        *,
        limit: int,
        user_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceRow]:
        """Rows ordered by check-in time, newest first; rows without a check-in sort last."""
        raise NotImplementedError

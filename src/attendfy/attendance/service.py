from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_COORDINATES
from ..core.enums import AttendanceStatus, LedgerState, WorkShift
from ..core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, NoCheckInFound, RecordNotFound
from ..core.permissions import HR_OR_HIGHER, SELF_SCOPED_ATTENDANCE, check_roles
from ..users.model import User
from .model import AttendanceRecord, AttendanceRow, GeoPoint, compute_work_hours
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordChanges:
    """HR override input; None means "leave as is"."""

    work_date: Optional[date] = None
    shift: Optional[WorkShift] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None
    notes_given: bool = False


class AttendanceService:
    """Use cases: daily check-in/check-out and HR edits of the ledger."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def check_in(
        self,
        user: User,
        coordinates: Optional[tuple[float, float]] = None,
        shift: Optional[WorkShift] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        existing = self._attendance.get_for_user_and_date(user.user_id, today)
        if existing and existing.state != LedgerState.NO_RECORD:
            raise AlreadyCheckedIn()

        claimed = self._attendance.claim_checkin(
            user_id=user.user_id,
            work_date=today,
            shift=shift or WorkShift.MORNING,
            check_in_time=now,
            location=GeoPoint.from_pair(coordinates or DEFAULT_COORDINATES),
        )
        if not claimed:
            # Another request checked in between the read and the write.
            raise AlreadyCheckedIn()

        logger.info("User %s checked in for %s", user.user_id, today.isoformat())
        return self._attendance.get_for_user_and_date(user.user_id, today)

    def check_out(
        self,
        user: User,
        coordinates: Optional[tuple[float, float]] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user.user_id, today)
        if not record or record.state == LedgerState.NO_RECORD:
            raise NoCheckInFound()
        if record.state == LedgerState.CHECKED_OUT:
            raise AlreadyCheckedOut()

        closed = self._attendance.close_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            location=GeoPoint.from_pair(coordinates or DEFAULT_COORDINATES),
            work_hours=compute_work_hours(record.check_in_time, now),
        )
        if not closed:
            raise AlreadyCheckedOut()

        logger.info("User %s checked out for %s", user.user_id, today.isoformat())
        return self._attendance.get_by_id(record.attendance_id)

    def list_records(
        self,
        caller: User,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> list[AttendanceRow]:
        if caller.role in SELF_SCOPED_ATTENDANCE:
            user_id = caller.user_id
        return list(self._attendance.list_rows(start_date=start_date, end_date=end_date, user_id=user_id))

    def edit_record(self, editor: User, attendance_id: int, changes: RecordChanges) -> AttendanceRecord:
        check_roles(editor, HR_OR_HIGHER)
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise RecordNotFound()

        self._attendance.update_record(
            attendance_id,
            work_date=changes.work_date or record.work_date,
            shift=changes.shift or record.shift,
            status=changes.status or record.status,
            notes=changes.notes if changes.notes_given else record.notes,
            approved_by=editor.user_id,
            work_hours=compute_work_hours(record.check_in_time, record.check_out_time),
        )
        logger.info("Attendance record %s edited by %s", attendance_id, editor.user_id)
        return self._attendance.get_by_id(attendance_id)

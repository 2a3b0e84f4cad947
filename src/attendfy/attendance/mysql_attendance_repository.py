from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, WorkShift
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, AttendanceRow, GeoPoint
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    ar.attendance_id, ar.user_id, ar.work_date, ar.shift, ar.status,
    ar.check_in_time, ar.check_in_x, ar.check_in_y,
    ar.check_out_time, ar.check_out_x, ar.check_out_y,
    ar.work_hours, ar.notes, ar.approved_by
"""

_ROW_SELECT = f"""
    SELECT {_RECORD_COLUMNS},
           u.first_name, u.last_name, u.employee_id, u.department,
           ap.first_name AS approver_first_name, ap.last_name AS approver_last_name
    FROM attendance_records ar
    JOIN users u ON u.user_id = ar.user_id
    LEFT JOIN users ap ON ap.user_id = ar.approved_by
"""


def _point(x, y) -> Optional[GeoPoint]:
    if x is None or y is None:
        return None
    return GeoPoint(x=float(x), y=float(y))


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        shift=WorkShift(r["shift"]),
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_in_location=_point(r.get("check_in_x"), r.get("check_in_y")),
        check_out_time=r.get("check_out_time"),
        check_out_location=_point(r.get("check_out_x"), r.get("check_out_y")),
        work_hours=float(r.get("work_hours") or 0),
        notes=r.get("notes"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
    )


def _row_to_view(r: dict) -> AttendanceRow:
    return AttendanceRow(
        record=_row_to_record(r),
        first_name=r["first_name"],
        last_name=r["last_name"],
        employee_id=r["employee_id"],
        department=r["department"],
        approver_first_name=r.get("approver_first_name"),
        approver_last_name=r.get("approver_last_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.user_id=%s AND ar.work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def claim_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        shift: WorkShift,
        check_in_time: datetime,
        location: GeoPoint,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, shift, status, check_in_time, check_in_x, check_in_y)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), work_date, shift.value, AttendanceStatus.PRESENT.value,
                     check_in_time, location.x, location.y),
                )
                return True
        except Exception as e:
            if not is_duplicate_key(e):
                raise

        # The day already has a record; claim it only while its check-in is empty.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_x=%s, check_in_y=%s, status=%s
                WHERE user_id=%s AND work_date=%s AND check_in_time IS NULL
                """,
                (check_in_time, location.x, location.y, AttendanceStatus.PRESENT.value, int(user_id), work_date),
            )
            return cur.rowcount > 0

    def close_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: GeoPoint,
        work_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_x=%s, check_out_y=%s, work_hours=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (check_out_time, location.x, location.y, work_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET work_date=%s, shift=%s, status=%s, notes=%s, approved_by=%s, work_hours=%s
                    WHERE attendance_id=%s
                    """,
                    (work_date, shift.value, status.value, notes, approved_by, work_hours, int(attendance_id)),
                )
                return cur.rowcount > 0
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("An attendance record already exists for this user on that date") from e
            raise

    def list_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceRow]:
        clauses: list[str] = []
        params: list[object] = []
        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)
        if user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(int(user_id))
        if department is not None:
            clauses.append("u.department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_ROW_SELECT} {build_where(clauses)} ORDER BY ar.work_date DESC, ar.user_id ASC",
                tuple(params),
            )
            return [_row_to_view(r) for r in fetchall(cur)]

    def list_recent_rows(
        self,
        *,
        limit: int,
        user_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceRow]:
        clauses: list[str] = []
        params: list[object] = []
        if user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(int(user_id))
        if department is not None:
            clauses.append("u.department=%s")
            params.append(department)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_ROW_SELECT} {build_where(clauses)}
                ORDER BY ar.check_in_time IS NULL, ar.check_in_time DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_view(r) for r in fetchall(cur)]

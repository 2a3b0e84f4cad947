from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import DeviceExists
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Device
from .repository import DeviceRepository


def _row_to_device(r: dict) -> Device:
    return Device(
        id=int(r["id"]),
        device_id=r["device_id"],
        name=r["name"],
        location=r["location"],
        is_active=bool(r["is_active"]),
        last_ping=r.get("last_ping"),
    )


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, device_pk: int) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, device_id, name, location, is_active, last_ping FROM devices WHERE id=%s", (int(device_pk),))
            r = fetchone(cur)
            return _row_to_device(r) if r else None

    def get_by_device_id(self, device_id: str) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, device_id, name, location, is_active, last_ping FROM devices WHERE device_id=%s", (device_id,))
            r = fetchone(cur)
            return _row_to_device(r) if r else None

    def create_device(self, *, device_id: str, name: str, location: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO devices(device_id, name, location) VALUES(%s,%s,%s)",
                    (device_id, name, location),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DeviceExists() from e
            raise

    def set_active(self, device_pk: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE devices SET is_active=%s WHERE id=%s", (1 if is_active else 0, int(device_pk)))
            # rowcount is 0 when the flag already had this value, so existence is checked by the service
            return cur.rowcount > 0

    def list_active(self) -> Sequence[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, device_id, name, location, is_active, last_ping FROM devices WHERE is_active=1 ORDER BY name"
            )
            return [_row_to_device(r) for r in fetchall(cur)]

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none


@dataclass(frozen=True)
class Device:
    """A physical check-in terminal."""

    id: int
    device_id: str
    name: str
    location: str
    is_active: bool = True
    last_ping: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "deviceId": self.device_id,
            "name": self.name,
            "location": self.location,
            "isActive": self.is_active,
            "lastPing": isoformat_or_none(self.last_ping),
        }

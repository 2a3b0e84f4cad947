from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Device


class DeviceRepository(Protocol):
    def get_by_id(self, device_pk: int) -> Optional[Device]:
        raise NotImplementedError

    def get_by_device_id(self, device_id: str) -> Optional[Device]:
        raise NotImplementedError

    def create_device(self, *, device_id: str, name: str, location: str) -> int:
        """Raises ConflictError when `device_id` is already registered."""
        raise NotImplementedError

    def set_active(self, device_pk: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_active(self) -> Sequence[Device]:
        raise NotImplementedError

from __future__ import annotations

import logging

from ..core.exceptions import DeviceExists, DeviceNotFound
from ..core.permissions import ADMIN_OR_HIGHER, check_roles
from ..users.model import User
from .model import Device
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


class DeviceService:
    def __init__(self, devices: DeviceRepository):
        self._devices = devices

    def list_active(self) -> list[Device]:
        return list(self._devices.list_active())

    def register_device(self, caller: User, *, device_id: str, name: str, location: str) -> Device:
        check_roles(caller, ADMIN_OR_HIGHER)
        if self._devices.get_by_device_id(device_id):
            raise DeviceExists()

        pk = self._devices.create_device(device_id=device_id, name=name, location=location)
        logger.info("Device %s registered by %s", device_id, caller.user_id)
        return self._devices.get_by_id(pk)

    def set_active(self, caller: User, device_pk: int, *, is_active: bool) -> Device:
        check_roles(caller, ADMIN_OR_HIGHER)
        if not self._devices.get_by_id(device_pk):
            raise DeviceNotFound()

        self._devices.set_active(device_pk, is_active=is_active)
        return self._devices.get_by_id(device_pk)

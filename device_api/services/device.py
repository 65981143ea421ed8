import datetime
import logging
import uuid
from typing import Protocol
from sqlalchemy.exc import IntegrityError

from device_api.exceptions import (
    DeviceNotFound,
    DuplicateDevice,
    MissingDeviceFields,
)
from device_api.db.models import Device
from device_api.dto.device import DeviceDTO, DeviceRequest
from device_api.services.pagination import Page, PageRequest

log = logging.getLogger("devices")


class DeviceStore(Protocol):
    """Storage operations the device service relies on."""

    async def create(self, device: Device) -> Device: ...

    async def find_by_id(self, device_id: uuid.UUID) -> Device | None: ...

    async def find_all(self, request: PageRequest) -> Page[Device]: ...

    async def find_by_brand(
        self, brand: str, request: PageRequest
    ) -> Page[Device]: ...

    async def save(self, device: Device) -> Device | None: ...

    async def delete_by_id(self, device_id: uuid.UUID) -> int: ...


def _to_dto(device: Device) -> DeviceDTO:
    return DeviceDTO.model_validate(device)


class DeviceService:
    """
    Validates device requests and runs them against a `DeviceStore`.

    Uniqueness of (name, brand) is left to the store's constraint: the
    service never looks for a clashing device before writing, it only
    turns the store's `IntegrityError` into `DuplicateDevice`. Any other
    storage error propagates unchanged.
    """

    def __init__(self, store: DeviceStore) -> None:
        self._store = store

    async def add_device(self, request: DeviceRequest) -> DeviceDTO:
        if request.name is None or request.brand is None:
            raise MissingDeviceFields()

        device = Device(
            id=uuid.uuid4(),
            name=request.name,
            brand=request.brand,
            created_at=datetime.datetime.now(datetime.timezone.utc),
        )

        try:
            created = await self._store.create(device)
        except IntegrityError:
            log.info(
                f"Rejected duplicate device name={request.name!r} "
                f"brand={request.brand!r}"
            )
            raise DuplicateDevice()

        log.info(f"Added device {created.id}")
        return _to_dto(created)

    async def get_device_by_identifier(
        self, device_id: uuid.UUID
    ) -> DeviceDTO:
        device = await self._store.find_by_id(device_id)
        if device is None:
            raise DeviceNotFound()
        return _to_dto(device)

    async def list_all_devices(self, request: PageRequest) -> Page[DeviceDTO]:
        page = await self._store.find_all(request)
        return page.map(_to_dto)

    async def search_device_by_brand(
        self, brand: str, request: PageRequest
    ) -> Page[DeviceDTO]:
        page = await self._store.find_by_brand(brand, request)
        return page.map(_to_dto)

    async def update_device(
        self, device_id: uuid.UUID, request: DeviceRequest
    ) -> DeviceDTO:
        device = await self._store.find_by_id(device_id)
        if device is None:
            log.info(f"Update of unknown device {device_id}")
            raise DeviceNotFound()

        if request.name is not None:
            device.name = request.name
        if request.brand is not None:
            device.brand = request.brand

        try:
            saved = await self._store.save(device)
        except IntegrityError:
            log.info(f"Rejected update of device {device_id}: duplicate")
            raise DuplicateDevice()

        if saved is None:
            log.info(f"Device {device_id} was deleted before its update")
            raise DeviceNotFound()

        log.info(f"Updated device {device_id}")
        return _to_dto(saved)

    async def delete_device(self, device_id: uuid.UUID) -> None:
        removed = await self._store.delete_by_id(device_id)
        if removed == 0:
            log.info(f"Delete of unknown device {device_id}")
            raise DeviceNotFound()
        log.info(f"Deleted device {device_id}")

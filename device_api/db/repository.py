import uuid
from sqlalchemy import Select, delete, func, select, update

from device_api.db.models import Device
from device_api.db.session import DatabaseSessionManager
from device_api.services.pagination import Page, PageRequest


class DeviceRepository:
    """
    SQLAlchemy-backed storage for devices.

    Each call runs in its own session. Writes commit before returning; a
    write that violates a constraint raises `sqlalchemy.exc.IntegrityError`
    after the session has been rolled back, leaving the table untouched.
    """

    def __init__(self, sessions: DatabaseSessionManager) -> None:
        self._sessions = sessions

    async def create(self, device: Device) -> Device:
        async with self._sessions.session() as session:
            session.add(device)
            await session.commit()
            return device

    async def find_by_id(self, device_id: uuid.UUID) -> Device | None:
        async with self._sessions.session() as session:
            return await session.get(Device, device_id)

    async def find_all(self, request: PageRequest) -> Page[Device]:
        return await self._paged(select(Device), request)

    async def find_by_brand(
        self, brand: str, request: PageRequest
    ) -> Page[Device]:
        return await self._paged(
            select(Device).where(Device.brand == brand), request
        )

    async def save(self, device: Device) -> Device | None:
        """
        Write the mutable fields of an existing device. Returns None when
        the row no longer exists; a missing row is never inserted.
        """
        async with self._sessions.session() as session:
            result = await session.execute(
                update(Device)
                .where(Device.id == device.id)
                .values(name=device.name, brand=device.brand)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                return None
            await session.commit()
            return device

    async def delete_by_id(self, device_id: uuid.UUID) -> int:
        async with self._sessions.session() as session:
            result = await session.execute(
                delete(Device).where(Device.id == device_id)
            )
            await session.commit()
            return result.rowcount  # type: ignore[attr-defined, no-any-return]

    async def _paged(
        self, stmt: Select[tuple[Device]], request: PageRequest
    ) -> Page[Device]:
        async with self._sessions.session() as session:
            count_stmt = select(func.count()).select_from(stmt.subquery())
            total = (await session.execute(count_stmt)).scalar_one()

            page_stmt = (
                stmt.order_by(Device.created_at, Device.id)
                .offset(request.offset)
                .limit(request.size)
            )
            items = list((await session.execute(page_stmt)).scalars().all())

        return Page.of(items, request, total)

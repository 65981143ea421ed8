import datetime
import uuid
from sqlalchemy import String, Uuid, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base


class Device(Base):
    """
    Represents a device managed by the service.

    Attributes:
        id (UUID): The identifier generated when the device is added.
            Used for routing and lookups; never changes afterwards.
        name (str): The name of the device.
        brand (str): The brand of the device. Searchable by exact match.
        created_at (datetime): When the device was added (UTC).

    The (name, brand) pair is unique across all devices; the constraint
    is enforced by the database so concurrent writers cannot race past it.
    """

    __tablename__ = "devices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    brand: Mapped[str] = mapped_column(String, nullable=False, index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("name", "brand", name="uq_devices_name_brand"),
    )

    def __repr__(self) -> str:
        return (
            f"Device(\n"
            f"  id={self.id!r},\n"
            f"  name={self.name!r},\n"
            f"  brand={self.brand!r},\n"
            f"  created_at={self.created_at!r}\n"
            f")"
        )

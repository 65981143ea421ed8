import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID


class DeviceDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    brand: str
    created_at: datetime.datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def ensure_utc(cls, value: datetime.datetime) -> datetime.datetime:
        if value and value.tzinfo is None:
            # Treat naive datetimes as UTC; this is required because SQLite
            # DATETIME values lack timezones.
            return value.replace(tzinfo=datetime.timezone.utc)
        return value


class DeviceRequest(BaseModel):
    """
    Fields supplied when adding or updating a device. Both are required to
    add a device; on update an omitted field keeps its stored value.
    """

    name: str | None = Field(None, min_length=1)
    brand: str | None = Field(None, min_length=1)

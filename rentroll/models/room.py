from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class RoomStatus(str, Enum):
    OCCUPIED = "occupied"
    VACANT = "vacant"
    MAINTENANCE = "maintenance"


class Room(BaseModel):
    id: str = ""
    property_id: int | None = None
    number: str
    type: str = ""
    rent: int = 0  # centavos
    status: RoomStatus = RoomStatus.VACANT
    tenant_name: str | None = None

    @property
    def is_billable(self) -> bool:
        return self.status == RoomStatus.OCCUPIED

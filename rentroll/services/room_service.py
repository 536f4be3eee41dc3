from __future__ import annotations

import logging

from pydantic import BaseModel

from rentroll.models.property import Property
from rentroll.models.room import Room, RoomStatus
from rentroll.repositories.base import PropertyRepository, RoomRepository

logger = logging.getLogger(__name__)


class RoomStats(BaseModel):
    total: int = 0
    occupied: int = 0
    vacant: int = 0
    maintenance: int = 0
    potential_revenue: int = 0  # centavos, rent of occupied rooms


class RoomService:
    def __init__(self, property_repo: PropertyRepository, room_repo: RoomRepository) -> None:
        self.property_repo = property_repo
        self.room_repo = room_repo

    def create_property(self, name: str, address: str = "") -> Property:
        result = self.property_repo.create(Property(name=name, address=address))
        logger.info("Property created: id=%s, name=%s", result.id, result.name)
        return result

    def list_properties(self) -> list[Property]:
        result = self.property_repo.list_all()
        logger.debug("Listed %d properties", len(result))
        return result

    def get_property(self, property_id: int) -> Property | None:
        result = self.property_repo.get_by_id(property_id)
        logger.debug("get_property id=%s found=%s", property_id, result is not None)
        return result

    def add_room(
        self,
        property_id: int,
        number: str,
        rent: int,
        room_type: str = "",
        status: RoomStatus = RoomStatus.VACANT,
        tenant_name: str | None = None,
    ) -> Room:
        if rent <= 0:
            raise ValueError("Room rent must be greater than zero")
        if status == RoomStatus.OCCUPIED and not tenant_name:
            raise ValueError("An occupied room needs a tenant")
        room = Room(
            property_id=property_id,
            number=number,
            type=room_type,
            rent=rent,
            status=status,
            tenant_name=tenant_name if status == RoomStatus.OCCUPIED else None,
        )
        result = self.room_repo.create(room)
        logger.info("Room created: id=%s, property=%s, number=%s", result.id, property_id, number)
        return result

    def list_rooms(self, property_id: int) -> list[Room]:
        result = self.room_repo.list_by_property(property_id)
        logger.debug("Listed %d rooms for property=%s", len(result), property_id)
        return result

    def billable_rooms(self, property_id: int) -> list[Room]:
        return [room for room in self.list_rooms(property_id) if room.is_billable]

    def update_room_status(self, room_id: str, status: RoomStatus, tenant_name: str | None = None) -> Room:
        room = self.room_repo.get_by_id(room_id)
        if room is None:
            logger.warning("Status update failed: room %s not found", room_id)
            raise ValueError("Room not found")
        if status == RoomStatus.OCCUPIED:
            tenant_name = tenant_name or room.tenant_name
            if not tenant_name:
                raise ValueError("An occupied room needs a tenant")
        else:
            tenant_name = None
        self.room_repo.update_status(room_id, status, tenant_name)
        logger.info("Room %s marked %s (tenant=%s)", room.number, status.value, tenant_name)
        return room.model_copy(update={"status": status, "tenant_name": tenant_name})

    def room_stats(self, property_id: int) -> RoomStats:
        rooms = self.list_rooms(property_id)
        return RoomStats(
            total=len(rooms),
            occupied=sum(1 for room in rooms if room.status == RoomStatus.OCCUPIED),
            vacant=sum(1 for room in rooms if room.status == RoomStatus.VACANT),
            maintenance=sum(1 for room in rooms if room.status == RoomStatus.MAINTENANCE),
            potential_revenue=sum(room.rent for room in rooms if room.status == RoomStatus.OCCUPIED),
        )

from __future__ import annotations

import logging

from rentroll.exceptions import ValidationError
from rentroll.models import format_amount_input, parse_amount
from rentroll.models.charge import ChargeField, RoomCharge
from rentroll.models.room import Room

logger = logging.getLogger(__name__)

NOTES_FIELD = "notes"


def _resolve_field(field: str | ChargeField) -> str:
    if field == NOTES_FIELD:
        return NOTES_FIELD
    try:
        return ChargeField(field).value
    except ValueError:
        raise ValidationError(f"Unknown charge field: {field}") from None


class ChargeLedger:
    """Per-room editable charges for one billing run.

    The running total is recomputed over every room and every charge field
    on each edit; room counts are small enough that this never matters.
    """

    def __init__(self, charges: dict[str, RoomCharge] | None = None) -> None:
        self._charges: dict[str, RoomCharge] = {
            room_id: charge.model_copy() for room_id, charge in (charges or {}).items()
        }

    @classmethod
    def initialize(cls, rooms: list[Room]) -> ChargeLedger:
        ledger = cls(
            {
                room.id: RoomCharge(
                    room_id=room.id,
                    rent=format_amount_input(room.rent),
                    electricity="0",
                    water="0",
                    wifi="0",
                    other="0",
                    notes="",
                )
                for room in rooms
            }
        )
        logger.debug("Ledger initialized for %d rooms, total=%d", len(rooms), ledger.total)
        return ledger

    @property
    def charges(self) -> dict[str, RoomCharge]:
        return {room_id: charge.model_copy() for room_id, charge in self._charges.items()}

    @property
    def room_ids(self) -> list[str]:
        return list(self._charges)

    def get(self, room_id: str) -> RoomCharge:
        return self._charges[room_id].model_copy()

    @property
    def total(self) -> int:
        return sum(charge.total for charge in self._charges.values())

    def room_total(self, room_id: str) -> int:
        return self._charges[room_id].total

    def update_field(self, room_id: str, field: str | ChargeField, value: str) -> int:
        """Set one field for one room and return the new ledger total."""
        name = _resolve_field(field)
        current = self._charges[room_id]
        self._charges[room_id] = current.model_copy(update={name: value or ""})
        total = self.total
        logger.debug("Ledger update room=%s field=%s value=%r total=%d", room_id, name, value, total)
        return total

    def apply_to_all(self, field: str | ChargeField, value: str) -> int:
        """Broadcast one field's value to every room and return the new ledger total."""
        name = _resolve_field(field)
        for room_id, charge in self._charges.items():
            self._charges[room_id] = charge.model_copy(update={name: value or ""})
        total = self.total
        logger.info("Applied %s=%r to %d rooms, total=%d", name, value, len(self._charges), total)
        return total

    def invalid_rooms(self) -> list[str]:
        """Room ids whose rent is missing, unparseable or not positive."""
        invalid = []
        for room_id, charge in self._charges.items():
            rent = parse_amount(charge.rent)
            if rent is None or rent <= 0:
                invalid.append(room_id)
        return invalid

    def validate(self) -> None:
        invalid = self.invalid_rooms()
        if invalid:
            logger.warning("Ledger validation failed for rooms %s", ", ".join(invalid))
            raise ValidationError("Please ensure all rooms have valid rent amounts.", invalid_rooms=invalid)

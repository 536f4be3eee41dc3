from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from rentroll.models import parse_amount


class ChargeField(str, Enum):
    RENT = "rent"
    ELECTRICITY = "electricity"
    WATER = "water"
    WIFI = "wifi"
    OTHER = "other"


class RoomCharge(BaseModel):
    """Editable charges for one room. Amounts are peso strings as typed by the landlord."""

    room_id: str
    rent: str = "0"
    electricity: str = "0"
    water: str = "0"
    wifi: str = "0"
    other: str = "0"
    notes: str = ""

    def amount(self, field: ChargeField) -> int:
        """Centavos for ``field``; empty, invalid or negative input counts as zero."""
        parsed = parse_amount(getattr(self, field.value))
        if parsed is None or parsed < 0:
            return 0
        return parsed

    @property
    def total(self) -> int:
        return sum(self.amount(field) for field in ChargeField)

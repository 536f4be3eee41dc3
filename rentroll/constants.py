from zoneinfo import ZoneInfo

from rentroll.models.charge import ChargeField
from rentroll.models.room import RoomStatus

PH_TZ = ZoneInfo("Asia/Manila")

MONTHS_EN = {
    1: "January",
    2: "February",
    3: "March",
    4: "April",
    5: "May",
    6: "June",
    7: "July",
    8: "August",
    9: "September",
    10: "October",
    11: "November",
    12: "December",
}

CHARGE_LABELS = {
    ChargeField.RENT: "Rent",
    ChargeField.ELECTRICITY: "Electricity",
    ChargeField.WATER: "Water",
    ChargeField.WIFI: "WiFi",
    ChargeField.OTHER: "Other",
}

ROOM_STATUS_LABELS = {
    RoomStatus.OCCUPIED: "Occupied",
    RoomStatus.VACANT: "Vacant",
    RoomStatus.MAINTENANCE: "Under maintenance",
}


def format_period(year: int, billing_month: int) -> str:
    """``(2024, 0) -> 'January 2024'``; ``billing_month`` is 0-based."""
    return f"{MONTHS_EN.get(billing_month + 1, str(billing_month + 1))} {year}"

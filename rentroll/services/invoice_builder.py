from __future__ import annotations

import logging

from rentroll.constants import CHARGE_LABELS
from rentroll.models.charge import ChargeField, RoomCharge
from rentroll.models.invoice import InvoiceLineItem, InvoicePreview
from rentroll.models.period import BillingPeriod
from rentroll.models.room import Room

logger = logging.getLogger(__name__)


def invoice_number(period: BillingPeriod, room_number: str) -> str:
    """``INV-{year}{month:02d}-{room}``, with the 0-based month shifted to 1-12."""
    return f"INV-{period.year}{period.billing_month + 1:02d}-{room_number}"


def build_line_items(charge: RoomCharge) -> list[InvoiceLineItem]:
    items: list[InvoiceLineItem] = []
    for field in ChargeField:
        amount = charge.amount(field)
        if amount == 0:
            continue
        items.append(InvoiceLineItem(description=CHARGE_LABELS[field], amount=amount, sort_order=len(items)))
    return items


def build_previews(
    rooms: list[Room],
    charges: dict[str, RoomCharge],
    period: BillingPeriod,
) -> list[InvoicePreview]:
    """Derive one invoice preview per room from the ledger charges."""
    previews: list[InvoicePreview] = []
    for room in rooms:
        charge = charges.get(room.id) or RoomCharge(room_id=room.id)
        line_items = build_line_items(charge)
        preview = InvoicePreview(
            room=room,
            line_items=line_items,
            total=sum(item.amount for item in line_items),
            invoice_number=invoice_number(period, room.number),
            due_date=period.end_date,
            notes=charge.notes,
        )
        if not line_items:
            logger.warning("Invoice %s has no charges", preview.invoice_number)
        previews.append(preview)
    logger.debug("Built %d invoice previews for %s", len(previews), period.display_name)
    return previews


def preview_total(previews: list[InvoicePreview]) -> int:
    return sum(preview.total for preview in previews)

"""Stage functions for the billing wizard.

Each stage takes the session built so far plus the user's input and returns
a new session; the input session is never modified.  Stages run in order:
property -> rooms -> period -> charges -> preview, after which the session
is handed to ``ConfirmationService.confirm``.
"""

from __future__ import annotations

import logging

from rentroll.exceptions import ValidationError
from rentroll.models.invoice import InvoicePreview
from rentroll.models.period import BillingPeriod
from rentroll.models.property import Property
from rentroll.models.room import Room
from rentroll.models.session import BillingSession
from rentroll.services.invoice_builder import build_previews
from rentroll.services.ledger import ChargeLedger

logger = logging.getLogger(__name__)


def start_session(prop: Property) -> BillingSession:
    session = BillingSession(property_id=prop.id, property_name=prop.name)
    logger.info("Billing session %s started for property %s", session.run_key, prop.name)
    return session


def toggle_room(selected_ids: list[str], room: Room) -> list[str]:
    """Add or remove ``room``; rooms that are not occupied leave the selection as is."""
    if not room.is_billable:
        logger.debug("Room %s is %s and cannot be selected", room.number, room.status.value)
        return list(selected_ids)
    if room.id in selected_ids:
        return [room_id for room_id in selected_ids if room_id != room.id]
    return [*selected_ids, room.id]


def toggle_select_all(selected_ids: list[str], rooms: list[Room]) -> list[str]:
    billable = [room.id for room in rooms if room.is_billable]
    if billable and all(room_id in selected_ids for room_id in billable):
        return []
    return billable


def select_rooms(session: BillingSession, rooms: list[Room], selected_ids: list[str]) -> BillingSession:
    chosen = [room for room in rooms if room.id in selected_ids and room.is_billable]
    if not chosen:
        logger.warning("Session %s: no billable room selected", session.run_key)
        raise ValidationError("Please select at least one room to continue.")
    return session.model_copy(update={"selected_rooms": chosen})


def choose_period(session: BillingSession, period: BillingPeriod) -> BillingSession:
    return session.model_copy(update={"billing_period": period})


def begin_charges(session: BillingSession) -> ChargeLedger:
    """Ledger for the charge step: the session's charges if any, else seeded from room rent."""
    if session.room_charges:
        return ChargeLedger(session.room_charges)
    return ChargeLedger.initialize(session.selected_rooms)


def submit_charges(session: BillingSession, ledger: ChargeLedger) -> BillingSession:
    ledger.validate()
    return session.model_copy(update={"room_charges": ledger.charges, "total_amount": ledger.total})


def preview(session: BillingSession) -> list[InvoicePreview]:
    """Build the invoice previews, re-checking rent since sessions can arrive through ``from_params``."""
    if session.billing_period is None:
        raise ValidationError("Please select a billing period to continue.")
    if not session.selected_rooms:
        raise ValidationError("Please select at least one room to continue.")
    if not session.room_charges:
        raise ValidationError("Please review the room charges before previewing.")
    ChargeLedger(session.room_charges).validate()
    return build_previews(session.selected_rooms, session.room_charges, session.billing_period)

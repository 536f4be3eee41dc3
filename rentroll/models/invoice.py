from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel

from rentroll.constants import PH_TZ
from rentroll.models.room import Room


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PROOF_SUBMITTED = "proof_submitted"


class InvoiceLineItem(BaseModel):
    id: int | None = None
    invoice_id: int | None = None
    description: str
    amount: int  # centavos
    sort_order: int = 0


class InvoicePreview(BaseModel):
    """A computed invoice for one room that has not been persisted yet."""

    room: Room
    line_items: list[InvoiceLineItem] = []
    total: int = 0  # centavos
    invoice_number: str
    due_date: date
    notes: str = ""


class Invoice(BaseModel):
    id: int | None = None
    uuid: str = ""
    run_key: str
    invoice_number: str
    property_id: int | None = None
    room_id: str
    room_number: str
    tenant_name: str | None = None
    year: int
    billing_month: int  # 0-based
    line_items: list[InvoiceLineItem] = []
    total_amount: int = 0  # centavos
    notes: str = ""
    due_date: date
    status: InvoiceStatus = InvoiceStatus.PENDING
    paid_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_overdue(self) -> bool:
        if self.paid_at is not None or self.status == InvoiceStatus.PAID:
            return False
        return datetime.now(PH_TZ).date() > self.due_date

    @property
    def payment_status(self) -> InvoiceStatus:
        if self.paid_at is not None or self.status == InvoiceStatus.PAID:
            return InvoiceStatus.PAID
        if self.status == InvoiceStatus.PROOF_SUBMITTED:
            return InvoiceStatus.PROOF_SUBMITTED
        if self.status == InvoiceStatus.OVERDUE or self.is_overdue:
            return InvoiceStatus.OVERDUE
        return InvoiceStatus.PENDING

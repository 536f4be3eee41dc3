from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class ProofStatus(str, Enum):
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentProof(BaseModel):
    """A tenant's claim that an invoice was paid, waiting for the landlord's review."""

    id: int | None = None
    uuid: str = ""
    invoice_id: int
    invoice_number: str
    tenant_name: str | None = None
    room_number: str = ""
    amount: int = 0  # centavos
    reference: str = ""  # bank or e-wallet transfer reference
    note: str = ""
    filename: str = ""
    storage_key: str = ""
    content_type: str = ""
    status: ProofStatus = ProofStatus.PENDING_REVIEW
    review_note: str = ""
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None


class PaymentRecord(BaseModel):
    id: int | None = None
    uuid: str = ""
    invoice_id: int | None = None  # None once the invoice is deleted
    invoice_number: str
    receipt_number: str
    tenant_name: str | None = None
    room_number: str = ""
    year: int
    billing_month: int  # 0-based
    amount: int  # centavos
    method: str = "Payment Proof"
    due_date: date
    paid_at: datetime
    created_at: datetime | None = None


ALLOWED_PROOF_TYPES = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/png": ".png",
}
MAX_PROOF_SIZE = 10 * 1024 * 1024  # 10 MB

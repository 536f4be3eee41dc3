from __future__ import annotations

import logging
from datetime import datetime

from ulid import ULID

from rentroll.constants import PH_TZ
from rentroll.exceptions import ConflictError, ValidationError
from rentroll.models.invoice import Invoice, InvoiceStatus
from rentroll.models.payment import (
    ALLOWED_PROOF_TYPES,
    MAX_PROOF_SIZE,
    PaymentProof,
    PaymentRecord,
    ProofStatus,
)
from rentroll.repositories.base import InvoiceRepository, PaymentRepository
from rentroll.settings import settings
from rentroll.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def _proof_storage_key(invoice: Invoice, proof_uuid: str, content_type: str) -> str:
    name = f"proofs/{invoice.invoice_number}/{proof_uuid}{ALLOWED_PROOF_TYPES[content_type]}"
    prefix = settings.storage_prefix
    if prefix:
        return f"{prefix}/{name}"
    return name


def receipt_number(invoice_number: str) -> str:
    """RCP-202401-101 for INV-202401-101."""
    if invoice_number.startswith("INV-"):
        return "RCP-" + invoice_number[len("INV-"):]
    return f"RCP-{invoice_number}"


class PaymentService:
    """Tenant payment proofs and the landlord's review of them.

    Submitting a proof moves the invoice to ``proof_submitted``. Approving
    marks it paid and appends a payment history record; rejecting puts it
    back to pending, or overdue once the due date has passed.
    """

    def __init__(
        self,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        storage: StorageBackend | None = None,
    ) -> None:
        self.payment_repo = payment_repo
        self.invoice_repo = invoice_repo
        self.storage = storage

    def submit_proof(
        self,
        invoice: Invoice,
        reference: str = "",
        note: str = "",
        *,
        filename: str = "",
        file_bytes: bytes | None = None,
        content_type: str = "",
    ) -> PaymentProof:
        if invoice.id is None:
            raise ValidationError("Cannot submit a payment proof for an invoice without an id.")
        if invoice.payment_status == InvoiceStatus.PAID:
            raise ConflictError(f"Invoice {invoice.invoice_number} is already paid.")

        reference = reference.strip()
        if not reference and file_bytes is None:
            raise ValidationError("Please enter a payment reference or attach a receipt.")
        if file_bytes is not None:
            if content_type not in ALLOWED_PROOF_TYPES:
                raise ValidationError(f"Unsupported file type: {content_type or 'unknown'}")
            if not file_bytes:
                raise ValidationError("The attached file is empty.")
            if len(file_bytes) > MAX_PROOF_SIZE:
                raise ValidationError("The attached file is larger than 10 MB.")
            if self.storage is None:
                raise RuntimeError("Storage backend not configured")

        pending = [
            p for p in self.payment_repo.list_proofs_for_invoice(invoice.id)
            if p.status == ProofStatus.PENDING_REVIEW
        ]
        if pending:
            logger.warning("Invoice %s already has a proof awaiting review", invoice.invoice_number)
            raise ConflictError(f"A payment proof for {invoice.invoice_number} is already awaiting review.")

        proof_uuid = str(ULID())
        storage_key = ""
        if file_bytes is not None and self.storage is not None:
            storage_key = _proof_storage_key(invoice, proof_uuid, content_type)
            self.storage.save(storage_key, file_bytes)

        proof = self.payment_repo.create_proof(
            PaymentProof(
                uuid=proof_uuid,
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                tenant_name=invoice.tenant_name,
                room_number=invoice.room_number,
                amount=invoice.total_amount,
                reference=reference,
                note=note.strip(),
                filename=filename if file_bytes is not None else "",
                storage_key=storage_key,
                content_type=content_type if file_bytes is not None else "",
            )
        )
        self.invoice_repo.update_payment(invoice.id, InvoiceStatus.PROOF_SUBMITTED, None)
        invoice.status = InvoiceStatus.PROOF_SUBMITTED
        logger.info("Payment proof %s submitted for invoice %s", proof.uuid, invoice.invoice_number)
        return proof

    def list_proofs(self, status: ProofStatus | None = None) -> list[PaymentProof]:
        return self.payment_repo.list_proofs(status)

    def pending_proofs(self) -> list[PaymentProof]:
        result = self.payment_repo.list_proofs(ProofStatus.PENDING_REVIEW)
        logger.debug("%d payment proofs awaiting review", len(result))
        return result

    def proofs_for_invoice(self, invoice: Invoice) -> list[PaymentProof]:
        if invoice.id is None:
            return []
        return self.payment_repo.list_proofs_for_invoice(invoice.id)

    def get_attachment(self, proof: PaymentProof) -> bytes | None:
        if not proof.storage_key or self.storage is None:
            return None
        return self.storage.get(proof.storage_key)

    def review_proof(self, proof_id: int, approve: bool, note: str = "") -> PaymentProof:
        proof = self.payment_repo.get_proof(proof_id)
        if proof is None or proof.id is None:
            raise ValidationError("Payment proof not found.")
        if proof.status != ProofStatus.PENDING_REVIEW:
            logger.warning("Proof %s was already %s", proof.uuid, proof.status.value)
            raise ConflictError(f"This payment proof was already {proof.status.value}.")

        invoice = self.invoice_repo.get_by_id(proof.invoice_id)
        if invoice is None or invoice.id is None:
            raise ValidationError(f"Invoice {proof.invoice_number} no longer exists.")

        now = datetime.now(PH_TZ)
        status = ProofStatus.APPROVED if approve else ProofStatus.REJECTED
        self.payment_repo.update_review(proof.id, status, note.strip(), now)

        already_paid = invoice.payment_status == InvoiceStatus.PAID
        if approve:
            if not already_paid:
                self.invoice_repo.update_payment(invoice.id, InvoiceStatus.PAID, now)
            self._record_payment(invoice, proof, invoice.paid_at or now)
        elif not already_paid:
            overdue = invoice.due_date < now.date()
            self.invoice_repo.update_payment(
                invoice.id, InvoiceStatus.OVERDUE if overdue else InvoiceStatus.PENDING, None
            )

        logger.info("Payment proof %s for invoice %s %s", proof.uuid, invoice.invoice_number, status.value)
        return proof.model_copy(update={"status": status, "review_note": note.strip(), "reviewed_at": now})

    def _record_payment(self, invoice: Invoice, proof: PaymentProof, paid_at: datetime) -> None:
        # The invoice is already paid at this point; a lost history row must not undo that.
        try:
            self.payment_repo.create_record(
                PaymentRecord(
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    receipt_number=receipt_number(invoice.invoice_number),
                    tenant_name=proof.tenant_name or invoice.tenant_name,
                    room_number=invoice.room_number,
                    year=invoice.year,
                    billing_month=invoice.billing_month,
                    amount=proof.amount or invoice.total_amount,
                    due_date=invoice.due_date,
                    paid_at=paid_at,
                )
            )
        except Exception:
            logger.exception("Could not add invoice %s to the payment history", invoice.invoice_number)

    def payment_history(self, tenant_name: str | None = None) -> list[PaymentRecord]:
        return self.payment_repo.list_history(tenant_name or None)

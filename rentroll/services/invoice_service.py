from __future__ import annotations

import logging
from datetime import date, datetime

from pydantic import BaseModel

from rentroll.constants import PH_TZ
from rentroll.exceptions import ValidationError
from rentroll.models.invoice import Invoice, InvoiceStatus
from rentroll.pdf.invoice import InvoicePDF
from rentroll.repositories.base import InvoiceRepository
from rentroll.settings import settings
from rentroll.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class BillingStatistics(BaseModel):
    total: int = 0
    pending: int = 0
    paid: int = 0
    overdue: int = 0
    total_revenue: int = 0  # centavos collected
    pending_revenue: int = 0
    overdue_revenue: int = 0
    awaiting_review: int = 0  # pending invoices with a payment proof submitted


def _storage_key(invoice: Invoice) -> str:
    name = f"{invoice.year}-{invoice.billing_month + 1:02d}/{invoice.invoice_number}.pdf"
    prefix = settings.storage_prefix
    if prefix:
        return f"{prefix}/{name}"
    return name


class InvoiceService:
    def __init__(self, invoice_repo: InvoiceRepository, storage: StorageBackend) -> None:
        self.invoice_repo = invoice_repo
        self.storage = storage
        self.pdf_generator = InvoicePDF()

    def list_invoices(self, property_id: int | None = None) -> list[Invoice]:
        result = self.invoice_repo.list_all(property_id)
        logger.debug("Listed %d invoices for property=%s", len(result), property_id)
        return result

    def list_run(self, run_key: str) -> list[Invoice]:
        return self.invoice_repo.list_by_run(run_key)

    def get_invoice_by_uuid(self, uuid: str) -> Invoice | None:
        result = self.invoice_repo.get_by_uuid(uuid)
        logger.debug("get_invoice_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def toggle_paid(self, invoice: Invoice) -> Invoice:
        if invoice.id is None:
            raise ValidationError("Cannot toggle paid for invoice without an id")
        if invoice.paid_at is None:
            paid_at: datetime | None = datetime.now(PH_TZ)
            status = InvoiceStatus.PAID
        else:
            paid_at = None
            overdue = invoice.due_date < datetime.now(PH_TZ).date()
            status = InvoiceStatus.OVERDUE if overdue else InvoiceStatus.PENDING
        self.invoice_repo.update_payment(invoice.id, status, paid_at)
        invoice.paid_at = paid_at
        invoice.status = status
        logger.info("Invoice %s marked as %s", invoice.invoice_number, status.value)
        return invoice

    def mark_overdue(self, today: date | None = None) -> int:
        today = today or datetime.now(PH_TZ).date()
        count = self.invoice_repo.mark_overdue(today)
        logger.info("Marked %d invoices overdue as of %s", count, today.isoformat())
        return count

    def statistics(self, property_id: int | None = None) -> BillingStatistics:
        stats = BillingStatistics()
        for invoice in self.list_invoices(property_id):
            stats.total += 1
            status = invoice.payment_status
            if status == InvoiceStatus.PAID:
                stats.paid += 1
                stats.total_revenue += invoice.total_amount
            elif status == InvoiceStatus.OVERDUE:
                stats.overdue += 1
                stats.overdue_revenue += invoice.total_amount
            else:
                stats.pending += 1
                stats.pending_revenue += invoice.total_amount
                if status == InvoiceStatus.PROOF_SUBMITTED:
                    stats.awaiting_review += 1
        return stats

    def export_pdf(self, invoice: Invoice, property_name: str = "") -> str:
        pdf_bytes = self.pdf_generator.generate(invoice, property_name)
        key = _storage_key(invoice)
        path = self.storage.save(key, pdf_bytes)
        logger.info("PDF stored at %s for invoice %s", key, invoice.invoice_number)
        return path

    def delete_invoice(self, invoice: Invoice) -> None:
        """Delete the invoice with its line items and payment proofs; payment history keeps its copy."""
        if invoice.id is None:
            raise ValidationError("Cannot delete invoice without an id")
        self.invoice_repo.delete(invoice.id)
        logger.info("Invoice %s deleted (run %s)", invoice.invoice_number, invoice.run_key)

from __future__ import annotations

import logging
import time

from pydantic import BaseModel

from rentroll.exceptions import ConflictError, TransientIOError, ValidationError
from rentroll.models.invoice import Invoice, InvoicePreview
from rentroll.models.session import BillingSession, SessionState
from rentroll.notifications.base import NotificationSender, build_invoice_notification
from rentroll.repositories.base import InvoiceRepository
from rentroll.services.invoice_builder import preview_total
from rentroll.services.wizard import preview
from rentroll.settings import settings

logger = logging.getLogger(__name__)


class ConfirmationResult(BaseModel):
    run_key: str
    invoice_count: int
    notified_tenant_count: int
    total_amount: int  # centavos
    failed_notifications: list[str] = []
    invoices: list[Invoice] = []


def _to_invoice(item: InvoicePreview, session: BillingSession) -> Invoice:
    period = session.billing_period
    if period is None:
        raise ValidationError("Please select a billing period to continue.")
    return Invoice(
        run_key=session.run_key,
        invoice_number=item.invoice_number,
        property_id=session.property_id,
        room_id=item.room.id,
        room_number=item.room.number,
        tenant_name=item.room.tenant_name,
        year=period.year,
        billing_month=period.billing_month,
        line_items=item.line_items,
        total_amount=item.total,
        notes=item.notes,
        due_date=item.due_date,
    )


class ConfirmationService:
    """Persists a billing run's invoices and notifies the tenants.

    Invoices are written in one transaction keyed by the session's run key,
    so a repeated confirm is rejected instead of duplicating them.
    Notifications go out after the commit and are best-effort: a failed send
    is reported in the result but never undoes the invoices.
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        sender: NotificationSender,
        *,
        max_attempts: int | None = None,
        retry_backoff: float | None = None,
    ) -> None:
        self.invoice_repo = invoice_repo
        self.sender = sender
        self.max_attempts = max(1, max_attempts if max_attempts is not None else settings.confirm_max_attempts)
        self.retry_backoff = retry_backoff if retry_backoff is not None else settings.confirm_retry_backoff
        self._in_flight: set[str] = set()

    def confirm(self, session: BillingSession) -> ConfirmationResult:
        if session.run_key in self._in_flight or session.state == SessionState.PROCESSING:
            logger.warning("Confirm rejected: run %s is already processing", session.run_key)
            raise ConflictError("This billing run is already being processed.")
        if session.state == SessionState.COMPLETED:
            logger.warning("Confirm rejected: run %s already completed", session.run_key)
            raise ConflictError("This billing run was already confirmed.")

        previews = preview(session)
        total = preview_total(previews)
        if total != session.total_amount:
            logger.warning(
                "Run %s: session total %d differs from invoice total %d, using invoice total",
                session.run_key,
                session.total_amount,
                total,
            )

        self._in_flight.add(session.run_key)
        session.state = SessionState.PROCESSING
        try:
            if self.invoice_repo.has_run(session.run_key):
                raise ConflictError("This billing run was already confirmed.")
            saved = self._persist([_to_invoice(item, session) for item in previews])
        except ConflictError:
            session.state = SessionState.COMPLETED
            logger.warning("Run %s was already persisted", session.run_key)
            raise
        except Exception:
            session.state = SessionState.DRAFT
            logger.exception("Run %s failed, invoices not saved", session.run_key)
            raise
        finally:
            self._in_flight.discard(session.run_key)

        logger.info(
            "Run %s: %d invoices saved for %s, total=%d",
            session.run_key,
            len(saved),
            session.property_name,
            total,
        )

        notified, failed = self._notify(saved)
        session.state = SessionState.COMPLETED
        return ConfirmationResult(
            run_key=session.run_key,
            invoice_count=len(saved),
            notified_tenant_count=notified,
            total_amount=total,
            failed_notifications=failed,
            invoices=saved,
        )

    def _persist(self, invoices: list[Invoice]) -> list[Invoice]:
        attempt = 1
        while True:
            try:
                return self.invoice_repo.create_batch(invoices)
            except TransientIOError:
                if attempt >= self.max_attempts:
                    raise
                delay = self.retry_backoff * attempt
                logger.warning(
                    "Saving invoices failed (attempt %d/%d), retrying in %.1fs",
                    attempt,
                    self.max_attempts,
                    delay,
                )
                time.sleep(delay)
                attempt += 1

    def _notify(self, invoices: list[Invoice]) -> tuple[int, list[str]]:
        notified = 0
        failed: list[str] = []
        for invoice in invoices:
            if not invoice.tenant_name:
                logger.info("Invoice %s has no tenant, skipping notification", invoice.invoice_number)
                continue
            try:
                self.sender.send(build_invoice_notification(invoice))
                notified += 1
            except Exception:
                logger.exception("Failed to notify tenant for invoice %s", invoice.invoice_number)
                failed.append(invoice.invoice_number)
        return notified, failed

from __future__ import annotations

from abc import ABC, abstractmethod

from rentroll.constants import format_period
from rentroll.models import format_php
from rentroll.models.invoice import Invoice
from rentroll.models.notification import Notification


class NotificationSender(ABC):
    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Deliver one notification. Raises on failure."""
        ...


def build_invoice_notification(invoice: Invoice) -> Notification:
    """Tell the tenant of ``invoice`` that a new bill is waiting."""
    period = format_period(invoice.year, invoice.billing_month)
    return Notification(
        run_key=invoice.run_key,
        recipient=invoice.tenant_name or "",
        room_number=invoice.room_number,
        invoice_number=invoice.invoice_number,
        title=f"New bill: {invoice.invoice_number}",
        message=(
            f"Your bill for Room {invoice.room_number} ({period}) is "
            f"{format_php(invoice.total_amount)}, due {invoice.due_date.strftime('%B %d, %Y')}."
        ),
    )

from datetime import date, datetime

from freezegun import freeze_time

from rentroll.constants import PH_TZ
from rentroll.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus


def _invoice(**overrides) -> Invoice:
    defaults = dict(
        run_key="run",
        invoice_number="INV-202401-101",
        room_id="r101",
        room_number="101",
        year=2024,
        billing_month=0,
        due_date=date(2024, 1, 31),
    )
    defaults.update(overrides)
    return Invoice(**defaults)


class TestInvoiceLineItem:
    def test_construction(self):
        item = InvoiceLineItem(description="Water", amount=15000)
        assert item.id is None
        assert item.invoice_id is None
        assert item.sort_order == 0


class TestInvoice:
    def test_defaults(self):
        invoice = _invoice()
        assert invoice.id is None
        assert invoice.uuid == ""
        assert invoice.total_amount == 0
        assert invoice.line_items == []
        assert invoice.notes == ""
        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.paid_at is None
        assert invoice.tenant_name is None

    def test_due_date_from_iso_string(self):
        invoice = _invoice(due_date="2024-02-29")
        assert invoice.due_date == date(2024, 2, 29)


class TestIsOverdue:
    # 2024-02-01 04:00 UTC is noon in Manila
    @freeze_time("2024-02-01 04:00:00")
    def test_overdue_when_past_due(self):
        assert _invoice().is_overdue is True

    @freeze_time("2024-01-31 04:00:00")
    def test_not_overdue_on_due_date(self):
        assert _invoice().is_overdue is False

    @freeze_time("2024-01-31 17:00:00")
    def test_uses_manila_date(self):
        # 17:00 UTC on the 31st is already February 1st in Manila
        assert _invoice().is_overdue is True

    @freeze_time("2024-03-01 04:00:00")
    def test_not_overdue_when_paid(self):
        invoice = _invoice(paid_at=datetime(2024, 1, 20, tzinfo=PH_TZ), status=InvoiceStatus.PAID)
        assert invoice.is_overdue is False


class TestPaymentStatus:
    @freeze_time("2024-01-15 04:00:00")
    def test_pending(self):
        assert _invoice().payment_status == InvoiceStatus.PENDING

    @freeze_time("2024-02-15 04:00:00")
    def test_pending_past_due_reads_as_overdue(self):
        assert _invoice().payment_status == InvoiceStatus.OVERDUE

    @freeze_time("2024-01-15 04:00:00")
    def test_stored_overdue(self):
        assert _invoice(status=InvoiceStatus.OVERDUE).payment_status == InvoiceStatus.OVERDUE

    def test_paid_at_wins(self):
        invoice = _invoice(paid_at=datetime(2024, 1, 20, tzinfo=PH_TZ))
        assert invoice.payment_status == InvoiceStatus.PAID

    @freeze_time("2024-02-15 04:00:00")
    def test_proof_submitted_past_due_awaits_review(self):
        assert _invoice(status=InvoiceStatus.PROOF_SUBMITTED).payment_status == InvoiceStatus.PROOF_SUBMITTED

    def test_paid_wins_over_proof_submitted(self):
        invoice = _invoice(status=InvoiceStatus.PROOF_SUBMITTED, paid_at=datetime(2024, 1, 20, tzinfo=PH_TZ))
        assert invoice.payment_status == InvoiceStatus.PAID

from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from rentroll.cli.payment_menu import submit_proof_menu
from rentroll.constants import format_period
from rentroll.exceptions import RentrollError
from rentroll.models import format_php
from rentroll.models.invoice import Invoice, InvoiceStatus
from rentroll.services.invoice_service import InvoiceService
from rentroll.services.payment_service import PaymentService
from rentroll.services.room_service import RoomService

console = Console()

STATUS_STYLES = {
    InvoiceStatus.PENDING: "[yellow]Pending[/yellow]",
    InvoiceStatus.PROOF_SUBMITTED: "[cyan]Proof Submitted[/cyan]",
    InvoiceStatus.PAID: "[green]Paid[/green]",
    InvoiceStatus.OVERDUE: "[red]Overdue[/red]",
}


def _show_invoice_detail(invoice: Invoice) -> None:
    table = Table(title=f"{invoice.invoice_number} - Room {invoice.room_number}")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    for item in invoice.line_items:
        table.add_row(item.description, format_php(item.amount))

    console.print(table)
    console.print(f"  [bold]Total: {format_php(invoice.total_amount)}[/bold]")
    console.print(f"  Tenant: {invoice.tenant_name or '-'}")
    console.print(f"  Period: {format_period(invoice.year, invoice.billing_month)}")
    console.print(f"  Due: {invoice.due_date.strftime('%B %d, %Y')}")
    console.print(f"  Status: {STATUS_STYLES[invoice.payment_status]}")
    if invoice.notes:
        console.print(f"  Notes: {invoice.notes}")


def _invoice_detail_menu(
    invoice: Invoice,
    invoice_service: InvoiceService,
    payment_service: PaymentService,
    property_name: str,
) -> None:
    while True:
        console.print()
        _show_invoice_detail(invoice)

        toggle_label = "Mark as Unpaid" if invoice.paid_at else "Mark as Paid"
        choices = [toggle_label]
        if invoice.payment_status != InvoiceStatus.PAID:
            choices.append("Submit Payment Proof")
        choices += ["Export PDF", "Delete Invoice", "Back"]
        choice = questionary.select("Actions:", choices=choices).ask()

        if choice is None or choice == "Back":
            break
        elif choice == toggle_label:
            invoice = invoice_service.toggle_paid(invoice)
            console.print(f"[green]Invoice {invoice.invoice_number} is now {invoice.status.value}.[/green]")
        elif choice == "Submit Payment Proof":
            submit_proof_menu(invoice, payment_service)
        elif choice == "Export PDF":
            path = invoice_service.export_pdf(invoice, property_name)
            console.print(f"  PDF: {path}")
        elif choice == "Delete Invoice":
            confirm = questionary.confirm(
                f"Delete {invoice.invoice_number}? Its payment proofs are deleted too.", default=False
            ).ask()
            if not confirm:
                continue
            try:
                invoice_service.delete_invoice(invoice)
            except RentrollError as exc:
                console.print(f"[red]{exc}[/red]")
                continue
            console.print(f"[green]Invoice {invoice.invoice_number} deleted.[/green]")
            break


def list_invoices_menu(
    room_service: RoomService,
    invoice_service: InvoiceService,
    payment_service: PaymentService,
) -> None:
    properties = {p.id: p for p in room_service.list_properties()}
    invoices = invoice_service.list_invoices()

    if not invoices:
        console.print("[yellow]No invoices generated yet.[/yellow]")
        return

    table = Table(title="Invoices")
    table.add_column("Invoice", style="bold")
    table.add_column("Property")
    table.add_column("Room")
    table.add_column("Tenant")
    table.add_column("Period")
    table.add_column("Total", justify="right")
    table.add_column("Status", justify="center")

    for inv in invoices:
        prop = properties.get(inv.property_id)
        table.add_row(
            inv.invoice_number,
            prop.name if prop else "-",
            inv.room_number,
            inv.tenant_name or "-",
            format_period(inv.year, inv.billing_month),
            format_php(inv.total_amount),
            STATUS_STYLES[inv.payment_status],
        )

    console.print()
    console.print(table)
    console.print()

    invoice_choices = {f"{inv.invoice_number} ({inv.uuid})": inv for inv in invoices}
    choice = questionary.select("Select an invoice:", choices=list(invoice_choices) + ["Back"]).ask()
    if choice is None or choice == "Back":
        return

    invoice = invoice_choices[choice]
    prop = properties.get(invoice.property_id)
    _invoice_detail_menu(invoice, invoice_service, payment_service, prop.name if prop else "")


def billing_statistics_menu(invoice_service: InvoiceService) -> None:
    marked = invoice_service.mark_overdue()
    if marked:
        console.print(f"[yellow]{marked} invoice(s) are now overdue.[/yellow]")

    stats = invoice_service.statistics()
    table = Table(title="Billing Statistics")
    table.add_column("Status")
    table.add_column("Invoices", justify="right")
    table.add_column("Amount", justify="right")
    table.add_row("Paid", str(stats.paid), format_php(stats.total_revenue))
    table.add_row("Pending", str(stats.pending), format_php(stats.pending_revenue))
    table.add_row("  Awaiting review", str(stats.awaiting_review), "")
    table.add_row("Overdue", str(stats.overdue), format_php(stats.overdue_revenue))
    table.add_row("[bold]Total[/bold]", f"[bold]{stats.total}[/bold]", "")

    console.print()
    console.print(table)

from __future__ import annotations

import mimetypes
from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from rentroll.constants import format_period
from rentroll.exceptions import RentrollError
from rentroll.models import format_php
from rentroll.models.invoice import Invoice
from rentroll.models.payment import PaymentProof
from rentroll.services.payment_service import PaymentService

console = Console()


def _format_dt(value) -> str:
    return value.strftime("%b %d, %Y %H:%M") if value else "-"


def submit_proof_menu(invoice: Invoice, payment_service: PaymentService) -> PaymentProof | None:
    reference = questionary.text("Payment reference (bank / GCash transaction no.):").ask()
    if reference is None:
        return None
    attachment = questionary.path("Receipt file (leave blank for none):", default="").ask()
    if attachment is None:
        return None
    note = questionary.text("Note (optional):").ask()
    if note is None:
        return None

    file_kwargs: dict = {}
    if attachment.strip():
        path = Path(attachment.strip()).expanduser()
        if not path.is_file():
            console.print(f"[red]File not found: {path}[/red]")
            return None
        content_type, _ = mimetypes.guess_type(path.name)
        file_kwargs = {"filename": path.name, "file_bytes": path.read_bytes(), "content_type": content_type or ""}

    try:
        proof = payment_service.submit_proof(invoice, reference, note, **file_kwargs)
    except RentrollError as exc:
        console.print(f"[red]{exc}[/red]")
        return None

    console.print(f"[green]Payment proof submitted for {invoice.invoice_number}; awaiting review.[/green]")
    return proof


def _show_proof(proof: PaymentProof) -> None:
    console.print()
    console.print(f"[bold]{proof.invoice_number}[/bold] - Room {proof.room_number} ({proof.tenant_name or '-'})")
    console.print(f"  Amount: {format_php(proof.amount)}")
    console.print(f"  Reference: {proof.reference or '-'}")
    if proof.filename:
        console.print(f"  Attachment: {proof.filename} ({proof.content_type})")
    if proof.note:
        console.print(f"  Note: {proof.note}")
    console.print(f"  Submitted: {_format_dt(proof.submitted_at)}")


def _review(proof: PaymentProof, payment_service: PaymentService) -> None:
    _show_proof(proof)
    action = questionary.select("Review:", choices=["Approve", "Reject", "Back"]).ask()
    if action is None or action == "Back" or proof.id is None:
        return

    note = questionary.text("Note to tenant (optional):").ask()
    if note is None:
        return
    try:
        reviewed = payment_service.review_proof(proof.id, approve=action == "Approve", note=note)
    except RentrollError as exc:
        console.print(f"[red]{exc}[/red]")
        return

    if action == "Approve":
        console.print(f"[green]{reviewed.invoice_number} marked as paid.[/green]")
    else:
        console.print(f"[yellow]Proof for {reviewed.invoice_number} rejected.[/yellow]")


def payment_proofs_menu(payment_service: PaymentService) -> None:
    while True:
        proofs = payment_service.pending_proofs()
        if not proofs:
            console.print("[green]No payment proofs awaiting review.[/green]")
            return

        table = Table(title="Payment Proofs Awaiting Review")
        table.add_column("Invoice", style="bold")
        table.add_column("Room")
        table.add_column("Tenant")
        table.add_column("Amount", justify="right")
        table.add_column("Reference")
        table.add_column("Submitted")
        for proof in proofs:
            table.add_row(
                proof.invoice_number,
                proof.room_number,
                proof.tenant_name or "-",
                format_php(proof.amount),
                proof.reference or ("[dim]file[/dim]" if proof.filename else "-"),
                _format_dt(proof.submitted_at),
            )
        console.print()
        console.print(table)

        choices = {f"{p.invoice_number} ({p.uuid})": p for p in proofs}
        choice = questionary.select("Select a proof to review:", choices=list(choices) + ["Back"]).ask()
        if choice is None or choice == "Back":
            return
        _review(choices[choice], payment_service)


def payment_history_menu(payment_service: PaymentService) -> None:
    tenant = questionary.text("Tenant name (leave blank for all):").ask()
    if tenant is None:
        return

    records = payment_service.payment_history(tenant.strip() or None)
    if not records:
        console.print("[yellow]No payments recorded.[/yellow]")
        return

    table = Table(title=f"Payment History - {tenant.strip()}" if tenant.strip() else "Payment History")
    table.add_column("Receipt", style="bold")
    table.add_column("Invoice")
    table.add_column("Tenant")
    table.add_column("Room")
    table.add_column("Period")
    table.add_column("Amount", justify="right", style="green")
    table.add_column("Paid")
    for record in records:
        table.add_row(
            record.receipt_number,
            record.invoice_number,
            record.tenant_name or "-",
            record.room_number,
            format_period(record.year, record.billing_month),
            format_php(record.amount),
            _format_dt(record.paid_at),
        )
    console.print()
    console.print(table)
    console.print(f"  [bold]Total paid: {format_php(sum(r.amount for r in records))}[/bold]")

"""Seed the database with demo data for local development.

Usage:
    python -m rentroll.scripts.seed
"""

from __future__ import annotations

import random
from datetime import datetime

from faker import Faker
from rich.console import Console
from rich.table import Table
from sqlalchemy import text

from rentroll.constants import PH_TZ
from rentroll.db import get_connection, initialize_db
from rentroll.models import format_amount_input, format_php
from rentroll.models.invoice import InvoiceStatus
from rentroll.models.property import Property
from rentroll.models.room import RoomStatus
from rentroll.notifications.factory import get_notification_sender
from rentroll.repositories.factory import (
    get_invoice_repository,
    get_payment_repository,
    get_property_repository,
    get_room_repository,
)
from rentroll.services.confirmation_service import ConfirmationService
from rentroll.services.invoice_service import InvoiceService
from rentroll.services.ledger import ChargeLedger
from rentroll.services.payment_service import PaymentService
from rentroll.services.period import billing_period_for
from rentroll.services.room_service import RoomService
from rentroll.services.wizard import begin_charges, choose_period, select_rooms, start_session, submit_charges
from rentroll.storage.factory import get_storage

console = Console()
fake = Faker("en_PH")

NUM_PAST_MONTHS = 3

TABLES_TO_CLEAR = [
    "payment_history",
    "payment_proofs",
    "notifications",
    "invoice_line_items",
    "invoices",
    "rooms",
    "properties",
]

# (number, type, rent in pesos, status, tenant)
# tenant None on an occupied room means a generated name
SUNSET_ROOMS = [
    ("101", "Studio", 2800, RoomStatus.OCCUPIED, "Anna Garcia"),
    ("102", "1BR", 3200, RoomStatus.OCCUPIED, "Carlos Mendoza"),
    ("103", "Studio", 2800, RoomStatus.VACANT, None),
    ("201", "2BR", 4500, RoomStatus.OCCUPIED, "Elena Rodriguez"),
    ("202", "1BR", 3200, RoomStatus.OCCUPIED, "Maria Fernandez"),
    ("203", "Studio", 2800, RoomStatus.MAINTENANCE, None),
]

PROPERTY_TEMPLATES = [
    ("Sunset Apartments", "123 Main St, Cebu City", SUNSET_ROOMS),
    (
        "Garden Villas",
        "456 Oak Ave, Mandaue",
        [
            ("A1", "2BR", 5500, RoomStatus.OCCUPIED, None),
            ("A2", "2BR", 5500, RoomStatus.OCCUPIED, None),
            ("B1", "3BR", 7000, RoomStatus.OCCUPIED, None),
            ("B2", "3BR", 7000, RoomStatus.OCCUPIED, None),
        ],
    ),
    (
        "City Center Rooms",
        "789 Pine St, Cebu City",
        [
            ("1", "Bedspace", 1800, RoomStatus.OCCUPIED, None),
            ("2", "Bedspace", 1800, RoomStatus.VACANT, None),
            ("3", "Single", 2500, RoomStatus.OCCUPIED, None),
            ("4", "Single", 2500, RoomStatus.OCCUPIED, None),
            ("5", "Single", 2500, RoomStatus.VACANT, None),
        ],
    ),
]

INVOICE_NOTES = [
    "",
    "",
    "",
    "Water reading taken on the 28th.",
    "Includes share of common area electricity.",
    "",
    "Aircon cleaning added under Other.",
]


def _clear_all(conn) -> None:
    console.print("\n[yellow]Clearing all tables...[/yellow]")
    for table in TABLES_TO_CLEAR:
        conn.execute(text(f"DELETE FROM {table}"))  # noqa: S608
        console.print(f"  Cleared [dim]{table}[/dim]")
    conn.commit()
    console.print("[green]All tables cleared.[/green]\n")


def _create_properties(room_service: RoomService) -> list[Property]:
    console.print("[cyan]Creating properties and rooms...[/cyan]")

    properties = []
    for name, address, room_defs in PROPERTY_TEMPLATES:
        prop = room_service.create_property(name, address)
        assert prop.id is not None
        for number, room_type, rent, status, tenant in room_defs:
            if status == RoomStatus.OCCUPIED and tenant is None:
                tenant = fake.name()
            room_service.add_room(prop.id, number, rent * 100, room_type=room_type, status=status, tenant_name=tenant)
        stats = room_service.room_stats(prop.id)
        console.print(f"  [bold]{prop.name}[/bold]: {stats.total} rooms, {stats.occupied} occupied")
        properties.append(prop)

    console.print(f"[green]{len(properties)} properties created.[/green]\n")
    return properties


def _fill_utilities(ledger: ChargeLedger) -> None:
    for room_id in ledger.room_ids:
        ledger.update_field(room_id, "electricity", format_amount_input(random.randint(300, 1200) * 100))
        ledger.update_field(room_id, "water", format_amount_input(random.randint(150, 400) * 100))
        if random.random() > 0.5:
            ledger.update_field(room_id, "wifi", "500")
        if random.random() > 0.8:
            ledger.update_field(room_id, "other", format_amount_input(random.randint(200, 800) * 100))
        ledger.update_field(room_id, "notes", random.choice(INVOICE_NOTES))


def _generate_runs(
    room_service: RoomService,
    invoice_service: InvoiceService,
    confirmation_service: ConfirmationService,
    properties: list[Property],
) -> int:
    console.print("[cyan]Generating past billing runs...[/cyan]")

    today = datetime.now(PH_TZ).date()
    total_invoices = 0

    table = Table(title="Billing runs")
    table.add_column("Property", style="bold")
    table.add_column("Period")
    table.add_column("Invoices", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Paid", justify="right")

    for prop in properties:
        assert prop.id is not None
        rooms = room_service.list_rooms(prop.id)
        for months_ago in range(NUM_PAST_MONTHS, 0, -1):
            month_index = today.year * 12 + today.month - 1 - months_ago
            period = billing_period_for(month_index // 12, month_index % 12, today=today)

            session = start_session(prop)
            session = select_rooms(session, rooms, [room.id for room in rooms if room.is_billable])
            session = choose_period(session, period)
            ledger = begin_charges(session)
            _fill_utilities(ledger)
            session = submit_charges(session, ledger)

            result = confirmation_service.confirm(session)

            # Older runs are mostly settled
            paid = 0
            for invoice in result.invoices:
                if months_ago > 1 and random.random() > 0.2:
                    invoice_service.toggle_paid(invoice)
                    paid += 1

            table.add_row(
                prop.name,
                period.display_name,
                str(result.invoice_count),
                format_php(result.total_amount),
                str(paid),
            )
            total_invoices += result.invoice_count

    marked = invoice_service.mark_overdue(today)
    console.print(table)
    console.print(f"\n[green]{total_invoices} invoices generated, {marked} overdue.[/green]\n")
    return total_invoices


def _submit_proofs(invoice_service: InvoiceService, payment_service: PaymentService) -> int:
    """Tenants send proofs for some unpaid invoices; about half get approved."""
    console.print("[cyan]Submitting payment proofs...[/cyan]")

    submitted = approved = 0
    for invoice in invoice_service.list_invoices():
        if invoice.payment_status == InvoiceStatus.PAID or random.random() > 0.4:
            continue
        reference = f"GCASH-{fake.numerify('##########')}"
        proof = payment_service.submit_proof(invoice, reference, random.choice(["", "Paid via GCash."]))
        submitted += 1
        if proof.id is not None and random.random() > 0.5:
            payment_service.review_proof(proof.id, approve=True, note="Received, thank you.")
            approved += 1

    console.print(f"[green]{submitted} proofs submitted, {approved} approved.[/green]\n")
    return submitted


def main() -> None:
    console.print("[bold magenta]Rent Roll - Database Seeder[/bold magenta]")
    console.print("=" * 40)

    initialize_db()
    conn = get_connection()

    _clear_all(conn)

    invoice_repo = get_invoice_repository()
    room_service = RoomService(get_property_repository(), get_room_repository())
    storage = get_storage()
    invoice_service = InvoiceService(invoice_repo, storage)
    confirmation_service = ConfirmationService(invoice_repo, get_notification_sender())
    payment_service = PaymentService(get_payment_repository(), invoice_repo, storage)

    properties = _create_properties(room_service)
    total_invoices = _generate_runs(room_service, invoice_service, confirmation_service, properties)
    total_proofs = _submit_proofs(invoice_service, payment_service)

    console.print("[bold green]Seeding complete![/bold green]")
    console.print(f"  Properties: {len(properties)}")
    console.print(f"  Invoices:   {total_invoices}")
    console.print(f"  Proofs:     {total_proofs}")


if __name__ == "__main__":  # pragma: no cover
    main()

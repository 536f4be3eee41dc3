from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from rentroll.constants import CHARGE_LABELS, ROOM_STATUS_LABELS
from rentroll.exceptions import RentrollError, ValidationError
from rentroll.models import format_php
from rentroll.models.charge import ChargeField
from rentroll.models.invoice import InvoicePreview
from rentroll.models.property import Property
from rentroll.models.room import Room
from rentroll.models.session import BillingSession
from rentroll.services.confirmation_service import ConfirmationService
from rentroll.services.invoice_builder import preview_total
from rentroll.services.ledger import NOTES_FIELD, ChargeLedger
from rentroll.services.period import list_billing_periods, select_period
from rentroll.services.room_service import RoomService
from rentroll.services.wizard import (
    begin_charges,
    choose_period,
    preview,
    select_rooms,
    start_session,
    submit_charges,
)

console = Console()

CANCEL = "Cancel"

FIELD_CHOICES = {label: field.value for field, label in CHARGE_LABELS.items()}
FIELD_CHOICES["Notes"] = NOTES_FIELD


def _select_property(room_service: RoomService) -> Property | None:
    properties = room_service.list_properties()
    if not properties:
        console.print("[yellow]No properties yet. Add one under 'Properties & Rooms'.[/yellow]")
        return None

    property_choices = {f"{p.id} - {p.name}": p for p in properties}
    choice = questionary.select("Select a property:", choices=list(property_choices) + [CANCEL]).ask()
    if choice is None or choice == CANCEL:
        return None
    return property_choices[choice]


def _select_rooms(session: BillingSession, rooms: list[Room]) -> BillingSession | None:
    if not rooms:
        console.print("[yellow]No rooms available in this property.[/yellow]")
        return None

    billable = sum(1 for room in rooms if room.is_billable)
    if not billable:
        console.print("[yellow]No occupied rooms to bill in this property.[/yellow]")
        return None

    choices = []
    for room in rooms:
        title = f"Room {room.number} - {format_php(room.rent)}/month"
        if room.tenant_name:
            title += f" ({room.tenant_name})"
        disabled = None if room.is_billable else ROOM_STATUS_LABELS[room.status]
        choices.append(questionary.Choice(title, value=room.id, disabled=disabled))

    while True:
        selected = questionary.checkbox(
            f"Select rooms to bill ({billable} occupied):",
            choices=choices,
        ).ask()
        if selected is None:
            return None
        try:
            return select_rooms(session, rooms, selected)
        except ValidationError as exc:
            console.print(f"[red]{exc}[/red]")


def _select_period(session: BillingSession) -> BillingSession | None:
    periods = list_billing_periods()
    labels = {}
    for period in periods:
        label = period.display_name
        if period.is_current_month:
            label += " (current month)"
        labels[label] = period.id

    choice = questionary.select(
        f"Billing period ({len(session.selected_rooms)} rooms selected):",
        choices=list(labels) + [CANCEL],
    ).ask()
    if choice is None or choice == CANCEL:
        return None
    return choose_period(session, select_period(periods, labels[choice]))


def _show_ledger(session: BillingSession, ledger: ChargeLedger) -> None:
    table = Table(title=f"Charges - {session.billing_period.display_name if session.billing_period else ''}")
    table.add_column("Room", style="bold")
    for label in CHARGE_LABELS.values():
        table.add_column(label, justify="right")
    table.add_column("Total", justify="right", style="green")

    for room in session.selected_rooms:
        charge = ledger.get(room.id)
        table.add_row(
            room.number,
            *(format_php(charge.amount(field)) for field in ChargeField),
            format_php(charge.total),
        )

    console.print()
    console.print(table)
    console.print(f"  [bold]Total: {format_php(ledger.total)}[/bold]")


def _edit_room_charge(session: BillingSession, ledger: ChargeLedger) -> None:
    room_choices = {f"Room {room.number}": room for room in session.selected_rooms}
    room_label = questionary.select("Room:", choices=list(room_choices)).ask()
    if room_label is None:
        return
    room = room_choices[room_label]

    field_label = questionary.select("Charge:", choices=list(FIELD_CHOICES)).ask()
    if field_label is None:
        return
    field = FIELD_CHOICES[field_label]

    current = getattr(ledger.get(room.id), field)
    value = questionary.text(f"  {field_label} for room {room.number}:", default=current).ask()
    if value is None:
        return
    total = ledger.update_field(room.id, field, value)
    console.print(f"  Room {room.number}: {format_php(ledger.room_total(room.id))} / total {format_php(total)}")


def _apply_to_all(ledger: ChargeLedger) -> None:
    field_label = questionary.select("Charge:", choices=list(FIELD_CHOICES)).ask()
    if field_label is None:
        return
    value = questionary.text(f"  {field_label} for every room:").ask()
    if value is None:
        return
    confirm = questionary.confirm(f"Apply {value} to {field_label} for all rooms?", default=False).ask()
    if not confirm:
        return
    total = ledger.apply_to_all(FIELD_CHOICES[field_label], value)
    console.print(f"  [green]Applied.[/green] Total: {format_php(total)}")


def _adjust_charges(session: BillingSession) -> BillingSession | None:
    ledger = begin_charges(session)
    while True:
        _show_ledger(session, ledger)
        choice = questionary.select(
            "Charges:",
            choices=["Edit Room Charge", "Apply to All Rooms", "Continue to Preview", CANCEL],
        ).ask()

        if choice is None or choice == CANCEL:
            return None
        elif choice == "Edit Room Charge":
            _edit_room_charge(session, ledger)
        elif choice == "Apply to All Rooms":
            _apply_to_all(ledger)
        elif choice == "Continue to Preview":
            try:
                return submit_charges(session, ledger)
            except ValidationError as exc:
                numbers = [room.number for room in session.selected_rooms if room.id in exc.invalid_rooms]
                console.print(f"[red]{exc}[/red] Rooms: {', '.join(numbers)}")


def _show_previews(previews: list[InvoicePreview]) -> None:
    for item in previews:
        table = Table(title=f"{item.invoice_number} - Room {item.room.number} {item.room.tenant_name or ''}")
        table.add_column("Description")
        table.add_column("Amount", justify="right")
        for line in item.line_items:
            table.add_row(line.description, format_php(line.amount))
        if not item.line_items:
            table.add_row("[dim]No charges[/dim]", format_php(0))
        console.print(table)
        console.print(f"  [bold]Total: {format_php(item.total)}[/bold]  Due: {item.due_date.strftime('%B %d, %Y')}")
        if item.notes:
            console.print(f"  Notes: {item.notes}")


def generate_bills_menu(room_service: RoomService, confirmation_service: ConfirmationService) -> None:
    console.print()
    console.print("[bold]Generate Bills[/bold]", style="cyan")

    prop = _select_property(room_service)
    if prop is None or prop.id is None:
        return

    session = _select_rooms(start_session(prop), room_service.list_rooms(prop.id))
    if session is None:
        console.print("[yellow]Billing cancelled.[/yellow]")
        return

    session = _select_period(session)
    if session is None:
        console.print("[yellow]Billing cancelled.[/yellow]")
        return

    session = _adjust_charges(session)
    if session is None:
        console.print("[yellow]Billing cancelled.[/yellow]")
        return

    previews = preview(session)
    _show_previews(previews)

    confirm = questionary.confirm(
        f"Generate {len(previews)} invoices for {format_php(preview_total(previews))}? This will notify all tenants.",
        default=False,
    ).ask()
    if not confirm:
        console.print("[yellow]Billing cancelled.[/yellow]")
        return

    try:
        result = confirmation_service.confirm(session)
    except RentrollError as exc:
        console.print(f"[red]Failed to process billing: {exc}[/red]")
        return

    console.print()
    console.print("[green bold]Billing complete![/green bold]")
    console.print(f"  Invoices generated: [bold]{result.invoice_count}[/bold]")
    console.print(f"  Tenants notified: [bold]{result.notified_tenant_count}[/bold]")
    console.print(f"  Total amount: [bold]{format_php(result.total_amount)}[/bold]")
    if result.failed_notifications:
        console.print(f"  [yellow]Could not notify: {', '.join(result.failed_notifications)}[/yellow]")

from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from rentroll.constants import ROOM_STATUS_LABELS
from rentroll.models import format_php, parse_amount
from rentroll.models.property import Property
from rentroll.models.room import RoomStatus
from rentroll.services.room_service import RoomService

console = Console()

STATUS_CHOICES = {label: status for status, label in ROOM_STATUS_LABELS.items()}


def _add_property(room_service: RoomService) -> None:
    name = questionary.text("Property name:").ask()
    if not name:
        console.print("[yellow]Cancelled.[/yellow]")
        return
    address = questionary.text("Address (optional):").ask() or ""
    prop = room_service.create_property(name, address)
    console.print(f"[green bold]Property '{prop.name}' created.[/green bold]")


def _ask_tenant() -> str | None:
    tenant = questionary.text("  Tenant name:").ask()
    return tenant or None


def _add_room(prop: Property, room_service: RoomService) -> None:
    number = questionary.text("Room number:").ask()
    if not number:
        console.print("[yellow]Cancelled.[/yellow]")
        return
    room_type = questionary.text("Type (e.g. Studio, 1BR):").ask() or ""

    while True:
        rent = parse_amount(questionary.text("Monthly rent (e.g. 2800):").ask())
        if rent is not None and rent > 0:
            break
        console.print("[red]Invalid amount. Try again.[/red]")

    status = STATUS_CHOICES[questionary.select("Status:", choices=list(STATUS_CHOICES)).ask() or "Vacant"]
    tenant = _ask_tenant() if status == RoomStatus.OCCUPIED else None
    if status == RoomStatus.OCCUPIED and not tenant:
        console.print("[yellow]No tenant given, room added as vacant.[/yellow]")
        status = RoomStatus.VACANT

    room = room_service.add_room(prop.id, number, rent, room_type=room_type, status=status, tenant_name=tenant)
    console.print(f"[green]Room {room.number} added.[/green]")


def _change_room_status(prop: Property, room_service: RoomService) -> None:
    rooms = room_service.list_rooms(prop.id)
    if not rooms:
        console.print("[yellow]No rooms in this property.[/yellow]")
        return
    room_choices = {f"Room {room.number}": room for room in rooms}
    choice = questionary.select("Room:", choices=list(room_choices) + ["Back"]).ask()
    if choice is None or choice == "Back":
        return
    room = room_choices[choice]

    status_label = questionary.select("New status:", choices=list(STATUS_CHOICES)).ask()
    if status_label is None:
        return
    status = STATUS_CHOICES[status_label]
    tenant = _ask_tenant() if status == RoomStatus.OCCUPIED else None
    try:
        room = room_service.update_room_status(room.id, status, tenant)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return
    console.print(f"[green]Room {room.number} is now {ROOM_STATUS_LABELS[room.status].lower()}.[/green]")


def _rooms_menu(prop: Property, room_service: RoomService) -> None:
    while True:
        rooms = room_service.list_rooms(prop.id)
        stats = room_service.room_stats(prop.id)

        table = Table(title=f"{prop.name} - Rooms")
        table.add_column("Room", style="bold")
        table.add_column("Type")
        table.add_column("Rent", justify="right")
        table.add_column("Status")
        table.add_column("Tenant")
        for room in rooms:
            table.add_row(
                room.number,
                room.type,
                format_php(room.rent),
                ROOM_STATUS_LABELS[room.status],
                room.tenant_name or "-",
            )

        console.print()
        console.print(table)
        console.print(
            f"  {stats.occupied} occupied, {stats.vacant} vacant, {stats.maintenance} under maintenance. "
            f"Monthly rent from occupied rooms: {format_php(stats.potential_revenue)}"
        )

        choice = questionary.select("Rooms:", choices=["Add Room", "Change Room Status", "Back"]).ask()
        if choice is None or choice == "Back":
            break
        elif choice == "Add Room":
            _add_room(prop, room_service)
        elif choice == "Change Room Status":
            _change_room_status(prop, room_service)


def properties_menu(room_service: RoomService) -> None:
    while True:
        properties = room_service.list_properties()

        if properties:
            table = Table(title="Properties")
            table.add_column("#", style="dim")
            table.add_column("Name", style="bold")
            table.add_column("Address")
            for p in properties:
                table.add_row(str(p.id), p.name, p.address)
            console.print()
            console.print(table)
        else:
            console.print("[yellow]No properties yet.[/yellow]")

        property_choices = {f"{p.id} - {p.name}": p for p in properties}
        choice = questionary.select(
            "Properties:",
            choices=list(property_choices) + ["Add Property", "Back"],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Add Property":
            _add_property(room_service)
        elif choice in property_choices:
            _rooms_menu(property_choices[choice], room_service)

import questionary
from rich.console import Console

from rentroll.cli.billing_menu import generate_bills_menu
from rentroll.cli.invoice_menu import billing_statistics_menu, list_invoices_menu
from rentroll.cli.payment_menu import payment_history_menu, payment_proofs_menu
from rentroll.cli.property_menu import properties_menu
from rentroll.notifications.factory import get_notification_sender
from rentroll.repositories.factory import (
    get_invoice_repository,
    get_payment_repository,
    get_property_repository,
    get_room_repository,
)
from rentroll.services.confirmation_service import ConfirmationService
from rentroll.services.invoice_service import InvoiceService
from rentroll.services.payment_service import PaymentService
from rentroll.services.room_service import RoomService
from rentroll.storage.factory import get_storage

console = Console()


def _build_services() -> tuple[RoomService, InvoiceService, ConfirmationService, PaymentService]:
    invoice_repo = get_invoice_repository()
    storage = get_storage()
    return (
        RoomService(get_property_repository(), get_room_repository()),
        InvoiceService(invoice_repo, storage),
        ConfirmationService(invoice_repo, get_notification_sender()),
        PaymentService(get_payment_repository(), invoice_repo, storage),
    )


def main_menu() -> None:
    room_service, invoice_service, confirmation_service, payment_service = _build_services()

    console.print()
    console.print("[bold]Rent Roll[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "Generate Bills",
                "Invoices",
                "Payment Proofs",
                "Payment History",
                "Properties & Rooms",
                "Billing Statistics",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "Generate Bills":
            generate_bills_menu(room_service, confirmation_service)
        elif choice == "Invoices":
            list_invoices_menu(room_service, invoice_service, payment_service)
        elif choice == "Payment Proofs":
            payment_proofs_menu(payment_service)
        elif choice == "Payment History":
            payment_history_menu(payment_service)
        elif choice == "Properties & Rooms":
            properties_menu(room_service)
        elif choice == "Billing Statistics":
            billing_statistics_menu(invoice_service)

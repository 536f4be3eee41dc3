from abc import ABC, abstractmethod
from datetime import date, datetime

from rentroll.models.invoice import Invoice, InvoiceStatus
from rentroll.models.notification import Notification
from rentroll.models.payment import PaymentProof, PaymentRecord, ProofStatus
from rentroll.models.property import Property
from rentroll.models.room import Room, RoomStatus


class PropertyRepository(ABC):
    @abstractmethod
    def create(self, prop: Property) -> Property: ...

    @abstractmethod
    def get_by_id(self, property_id: int) -> Property | None: ...

    @abstractmethod
    def list_all(self) -> list[Property]: ...


class RoomRepository(ABC):
    @abstractmethod
    def create(self, room: Room) -> Room: ...

    @abstractmethod
    def get_by_id(self, room_id: str) -> Room | None: ...

    @abstractmethod
    def list_by_property(self, property_id: int) -> list[Room]: ...

    @abstractmethod
    def update_status(self, room_id: str, status: RoomStatus, tenant_name: str | None) -> None: ...


class InvoiceRepository(ABC):
    @abstractmethod
    def create_batch(self, invoices: list[Invoice]) -> list[Invoice]:
        """Persist all invoices in one transaction; nothing is written on failure."""
        ...

    @abstractmethod
    def has_run(self, run_key: str) -> bool: ...

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Invoice | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Invoice | None: ...

    @abstractmethod
    def list_by_run(self, run_key: str) -> list[Invoice]: ...

    @abstractmethod
    def list_all(self, property_id: int | None = None) -> list[Invoice]: ...

    @abstractmethod
    def update_payment(self, invoice_id: int, status: InvoiceStatus, paid_at: datetime | None) -> None: ...

    @abstractmethod
    def mark_overdue(self, today: date) -> int: ...

    @abstractmethod
    def delete(self, invoice_id: int) -> None:
        """Remove an invoice with its line items and payment proofs; payment history is kept."""
        ...


class NotificationRepository(ABC):
    @abstractmethod
    def create(self, notification: Notification) -> Notification: ...

    @abstractmethod
    def list_for_recipient(self, recipient: str) -> list[Notification]: ...

    @abstractmethod
    def mark_read(self, notification_id: int) -> None: ...


class PaymentRepository(ABC):
    @abstractmethod
    def create_proof(self, proof: PaymentProof) -> PaymentProof: ...

    @abstractmethod
    def get_proof(self, proof_id: int) -> PaymentProof | None: ...

    @abstractmethod
    def get_proof_by_uuid(self, uuid: str) -> PaymentProof | None: ...

    @abstractmethod
    def list_proofs(self, status: ProofStatus | None = None) -> list[PaymentProof]:
        """Newest submission first."""
        ...

    @abstractmethod
    def list_proofs_for_invoice(self, invoice_id: int) -> list[PaymentProof]: ...

    @abstractmethod
    def update_review(
        self, proof_id: int, status: ProofStatus, review_note: str, reviewed_at: datetime
    ) -> None: ...

    @abstractmethod
    def create_record(self, record: PaymentRecord) -> PaymentRecord: ...

    @abstractmethod
    def list_history(self, tenant_name: str | None = None) -> list[PaymentRecord]:
        """Most recent payment first."""
        ...

from __future__ import annotations

import logging
from datetime import date, datetime

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError, OperationalError
from ulid import ULID

from rentroll.constants import PH_TZ
from rentroll.exceptions import ConflictError, TransientIOError
from rentroll.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from rentroll.models.notification import Notification
from rentroll.models.payment import PaymentProof, PaymentRecord, ProofStatus
from rentroll.models.property import Property
from rentroll.models.room import Room, RoomStatus
from rentroll.repositories.base import (
    InvoiceRepository,
    NotificationRepository,
    PaymentRepository,
    PropertyRepository,
    RoomRepository,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(PH_TZ)


class SQLAlchemyPropertyRepository(PropertyRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, prop: Property) -> Property:
        result = self.conn.execute(
            text(
                "INSERT INTO properties (uuid, name, address, created_at) "
                "VALUES (:uuid, :name, :address, :created_at)"
            ),
            {
                "uuid": str(ULID()),
                "name": prop.name,
                "address": prop.address,
                "created_at": _now(),
            },
        )
        property_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(property_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve property after create (id={property_id})")
        return created

    @staticmethod
    def _build_property(row: RowMapping) -> Property:
        return Property(
            id=row["id"],
            uuid=row["uuid"],
            name=row["name"],
            address=row["address"],
            created_at=row["created_at"],
        )

    def get_by_id(self, property_id: int) -> Property | None:
        row = (
            self.conn.execute(text("SELECT * FROM properties WHERE id = :id"), {"id": property_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_property(row)

    def list_all(self) -> list[Property]:
        rows = self.conn.execute(text("SELECT * FROM properties ORDER BY name")).mappings().fetchall()
        return [self._build_property(row) for row in rows]


class SQLAlchemyRoomRepository(RoomRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, room: Room) -> Room:
        room_id = room.id or str(ULID())
        self.conn.execute(
            text(
                "INSERT INTO rooms (id, property_id, number, type, rent, status, tenant_name) "
                "VALUES (:id, :property_id, :number, :type, :rent, :status, :tenant_name)"
            ),
            {
                "id": room_id,
                "property_id": room.property_id,
                "number": room.number,
                "type": room.type,
                "rent": room.rent,
                "status": room.status.value,
                "tenant_name": room.tenant_name,
            },
        )
        self.conn.commit()
        created = self.get_by_id(room_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve room after create (id={room_id})")
        return created

    @staticmethod
    def _build_room(row: RowMapping) -> Room:
        return Room(
            id=row["id"],
            property_id=row["property_id"],
            number=row["number"],
            type=row["type"],
            rent=row["rent"],
            status=RoomStatus(row["status"]),
            tenant_name=row["tenant_name"],
        )

    def get_by_id(self, room_id: str) -> Room | None:
        row = self.conn.execute(text("SELECT * FROM rooms WHERE id = :id"), {"id": room_id}).mappings().fetchone()
        if row is None:
            return None
        return self._build_room(row)

    def list_by_property(self, property_id: int) -> list[Room]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM rooms WHERE property_id = :property_id ORDER BY number"),
                {"property_id": property_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._build_room(row) for row in rows]

    def update_status(self, room_id: str, status: RoomStatus, tenant_name: str | None) -> None:
        self.conn.execute(
            text("UPDATE rooms SET status = :status, tenant_name = :tenant_name WHERE id = :id"),
            {"status": status.value, "tenant_name": tenant_name, "id": room_id},
        )
        self.conn.commit()


class SQLAlchemyInvoiceRepository(InvoiceRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def _insert(self, invoice: Invoice, created_at: datetime) -> int:
        result = self.conn.execute(
            text(
                "INSERT INTO invoices (uuid, run_key, invoice_number, property_id, room_id, room_number, "
                "tenant_name, year, billing_month, total_amount, notes, due_date, status, created_at) "
                "VALUES (:uuid, :run_key, :invoice_number, :property_id, :room_id, :room_number, "
                ":tenant_name, :year, :billing_month, :total_amount, :notes, :due_date, :status, :created_at)"
            ),
            {
                "uuid": str(ULID()),
                "run_key": invoice.run_key,
                "invoice_number": invoice.invoice_number,
                "property_id": invoice.property_id,
                "room_id": invoice.room_id,
                "room_number": invoice.room_number,
                "tenant_name": invoice.tenant_name,
                "year": invoice.year,
                "billing_month": invoice.billing_month,
                "total_amount": invoice.total_amount,
                "notes": invoice.notes,
                "due_date": invoice.due_date.isoformat(),
                "status": invoice.status.value,
                "created_at": created_at,
            },
        )
        invoice_id = result.lastrowid
        for i, item in enumerate(invoice.line_items):
            self.conn.execute(
                text(
                    "INSERT INTO invoice_line_items (invoice_id, description, amount, sort_order) "
                    "VALUES (:invoice_id, :description, :amount, :sort_order)"
                ),
                {
                    "invoice_id": invoice_id,
                    "description": item.description,
                    "amount": item.amount,
                    "sort_order": i,
                },
            )
        return invoice_id

    def create_batch(self, invoices: list[Invoice]) -> list[Invoice]:
        created_at = _now()
        try:
            invoice_ids = [self._insert(invoice, created_at) for invoice in invoices]
            self.conn.commit()
        except IntegrityError as exc:
            self.conn.rollback()
            logger.warning("Invoice batch rejected as duplicate: %s", exc.orig)
            raise ConflictError("These invoices were already generated for this billing run.") from exc
        except OperationalError as exc:
            self.conn.rollback()
            logger.warning("Invoice batch failed, rolled back: %s", exc.orig)
            raise TransientIOError("Could not save invoices, please try again.") from exc
        except Exception:
            self.conn.rollback()
            logger.exception("Invoice batch failed, rolled back")
            raise
        logger.debug("Inserted %d invoices", len(invoice_ids))
        result = []
        for invoice_id in invoice_ids:
            created = self.get_by_id(invoice_id)
            if created is None:
                raise RuntimeError(f"Failed to retrieve invoice after create (id={invoice_id})")
            result.append(created)
        return result

    def has_run(self, run_key: str) -> bool:
        count = self.conn.execute(
            text("SELECT COUNT(*) FROM invoices WHERE run_key = :run_key"),
            {"run_key": run_key},
        ).scalar()
        return bool(count)

    @staticmethod
    def _build_invoice(row: RowMapping, item_rows: list[RowMapping]) -> Invoice:
        return Invoice(
            id=row["id"],
            uuid=row["uuid"],
            run_key=row["run_key"],
            invoice_number=row["invoice_number"],
            property_id=row["property_id"],
            room_id=row["room_id"],
            room_number=row["room_number"],
            tenant_name=row["tenant_name"],
            year=row["year"],
            billing_month=row["billing_month"],
            line_items=[
                InvoiceLineItem(
                    id=item_row["id"],
                    invoice_id=item_row["invoice_id"],
                    description=item_row["description"],
                    amount=item_row["amount"],
                    sort_order=item_row["sort_order"],
                )
                for item_row in item_rows
            ],
            total_amount=row["total_amount"],
            notes=row["notes"],
            due_date=row["due_date"],
            status=InvoiceStatus(row["status"]),
            paid_at=row["paid_at"],
            created_at=row["created_at"],
        )

    def _build_invoices_from_rows(self, rows: list[RowMapping]) -> list[Invoice]:
        if not rows:
            return []
        invoice_ids = [row["id"] for row in rows]
        placeholders = ", ".join(f":id{i}" for i in range(len(invoice_ids)))
        params = {f"id{i}": iid for i, iid in enumerate(invoice_ids)}
        all_items = (
            self.conn.execute(
                text(f"SELECT * FROM invoice_line_items WHERE invoice_id IN ({placeholders}) ORDER BY sort_order"),
                params,
            )
            .mappings()
            .fetchall()
        )
        items_by_invoice: dict[int, list[RowMapping]] = {}
        for item_row in all_items:
            items_by_invoice.setdefault(item_row["invoice_id"], []).append(item_row)
        return [self._build_invoice(row, items_by_invoice.get(row["id"], [])) for row in rows]

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        row = (
            self.conn.execute(text("SELECT * FROM invoices WHERE id = :id"), {"id": invoice_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_invoices_from_rows([row])[0]

    def get_by_uuid(self, uuid: str) -> Invoice | None:
        row = (
            self.conn.execute(text("SELECT * FROM invoices WHERE uuid = :uuid"), {"uuid": uuid})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_invoices_from_rows([row])[0]

    def list_by_run(self, run_key: str) -> list[Invoice]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM invoices WHERE run_key = :run_key ORDER BY id"),
                {"run_key": run_key},
            )
            .mappings()
            .fetchall()
        )
        return self._build_invoices_from_rows(list(rows))

    def list_all(self, property_id: int | None = None) -> list[Invoice]:
        if property_id is None:
            rows = (
                self.conn.execute(text("SELECT * FROM invoices ORDER BY year DESC, billing_month DESC, room_number"))
                .mappings()
                .fetchall()
            )
        else:
            rows = (
                self.conn.execute(
                    text(
                        "SELECT * FROM invoices WHERE property_id = :property_id "
                        "ORDER BY year DESC, billing_month DESC, room_number"
                    ),
                    {"property_id": property_id},
                )
                .mappings()
                .fetchall()
            )
        return self._build_invoices_from_rows(list(rows))

    def update_payment(self, invoice_id: int, status: InvoiceStatus, paid_at: datetime | None) -> None:
        self.conn.execute(
            text("UPDATE invoices SET status = :status, paid_at = :paid_at WHERE id = :id"),
            {"status": status.value, "paid_at": paid_at, "id": invoice_id},
        )
        self.conn.commit()

    def mark_overdue(self, today: date) -> int:
        result = self.conn.execute(
            text("UPDATE invoices SET status = :overdue WHERE status = :pending AND due_date < :today"),
            {
                "overdue": InvoiceStatus.OVERDUE.value,
                "pending": InvoiceStatus.PENDING.value,
                "today": today.isoformat(),
            },
        )
        self.conn.commit()
        return result.rowcount

    def delete(self, invoice_id: int) -> None:
        self.conn.execute(text("DELETE FROM invoices WHERE id = :id"), {"id": invoice_id})
        self.conn.commit()


class SQLAlchemyNotificationRepository(NotificationRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, notification: Notification) -> Notification:
        result = self.conn.execute(
            text(
                "INSERT INTO notifications (uuid, run_key, recipient, room_number, invoice_number, "
                "title, message, is_read, created_at) "
                "VALUES (:uuid, :run_key, :recipient, :room_number, :invoice_number, "
                ":title, :message, :is_read, :created_at)"
            ),
            {
                "uuid": str(ULID()),
                "run_key": notification.run_key,
                "recipient": notification.recipient,
                "room_number": notification.room_number,
                "invoice_number": notification.invoice_number,
                "title": notification.title,
                "message": notification.message,
                "is_read": notification.read,
                "created_at": _now(),
            },
        )
        notification_id = result.lastrowid
        self.conn.commit()
        row = (
            self.conn.execute(text("SELECT * FROM notifications WHERE id = :id"), {"id": notification_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            raise RuntimeError(f"Failed to retrieve notification after create (id={notification_id})")
        return self._build_notification(row)

    @staticmethod
    def _build_notification(row: RowMapping) -> Notification:
        return Notification(
            id=row["id"],
            uuid=row["uuid"],
            run_key=row["run_key"],
            recipient=row["recipient"],
            room_number=row["room_number"],
            invoice_number=row["invoice_number"],
            title=row["title"],
            message=row["message"],
            read=bool(row["is_read"]),
            created_at=row["created_at"],
        )

    def list_for_recipient(self, recipient: str) -> list[Notification]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM notifications WHERE recipient = :recipient ORDER BY created_at DESC, id DESC"),
                {"recipient": recipient},
            )
            .mappings()
            .fetchall()
        )
        return [self._build_notification(row) for row in rows]

    def mark_read(self, notification_id: int) -> None:
        self.conn.execute(
            text("UPDATE notifications SET is_read = 1 WHERE id = :id"),
            {"id": notification_id},
        )
        self.conn.commit()


class SQLAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_proof(row: RowMapping) -> PaymentProof:
        return PaymentProof(
            id=row["id"],
            uuid=row["uuid"],
            invoice_id=row["invoice_id"],
            invoice_number=row["invoice_number"],
            tenant_name=row["tenant_name"],
            room_number=row["room_number"],
            amount=row["amount"],
            reference=row["reference"],
            note=row["note"],
            filename=row["filename"],
            storage_key=row["storage_key"],
            content_type=row["content_type"],
            status=ProofStatus(row["status"]),
            review_note=row["review_note"],
            submitted_at=row["submitted_at"],
            reviewed_at=row["reviewed_at"],
        )

    @staticmethod
    def _row_to_record(row: RowMapping) -> PaymentRecord:
        return PaymentRecord(
            id=row["id"],
            uuid=row["uuid"],
            invoice_id=row["invoice_id"],
            invoice_number=row["invoice_number"],
            receipt_number=row["receipt_number"],
            tenant_name=row["tenant_name"],
            room_number=row["room_number"],
            year=row["year"],
            billing_month=row["billing_month"],
            amount=row["amount"],
            method=row["method"],
            due_date=row["due_date"],
            paid_at=row["paid_at"],
            created_at=row["created_at"],
        )

    def create_proof(self, proof: PaymentProof) -> PaymentProof:
        proof_uuid = proof.uuid or str(ULID())
        self.conn.execute(
            text(
                "INSERT INTO payment_proofs (uuid, invoice_id, invoice_number, tenant_name, room_number, amount, "
                "reference, note, filename, storage_key, content_type, status, submitted_at) "
                "VALUES (:uuid, :invoice_id, :invoice_number, :tenant_name, :room_number, :amount, "
                ":reference, :note, :filename, :storage_key, :content_type, :status, :submitted_at)"
            ),
            {
                "uuid": proof_uuid,
                "invoice_id": proof.invoice_id,
                "invoice_number": proof.invoice_number,
                "tenant_name": proof.tenant_name,
                "room_number": proof.room_number,
                "amount": proof.amount,
                "reference": proof.reference,
                "note": proof.note,
                "filename": proof.filename,
                "storage_key": proof.storage_key,
                "content_type": proof.content_type,
                "status": proof.status.value,
                "submitted_at": _now(),
            },
        )
        self.conn.commit()
        created = self.get_proof_by_uuid(proof_uuid)
        if created is None:
            raise RuntimeError(f"Failed to retrieve payment proof after create (uuid={proof_uuid})")
        return created

    def get_proof(self, proof_id: int) -> PaymentProof | None:
        row = (
            self.conn.execute(text("SELECT * FROM payment_proofs WHERE id = :id"), {"id": proof_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_proof(row)

    def get_proof_by_uuid(self, uuid: str) -> PaymentProof | None:
        row = (
            self.conn.execute(text("SELECT * FROM payment_proofs WHERE uuid = :uuid"), {"uuid": uuid})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_proof(row)

    def list_proofs(self, status: ProofStatus | None = None) -> list[PaymentProof]:
        if status is None:
            rows = (
                self.conn.execute(text("SELECT * FROM payment_proofs ORDER BY submitted_at DESC, id DESC"))
                .mappings()
                .fetchall()
            )
        else:
            rows = (
                self.conn.execute(
                    text("SELECT * FROM payment_proofs WHERE status = :status ORDER BY submitted_at DESC, id DESC"),
                    {"status": status.value},
                )
                .mappings()
                .fetchall()
            )
        return [self._row_to_proof(row) for row in rows]

    def list_proofs_for_invoice(self, invoice_id: int) -> list[PaymentProof]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM payment_proofs WHERE invoice_id = :invoice_id ORDER BY submitted_at, id"),
                {"invoice_id": invoice_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_proof(row) for row in rows]

    def update_review(self, proof_id: int, status: ProofStatus, review_note: str, reviewed_at: datetime) -> None:
        self.conn.execute(
            text(
                "UPDATE payment_proofs SET status = :status, review_note = :review_note, "
                "reviewed_at = :reviewed_at WHERE id = :id"
            ),
            {"status": status.value, "review_note": review_note, "reviewed_at": reviewed_at, "id": proof_id},
        )
        self.conn.commit()

    def create_record(self, record: PaymentRecord) -> PaymentRecord:
        record_uuid = str(ULID())
        result = self.conn.execute(
            text(
                "INSERT INTO payment_history (uuid, invoice_id, invoice_number, receipt_number, tenant_name, "
                "room_number, year, billing_month, amount, method, due_date, paid_at, created_at) "
                "VALUES (:uuid, :invoice_id, :invoice_number, :receipt_number, :tenant_name, "
                ":room_number, :year, :billing_month, :amount, :method, :due_date, :paid_at, :created_at)"
            ),
            {
                "uuid": record_uuid,
                "invoice_id": record.invoice_id,
                "invoice_number": record.invoice_number,
                "receipt_number": record.receipt_number,
                "tenant_name": record.tenant_name,
                "room_number": record.room_number,
                "year": record.year,
                "billing_month": record.billing_month,
                "amount": record.amount,
                "method": record.method,
                "due_date": record.due_date.isoformat(),
                "paid_at": record.paid_at,
                "created_at": _now(),
            },
        )
        record_id = result.lastrowid
        self.conn.commit()
        row = (
            self.conn.execute(text("SELECT * FROM payment_history WHERE id = :id"), {"id": record_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            raise RuntimeError(f"Failed to retrieve payment record after create (id={record_id})")
        return self._row_to_record(row)

    def list_history(self, tenant_name: str | None = None) -> list[PaymentRecord]:
        if tenant_name is None:
            rows = (
                self.conn.execute(text("SELECT * FROM payment_history ORDER BY paid_at DESC, id DESC"))
                .mappings()
                .fetchall()
            )
        else:
            rows = (
                self.conn.execute(
                    text(
                        "SELECT * FROM payment_history WHERE tenant_name = :tenant_name "
                        "ORDER BY paid_at DESC, id DESC"
                    ),
                    {"tenant_name": tenant_name},
                )
                .mappings()
                .fetchall()
            )
        return [self._row_to_record(row) for row in rows]

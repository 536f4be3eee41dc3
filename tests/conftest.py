"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from rentroll.models.charge import RoomCharge
from rentroll.models.invoice import Invoice, InvoiceLineItem
from rentroll.models.period import BillingPeriod
from rentroll.models.property import Property
from rentroll.models.room import Room, RoomStatus

# Matches Alembic head: 8c2e4f6a1b93 (payment proofs)
SCHEMA_DDL = """
CREATE TABLE properties (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    name TEXT NOT NULL,
    address TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL
);

CREATE TABLE rooms (
    id VARCHAR(26) PRIMARY KEY,
    property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
    number VARCHAR(20) NOT NULL,
    type TEXT NOT NULL DEFAULT '',
    rent INTEGER NOT NULL DEFAULT 0,
    status VARCHAR(20) NOT NULL DEFAULT 'vacant',
    tenant_name TEXT,
    UNIQUE(property_id, number)
);

CREATE TABLE invoices (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    run_key VARCHAR(26) NOT NULL,
    invoice_number VARCHAR(40) NOT NULL,
    property_id INTEGER NOT NULL REFERENCES properties(id),
    room_id VARCHAR(26) NOT NULL REFERENCES rooms(id),
    room_number VARCHAR(20) NOT NULL,
    tenant_name TEXT,
    year INTEGER NOT NULL,
    billing_month INTEGER NOT NULL,
    total_amount INTEGER NOT NULL DEFAULT 0,
    notes TEXT NOT NULL DEFAULT '',
    due_date VARCHAR(10) NOT NULL,
    status VARCHAR(20) NOT NULL DEFAULT 'pending',
    paid_at DATETIME,
    created_at DATETIME NOT NULL,
    UNIQUE(run_key, room_id)
);

CREATE TABLE invoice_line_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    invoice_id INTEGER NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
    description TEXT NOT NULL,
    amount INTEGER NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE notifications (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    run_key VARCHAR(26) NOT NULL DEFAULT '',
    recipient TEXT NOT NULL,
    room_number VARCHAR(20) NOT NULL DEFAULT '',
    invoice_number VARCHAR(40) NOT NULL DEFAULT '',
    title TEXT NOT NULL,
    message TEXT NOT NULL,
    is_read BOOLEAN NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
);

CREATE TABLE payment_proofs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    invoice_id INTEGER NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
    invoice_number VARCHAR(40) NOT NULL,
    tenant_name TEXT,
    room_number VARCHAR(20) NOT NULL DEFAULT '',
    amount INTEGER NOT NULL DEFAULT 0,
    reference TEXT NOT NULL DEFAULT '',
    note TEXT NOT NULL DEFAULT '',
    filename TEXT NOT NULL DEFAULT '',
    storage_key TEXT NOT NULL DEFAULT '',
    content_type TEXT NOT NULL DEFAULT '',
    status VARCHAR(20) NOT NULL DEFAULT 'pending_review',
    review_note TEXT NOT NULL DEFAULT '',
    submitted_at DATETIME NOT NULL,
    reviewed_at DATETIME
);

CREATE TABLE payment_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    invoice_id INTEGER REFERENCES invoices(id) ON DELETE SET NULL,
    invoice_number VARCHAR(40) NOT NULL,
    receipt_number VARCHAR(40) NOT NULL,
    tenant_name TEXT,
    room_number VARCHAR(20) NOT NULL DEFAULT '',
    year INTEGER NOT NULL,
    billing_month INTEGER NOT NULL,
    amount INTEGER NOT NULL,
    method TEXT NOT NULL DEFAULT 'Payment Proof',
    due_date VARCHAR(10) NOT NULL,
    paid_at DATETIME NOT NULL,
    created_at DATETIME NOT NULL
);
"""


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _sample_rooms() -> list[Room]:
    return [
        Room(id="r101", property_id=1, number="101", type="Studio", rent=280000,
             status=RoomStatus.OCCUPIED, tenant_name="Anna Garcia"),
        Room(id="r102", property_id=1, number="102", type="1BR", rent=320000,
             status=RoomStatus.OCCUPIED, tenant_name="Carlos Mendoza"),
        Room(id="r103", property_id=1, number="103", type="Studio", rent=280000, status=RoomStatus.VACANT),
        Room(id="r201", property_id=1, number="201", type="2BR", rent=450000,
             status=RoomStatus.OCCUPIED, tenant_name="Elena Rodriguez"),
        Room(id="r203", property_id=1, number="203", type="Studio", rent=280000, status=RoomStatus.MAINTENANCE),
    ]


def _sample_period(**overrides) -> BillingPeriod:
    defaults = dict(
        id="period_2024_01",
        year=2024,
        billing_month=0,
        display_name="January 2024",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
    )
    defaults.update(overrides)
    return BillingPeriod(**defaults)


def _sample_invoice(**overrides) -> Invoice:
    defaults = dict(
        run_key="01HRUNKEY0000000000000000A",
        invoice_number="INV-202401-101",
        property_id=1,
        room_id="r101",
        room_number="101",
        tenant_name="Anna Garcia",
        year=2024,
        billing_month=0,
        line_items=[
            InvoiceLineItem(description="Rent", amount=280000, sort_order=0),
            InvoiceLineItem(description="Electricity", amount=50000, sort_order=1),
        ],
        total_amount=330000,
        notes="",
        due_date=date(2024, 1, 31),
    )
    defaults.update(overrides)
    return Invoice(**defaults)


@pytest.fixture()
def sample_property() -> Property:
    return Property(id=1, uuid="01HPROPERTY000000000000000", name="Sunset Apartments",
                    address="123 Main St, Cebu City")


@pytest.fixture()
def sample_rooms() -> list[Room]:
    return _sample_rooms()


@pytest.fixture()
def sample_period():
    return _sample_period


@pytest.fixture()
def sample_invoice():
    return _sample_invoice


@pytest.fixture()
def sample_charge():
    def _make(room_id: str = "r101", **overrides) -> RoomCharge:
        return RoomCharge(room_id=room_id, **overrides)

    return _make

import pytest
from sqlalchemy import Connection

from rentroll.models.property import Property
from rentroll.repositories.sqlalchemy import (
    SQLAlchemyInvoiceRepository,
    SQLAlchemyNotificationRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyPropertyRepository,
    SQLAlchemyRoomRepository,
)


@pytest.fixture()
def property_repo(db_connection: Connection) -> SQLAlchemyPropertyRepository:
    return SQLAlchemyPropertyRepository(db_connection)


@pytest.fixture()
def room_repo(db_connection: Connection) -> SQLAlchemyRoomRepository:
    return SQLAlchemyRoomRepository(db_connection)


@pytest.fixture()
def invoice_repo(db_connection: Connection) -> SQLAlchemyInvoiceRepository:
    return SQLAlchemyInvoiceRepository(db_connection)


@pytest.fixture()
def notification_repo(db_connection: Connection) -> SQLAlchemyNotificationRepository:
    return SQLAlchemyNotificationRepository(db_connection)


@pytest.fixture()
def payment_repo(db_connection: Connection) -> SQLAlchemyPaymentRepository:
    return SQLAlchemyPaymentRepository(db_connection)


@pytest.fixture()
def stored_rooms(property_repo, room_repo, sample_rooms):
    """Sunset Apartments with the sample rooms, persisted."""
    prop = property_repo.create(Property(name="Sunset Apartments", address="123 Main St, Cebu City"))
    return [room_repo.create(room.model_copy(update={"property_id": prop.id})) for room in sample_rooms]

from rentroll.repositories.base import (
    InvoiceRepository,
    NotificationRepository,
    PaymentRepository,
    PropertyRepository,
    RoomRepository,
)


def get_property_repository() -> PropertyRepository:
    from rentroll.db import get_connection
    from rentroll.repositories.sqlalchemy import SQLAlchemyPropertyRepository

    return SQLAlchemyPropertyRepository(get_connection())


def get_room_repository() -> RoomRepository:
    from rentroll.db import get_connection
    from rentroll.repositories.sqlalchemy import SQLAlchemyRoomRepository

    return SQLAlchemyRoomRepository(get_connection())


def get_invoice_repository() -> InvoiceRepository:
    from rentroll.db import get_connection
    from rentroll.repositories.sqlalchemy import SQLAlchemyInvoiceRepository

    return SQLAlchemyInvoiceRepository(get_connection())


def get_notification_repository() -> NotificationRepository:
    from rentroll.db import get_connection
    from rentroll.repositories.sqlalchemy import SQLAlchemyNotificationRepository

    return SQLAlchemyNotificationRepository(get_connection())


def get_payment_repository() -> PaymentRepository:
    from rentroll.db import get_connection
    from rentroll.repositories.sqlalchemy import SQLAlchemyPaymentRepository

    return SQLAlchemyPaymentRepository(get_connection())

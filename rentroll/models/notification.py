from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Notification(BaseModel):
    id: int | None = None
    uuid: str = ""
    run_key: str = ""
    recipient: str
    room_number: str = ""
    invoice_number: str = ""
    title: str
    message: str
    read: bool = False
    created_at: datetime | None = None

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Property(BaseModel):
    id: int | None = None
    uuid: str = ""
    name: str
    address: str = ""
    created_at: datetime | None = None

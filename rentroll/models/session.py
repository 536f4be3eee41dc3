from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from ulid import ULID

from rentroll.models.charge import RoomCharge
from rentroll.models.period import BillingPeriod
from rentroll.models.room import Room


class SessionState(str, Enum):
    DRAFT = "draft"
    PROCESSING = "processing"
    COMPLETED = "completed"


def _new_run_key() -> str:
    return str(ULID())


class BillingSession(BaseModel):
    """State accumulated across the billing wizard.

    ``run_key`` is generated once per session and doubles as the idempotency
    key stored on every invoice the run produces.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    run_key: str = Field(default_factory=_new_run_key)
    property_id: int | None = None
    property_name: str = ""
    selected_rooms: list[Room] = []
    billing_period: BillingPeriod | None = None
    room_charges: dict[str, RoomCharge] = {}
    total_amount: int = 0  # centavos
    state: SessionState = SessionState.DRAFT

    def to_params(self) -> str:
        """Serialize for handing to the next wizard step."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_params(cls, params: str | None) -> BillingSession:
        if not params:
            return cls()
        return cls.model_validate_json(params)

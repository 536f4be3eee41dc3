from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict


class BillingPeriod(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    year: int
    billing_month: int  # 0-based: January == 0
    display_name: str
    start_date: date
    end_date: date
    is_current_month: bool = False

    @property
    def due_date(self) -> date:
        return self.end_date

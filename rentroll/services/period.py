from __future__ import annotations

import calendar
import logging
from datetime import date, datetime

from rentroll.constants import PH_TZ, format_period
from rentroll.exceptions import ValidationError
from rentroll.models.period import BillingPeriod
from rentroll.settings import settings

logger = logging.getLogger(__name__)


def _today() -> date:
    return datetime.now(PH_TZ).date()


def billing_period_for(year: int, billing_month: int, *, today: date | None = None) -> BillingPeriod:
    """Build the period covering ``billing_month`` (0-based) of ``year``."""
    if not 0 <= billing_month <= 11:
        raise ValidationError(f"Invalid billing month: {billing_month}")
    today = today or _today()
    month = billing_month + 1
    last_day = calendar.monthrange(year, month)[1]
    return BillingPeriod(
        id=f"period_{year}_{month:02d}",
        year=year,
        billing_month=billing_month,
        display_name=format_period(year, billing_month),
        start_date=date(year, month, 1),
        end_date=date(year, month, last_day),
        is_current_month=(today.year, today.month) == (year, month),
    )


def list_billing_periods(today: date | None = None, count: int | None = None) -> list[BillingPeriod]:
    """The current month followed by the next ``count - 1`` months."""
    today = today or _today()
    count = settings.billing_period_count if count is None else count
    periods: list[BillingPeriod] = []
    for offset in range(count):
        index = today.month - 1 + offset
        periods.append(billing_period_for(today.year + index // 12, index % 12, today=today))
    logger.debug("Generated %d billing periods starting %s", len(periods), today.isoformat())
    return periods


def select_period(periods: list[BillingPeriod], period_id: str | None) -> BillingPeriod:
    for period in periods:
        if period.id == period_id:
            return period
    logger.warning("Billing period %r is not selectable", period_id)
    raise ValidationError("Please select a billing period to continue.")

"""Valuation snapshot model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ValuationSnapshot:
    """
    Aggregate portfolio value for today and the previous recorded day.

    All fields start unset. Yesterday is only filled on a calendar-day
    rollover that finds a stored today value.
    """

    today_total_value: Optional[Decimal] = None
    yesterday_total_value: Optional[Decimal] = None
    last_update_date: Optional[date] = None

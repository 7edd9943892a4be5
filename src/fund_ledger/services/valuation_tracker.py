"""Today/yesterday valuation snapshot with calendar-day rollover."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from fund_ledger.core.timezone import Clock, SystemClock, market_date
from fund_ledger.domain.models import ValuationSnapshot
from fund_ledger.repositories.portfolio_store import PortfolioStore

logger = logging.getLogger(__name__)


def roll_snapshot(
    snapshot: ValuationSnapshot,
    current_total_value: Decimal,
    today: date,
) -> ValuationSnapshot:
    """
    Return the snapshot after recording current_total_value on ``today``.

    Same day: today's value is refreshed. New day: the stored today value
    (if any) becomes yesterday's before being replaced. With no stored today
    value yesterday stays as it was, which is unset on a cold start.
    """
    if snapshot.last_update_date is None or snapshot.last_update_date == today:
        return ValuationSnapshot(
            today_total_value=current_total_value,
            yesterday_total_value=snapshot.yesterday_total_value,
            last_update_date=today,
        )

    yesterday = snapshot.yesterday_total_value
    if snapshot.today_total_value is not None:
        yesterday = snapshot.today_total_value
    return ValuationSnapshot(
        today_total_value=current_total_value,
        yesterday_total_value=yesterday,
        last_update_date=today,
    )


class ValuationSnapshotTracker:
    """
    Owns the persisted valuation snapshot.

    ``record_valuation`` must run once after every mutation that can change
    total value, before statistics are read.
    """

    def __init__(self, store: PortfolioStore, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or SystemClock()

    def record_valuation(
        self,
        current_total_value: Decimal,
        today: Optional[date] = None,
    ) -> ValuationSnapshot:
        """Record the current total value; ``today`` defaults to the market date."""
        today = today or market_date(self._clock.now())
        previous = self._store.load_snapshot()
        updated = roll_snapshot(previous, current_total_value, today)
        self._store.save_snapshot(updated)

        if previous.last_update_date is not None and previous.last_update_date != today:
            logger.info(
                "Snapshot rolled over from %s to %s (yesterday value %s)",
                previous.last_update_date, today, updated.yesterday_total_value,
            )
        return updated

    def snapshot(self) -> ValuationSnapshot:
        """Return the stored snapshot."""
        return self._store.load_snapshot()

    def change_since_yesterday(self) -> Optional[Decimal]:
        """Return today's minus yesterday's total value, or None if either is unset."""
        snapshot = self._store.load_snapshot()
        if snapshot.today_total_value is None or snapshot.yesterday_total_value is None:
            return None
        return snapshot.today_total_value - snapshot.yesterday_total_value

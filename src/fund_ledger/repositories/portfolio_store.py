"""Named slots of portfolio state on top of a key-value store."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from fund_ledger.core.timezone import Clock, SystemClock, to_market
from fund_ledger.domain.models import Holding, Transaction, ValuationSnapshot
from fund_ledger.repositories.protocols import KeyValueStore
from fund_ledger.serialization import (
    holding_from_record,
    holding_to_record,
    transaction_from_record,
    transaction_to_record,
)

logger = logging.getLogger(__name__)

FUNDS_KEY = "fund-ledger-funds"
TRANSACTIONS_KEY = "fund-ledger-transactions"
YESTERDAY_TOTAL_VALUE_KEY = "fund-ledger-yesterday-total-value"
TODAY_TOTAL_VALUE_KEY = "fund-ledger-today-total-value"
LAST_UPDATE_DATE_KEY = "fund-ledger-last-update-date"


class PortfolioStore:
    """
    Typed access to the persisted holdings, transactions and snapshot.

    Services load what they need, mutate in memory and save back; nothing
    here is cached, so every load reflects the last save.

    When ``retention_days`` is set, transactions older than that many days
    are dropped whenever the transaction list is loaded or saved.
    """

    def __init__(
        self,
        store: KeyValueStore,
        retention_days: Optional[int] = None,
        clock: Optional[Clock] = None,
    ):
        self._store = store
        self._retention_days = retention_days
        self._clock = clock or SystemClock()

    # Holdings

    def load_holdings(self) -> list[Holding]:
        """Load all holdings in stored order."""
        return [holding_from_record(r) for r in self._store.get(FUNDS_KEY, [])]

    def save_holdings(self, holdings: list[Holding]) -> None:
        """Replace the stored holdings list."""
        self._store.set(FUNDS_KEY, [holding_to_record(h) for h in holdings])

    # Transactions

    def load_transactions(self) -> list[Transaction]:
        """Load transactions, newest first."""
        records = self._store.get(TRANSACTIONS_KEY, [])
        transactions = [transaction_from_record(r) for r in records]
        kept = self._apply_retention(transactions)
        if len(kept) != len(transactions):
            self._write_transactions(kept)
        return kept

    def save_transactions(self, transactions: list[Transaction]) -> None:
        """Replace the stored transaction list (kept newest first)."""
        self._write_transactions(self._apply_retention(transactions))

    def _write_transactions(self, transactions: list[Transaction]) -> None:
        self._store.set(TRANSACTIONS_KEY, [transaction_to_record(t) for t in transactions])

    def _apply_retention(self, transactions: list[Transaction]) -> list[Transaction]:
        if self._retention_days is None:
            return list(transactions)
        cutoff = self._clock.now() - timedelta(days=self._retention_days)
        kept = [t for t in transactions if to_market(t.txn_time) >= cutoff]
        dropped = len(transactions) - len(kept)
        if dropped:
            logger.info(
                "Pruned %d transactions older than %d days", dropped, self._retention_days
            )
        return kept

    # Snapshot

    def load_snapshot(self) -> ValuationSnapshot:
        """Load the valuation snapshot; unset slots come back as None."""
        today_value = self._store.get(TODAY_TOTAL_VALUE_KEY)
        yesterday_value = self._store.get(YESTERDAY_TOTAL_VALUE_KEY)
        last_date = self._store.get(LAST_UPDATE_DATE_KEY)
        return ValuationSnapshot(
            today_total_value=Decimal(str(today_value)) if today_value is not None else None,
            yesterday_total_value=(
                Decimal(str(yesterday_value)) if yesterday_value is not None else None
            ),
            last_update_date=date.fromisoformat(last_date) if last_date else None,
        )

    def save_snapshot(self, snapshot: ValuationSnapshot) -> None:
        """Write every snapshot slot; None clears the slot."""
        self._set_or_delete(TODAY_TOTAL_VALUE_KEY, snapshot.today_total_value)
        self._set_or_delete(YESTERDAY_TOTAL_VALUE_KEY, snapshot.yesterday_total_value)
        self._set_or_delete(
            LAST_UPDATE_DATE_KEY,
            snapshot.last_update_date.isoformat() if snapshot.last_update_date else None,
        )

    def _set_or_delete(self, key: str, value: Optional[object]) -> None:
        if value is None:
            self._store.delete(key)
        elif isinstance(value, Decimal):
            self._store.set(key, str(value))
        else:
            self._store.set(key, value)

    # Lifecycle

    def clear_portfolio(self) -> None:
        """Delete holdings and transactions; the snapshot is left alone."""
        self._store.delete(FUNDS_KEY)
        self._store.delete(TRANSACTIONS_KEY)

"""Portfolio service: holdings, prices, transactions and contributions."""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Optional

from fund_ledger.core.exceptions import HoldingNotFoundError, NotFoundError, ValidationError
from fund_ledger.core.timezone import (
    Clock,
    SystemClock,
    format_price_timestamp,
    normalize_price_timestamp,
)
from fund_ledger.domain.models import (
    ContributionConfig,
    Holding,
    Transaction,
    TransactionType,
)
from fund_ledger.domain.views import ExecutionSummary, Quote, SyncSummary
from fund_ledger.repositories.portfolio_store import PortfolioStore
from fund_ledger.services.contribution_planner import ContributionPlanner
from fund_ledger.services.ledger_engine import LedgerEngine
from fund_ledger.services.market_data_service import MarketDataService
from fund_ledger.services.valuation_tracker import ValuationSnapshotTracker

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
DEMO_SHARES = Decimal("1000")
DEMO_FALLBACK_PRICE = Decimal("1")


@dataclass
class HoldingCreate:
    """Input data for adding a holding."""

    fund_id: str
    name: str
    shares: Decimal = ZERO
    cost_basis: Decimal = ZERO
    current_price: Optional[Decimal] = None  # defaults to cost_basis
    initial_price: Optional[Decimal] = None  # defaults to current_price
    price_updated_at: Optional[str] = None
    contribution: Optional[ContributionConfig] = None
    tag: Optional[str] = None


@dataclass
class HoldingUpdate:
    """Partial update data for editing a holding; None leaves a field as is."""

    name: Optional[str] = None
    shares: Optional[Decimal] = None
    cost_basis: Optional[Decimal] = None
    initial_price: Optional[Decimal] = None
    tag: Optional[str] = None


class PortfolioService:
    """
    Service orchestrating every mutation of the portfolio.

    Each mutating call loads the slots it needs from the store, validates,
    mutates in memory, flushes once and then records the new total value
    with the valuation tracker. Errors are raised before anything is
    flushed, so a failed call leaves the store untouched.
    """

    def __init__(
        self,
        store: PortfolioStore,
        engine: LedgerEngine,
        tracker: ValuationSnapshotTracker,
        market_data: MarketDataService,
        planner: Optional[ContributionPlanner] = None,
        clock: Optional[Clock] = None,
    ):
        self._store = store
        self._engine = engine
        self._tracker = tracker
        self._market_data = market_data
        self._planner = planner or ContributionPlanner()
        self._clock = clock or SystemClock()

    # =========================================================================
    # Holdings
    # =========================================================================

    def list_holdings(self) -> list[Holding]:
        """List all holdings in stored order."""
        return self._store.load_holdings()

    def get_holding(self, fund_id: str) -> Holding:
        """Get a holding by fund id."""
        holdings = self._store.load_holdings()
        return holdings[self._index_of(holdings, fund_id)]

    def add_holding(self, data: HoldingCreate) -> Holding:
        """
        Add a new holding.

        Raises ValidationError for a blank or duplicate fund id, negative
        quantities or an unrecognized price timestamp.
        """
        fund_id = (data.fund_id or "").strip()
        if not fund_id:
            raise ValidationError("Fund id is required")

        holdings = self._store.load_holdings()
        if any(h.fund_id == fund_id for h in holdings):
            raise ValidationError(f"Holding {fund_id} already exists")

        current_price = data.current_price if data.current_price is not None else data.cost_basis
        self._validate_position(data.shares, data.cost_basis)
        if current_price < ZERO:
            raise ValidationError(f"Current price must be >= 0, got {current_price}")
        if data.initial_price is not None and data.initial_price < ZERO:
            raise ValidationError(f"Initial price must be >= 0, got {data.initial_price}")

        now = self._clock.now().isoformat()
        holding = Holding(
            fund_id=fund_id,
            name=(data.name or "").strip() or fund_id,
            shares=data.shares,
            cost_basis=data.cost_basis,
            current_price=current_price,
            initial_price=data.initial_price if data.initial_price is not None else current_price,
            price_updated_at=self._normalize_timestamp(data.price_updated_at),
            created_at=now,
            updated_at=now,
            contribution=data.contribution,
            tag=self._clean_tag(data.tag),
        )
        holdings.append(holding)
        self._flush_holdings(holdings)

        logger.info("Added holding %s (%s shares @ %s)", fund_id, holding.shares, holding.cost_basis)
        return holding

    def update_holding(self, fund_id: str, data: HoldingUpdate) -> Holding:
        """Edit the user-editable fields of a holding."""
        holdings = self._store.load_holdings()
        index = self._index_of(holdings, fund_id)
        holding = holdings[index]

        shares = data.shares if data.shares is not None else holding.shares
        cost_basis = data.cost_basis if data.cost_basis is not None else holding.cost_basis
        self._validate_position(shares, cost_basis)
        if data.initial_price is not None and data.initial_price < ZERO:
            raise ValidationError(f"Initial price must be >= 0, got {data.initial_price}")

        updated = replace(
            holding,
            name=(data.name.strip() or holding.name) if data.name is not None else holding.name,
            shares=shares,
            cost_basis=cost_basis,
            initial_price=(
                data.initial_price if data.initial_price is not None else holding.initial_price
            ),
            tag=self._clean_tag(data.tag) if data.tag is not None else holding.tag,
            updated_at=self._clock.now().isoformat(),
        )
        holdings[index] = updated
        self._flush_holdings(holdings)
        return updated

    def delete_holding(self, fund_id: str) -> None:
        """Delete a holding; its transactions are kept."""
        holdings = self._store.load_holdings()
        index = self._index_of(holdings, fund_id)
        del holdings[index]
        self._flush_holdings(holdings)
        logger.info("Deleted holding %s", fund_id)

    def clear_all(self) -> None:
        """Delete every holding and transaction."""
        self._store.clear_portfolio()
        self._tracker.record_valuation(ZERO)
        logger.info("Cleared all portfolio data")

    # =========================================================================
    # Prices
    # =========================================================================

    def update_price(self, fund_id: str, price: Decimal) -> Holding:
        """
        Set a manual price for a holding.

        An unchanged price is a no-op. Otherwise the current price becomes
        the previous price and the update time is stamped in market time.
        """
        if price <= ZERO:
            raise ValidationError(f"Price must be > 0, got {price}")

        holdings = self._store.load_holdings()
        index = self._index_of(holdings, fund_id)
        holding = holdings[index]
        if holding.current_price == price:
            return holding

        holdings[index] = self._with_manual_price(holding, price)
        self._flush_holdings(holdings)
        return holdings[index]

    def batch_update_prices(self, updates: dict[str, Decimal]) -> list[Holding]:
        """
        Apply manual prices to several holdings at once.

        Unknown fund ids are skipped. Returns the holdings that changed.
        """
        for fund_id, price in updates.items():
            if price <= ZERO:
                raise ValidationError(f"Price for {fund_id} must be > 0, got {price}")

        holdings = self._store.load_holdings()
        changed: list[Holding] = []
        for index, holding in enumerate(holdings):
            price = updates.get(holding.fund_id)
            if price is None or price == holding.current_price:
                continue
            holdings[index] = self._with_manual_price(holding, price)
            changed.append(holdings[index])

        skipped = set(updates) - {h.fund_id for h in holdings}
        if skipped:
            logger.info("Skipped price updates for unknown holdings: %s", sorted(skipped))

        if changed:
            self._flush_holdings(holdings)
        return changed

    def sync_prices(self) -> SyncSummary:
        """
        Refresh every holding from the quote provider.

        Quotes are fetched concurrently and applied here one by one. A quote
        missing its price or timestamp counts as a failure, as does a failed
        fetch; neither aborts the batch.
        """
        holdings = self._store.load_holdings()
        summary = SyncSummary(synced_at=self._clock.now())
        if not holdings:
            return summary

        batch = self._market_data.fetch_quotes([h.fund_id for h in holdings])
        failed = list(batch.failed_ids)

        for index, holding in enumerate(holdings):
            quote = batch.quotes.get(holding.fund_id)
            if quote is None:
                continue
            synced = self._with_quote(holding, quote)
            if synced is None:
                failed.append(holding.fund_id)
                continue
            holdings[index] = synced
            summary.success_count += 1

        failed_set = set(failed)
        summary.failed_ids = [h.fund_id for h in holdings if h.fund_id in failed_set]
        summary.fail_count = len(summary.failed_ids)
        if summary.success_count:
            self._flush_holdings(holdings)

        logger.info(
            "Synced prices: %d succeeded, %d failed",
            summary.success_count, summary.fail_count,
        )
        return summary

    # =========================================================================
    # Transactions
    # =========================================================================

    def record_transaction(
        self,
        fund_id: str,
        txn_type: TransactionType,
        shares: Decimal,
        price: Decimal,
    ) -> Transaction:
        """Record a buy or sell and update the holding's position."""
        holdings = self._store.load_holdings()
        index = self._index_of(holdings, fund_id)

        updated, transaction = self._engine.apply_transaction(
            holdings[index], txn_type, shares, price
        )
        holdings[index] = updated

        transactions = self._store.load_transactions()
        transactions.insert(0, transaction)
        self._store.save_transactions(transactions)
        self._flush_holdings(holdings)
        return transaction

    def toggle_revert(self, txn_id: str) -> Transaction:
        """Revert an active transaction or restore a reverted one."""
        transactions = self._store.load_transactions()
        txn_index = next(
            (i for i, t in enumerate(transactions) if t.txn_id == txn_id), None
        )
        if txn_index is None:
            raise NotFoundError("Transaction", txn_id)
        transaction = transactions[txn_index]

        holdings = self._store.load_holdings()
        index = self._index_of(holdings, transaction.fund_id)

        updated, toggled = self._engine.toggle_revert(transaction, holdings[index])
        holdings[index] = updated
        transactions[txn_index] = toggled

        self._store.save_transactions(transactions)
        self._flush_holdings(holdings)
        return toggled

    def list_transactions(self, fund_id: Optional[str] = None) -> list[Transaction]:
        """List transactions newest first, optionally for a single fund."""
        transactions = self._store.load_transactions()
        if fund_id is not None:
            transactions = [t for t in transactions if t.fund_id == fund_id]
        return sorted(transactions, key=lambda t: t.txn_time, reverse=True)

    # =========================================================================
    # Recurring contributions
    # =========================================================================

    def update_contributions(self, updates: dict[str, ContributionConfig]) -> list[Holding]:
        """Set the contribution config of several holdings, all or nothing."""
        holdings = self._store.load_holdings()
        self._planner.validate_update(holdings, updates)

        changed = []
        now = self._clock.now().isoformat()
        for index, holding in enumerate(holdings):
            if holding.fund_id in updates:
                holdings[index] = replace(
                    holding, contribution=updates[holding.fund_id], updated_at=now
                )
                changed.append(holdings[index])

        self._flush_holdings(holdings)
        return changed

    def execute_contributions(
        self,
        selected_ids: Optional[Iterable[str]] = None,
        sync_first: bool = True,
    ) -> ExecutionSummary:
        """
        Execute the recurring contributions of the selected holdings.

        With ``sync_first`` quotes are refreshed before planning, so buys use
        the latest prices. Every order is validated before the first buy is
        applied; any invalid entry aborts the whole batch. All selected
        holdings are used when ``selected_ids`` is None; an empty selection
        returns at once without fetching quotes.
        """
        summary = ExecutionSummary()
        if selected_ids is not None:
            selected_ids = list(dict.fromkeys(selected_ids))
            if not selected_ids:
                return summary
        if sync_first:
            summary.sync = self.sync_prices()

        holdings = self._store.load_holdings()
        if selected_ids is None:
            ids = [h.fund_id for h in holdings]
        else:
            ids = selected_ids

        orders = self._planner.plan_execution(holdings, ids)
        summary.skipped_ids = self._planner.skipped_ids(holdings, ids)
        if not orders:
            return summary

        by_id = {h.fund_id: i for i, h in enumerate(holdings)}
        new_transactions: list[Transaction] = []
        for order in orders:
            index = by_id[order.fund_id]
            updated, transaction = self._engine.apply_transaction(
                holdings[index], TransactionType.BUY, order.shares, order.price
            )
            holdings[index] = updated
            new_transactions.append(transaction)
            summary.executed_ids.append(order.fund_id)
            summary.total_invested += order.amount

        transactions = self._store.load_transactions()
        self._store.save_transactions(list(reversed(new_transactions)) + transactions)
        self._flush_holdings(holdings)

        logger.info(
            "Executed %d contributions totalling %s",
            len(summary.executed_ids), summary.total_invested,
        )
        return summary

    # =========================================================================
    # Demo data
    # =========================================================================

    def seed_demo_holdings(self, fund_ids: Iterable[str]) -> list[Holding]:
        """
        Create demo holdings when the portfolio is empty.

        Each fund gets 1000 shares bought at the quoted previous close, or
        at 1 when no usable quote is available.
        """
        if self._store.load_holdings():
            return []

        holdings = []
        now = self._clock.now()
        for fund_id in fund_ids:
            quote = self._market_data.get_quote(fund_id)
            price = DEMO_FALLBACK_PRICE
            if quote is not None:
                if quote.previous_close is not None and quote.previous_close > ZERO:
                    price = quote.previous_close
                elif quote.current_price is not None and quote.current_price > ZERO:
                    price = quote.current_price
            holdings.append(
                Holding(
                    fund_id=fund_id,
                    name=(quote.name if quote and quote.name else fund_id),
                    shares=DEMO_SHARES,
                    cost_basis=price,
                    current_price=price,
                    initial_price=price,
                    price_updated_at=format_price_timestamp(now),
                    created_at=now.isoformat(),
                    updated_at=now.isoformat(),
                )
            )

        self._flush_holdings(holdings)
        logger.info("Seeded %d demo holdings", len(holdings))
        return holdings

    # =========================================================================
    # Private helpers
    # =========================================================================

    def _flush_holdings(self, holdings: list[Holding]) -> None:
        self._store.save_holdings(holdings)
        total_value = sum((h.market_value for h in holdings), ZERO)
        self._tracker.record_valuation(total_value)

    @staticmethod
    def _index_of(holdings: list[Holding], fund_id: str) -> int:
        for index, holding in enumerate(holdings):
            if holding.fund_id == fund_id:
                return index
        raise HoldingNotFoundError(fund_id)

    @staticmethod
    def _validate_position(shares: Decimal, cost_basis: Decimal) -> None:
        if shares < ZERO:
            raise ValidationError(f"Shares must be >= 0, got {shares}")
        if cost_basis < ZERO:
            raise ValidationError(f"Cost basis must be >= 0, got {cost_basis}")

    @staticmethod
    def _clean_tag(tag: Optional[str]) -> Optional[str]:
        if tag is None:
            return None
        return tag.strip() or None

    @staticmethod
    def _normalize_timestamp(value: Optional[str]) -> Optional[str]:
        try:
            return normalize_price_timestamp(value)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    def _with_manual_price(self, holding: Holding, price: Decimal) -> Holding:
        now = self._clock.now()
        return replace(
            holding,
            previous_price=holding.current_price,
            current_price=price,
            price_updated_at=format_price_timestamp(now),
            updated_at=now.isoformat(),
        )

    def _with_quote(self, holding: Holding, quote: Quote) -> Optional[Holding]:
        """Apply a fetched quote; None when the quote cannot be used."""
        if quote.current_price is None or quote.current_price <= ZERO or not quote.as_of:
            logger.info("Incomplete quote for %s", holding.fund_id)
            return None
        try:
            timestamp = normalize_price_timestamp(quote.as_of)
        except ValueError:
            logger.warning("Unparseable quote timestamp for %s: %s", holding.fund_id, quote.as_of)
            return None

        previous_price = holding.previous_price
        if quote.previous_close is not None and quote.previous_close > ZERO:
            previous_price = quote.previous_close
        elif quote.current_price != holding.current_price:
            previous_price = holding.current_price

        return replace(
            holding,
            name=holding.name or quote.name or holding.fund_id,
            current_price=quote.current_price,
            previous_price=previous_price,
            price_updated_at=timestamp,
            change_percent=quote.change_percent,
            updated_at=self._clock.now().isoformat(),
        )

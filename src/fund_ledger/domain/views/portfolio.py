"""View models for service outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Quote:
    """Quote for one fund as returned by a quote provider."""

    fund_id: str
    name: Optional[str]
    current_price: Optional[Decimal]
    previous_close: Optional[Decimal] = None
    change_percent: Optional[Decimal] = None
    as_of: Optional[str] = None  # provider timestamp, ISO-8601 or "YYYY-MM-DD HH:mm"


@dataclass
class PortfolioStatistics:
    """Portfolio-level totals derived from the holdings snapshot."""

    total_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost: Decimal = field(default_factory=lambda: Decimal("0"))
    total_profit: Decimal = field(default_factory=lambda: Decimal("0"))
    total_profit_rate: Decimal = field(default_factory=lambda: Decimal("0"))
    today_profit: Decimal = field(default_factory=lambda: Decimal("0"))
    today_profit_rate: Decimal = field(default_factory=lambda: Decimal("0"))
    fund_count: int = 0


@dataclass
class PriceChange:
    """Absolute and percentage change between two prices."""

    change: Decimal
    change_rate: Decimal


@dataclass
class AllocationItem:
    """Share of total value held under one tag."""

    tag: str
    market_value: Decimal
    percentage: Decimal


@dataclass
class AllocationView:
    """Portfolio allocation breakdown by tag."""

    items: list[AllocationItem] = field(default_factory=list)
    total_value: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class TagDailyChange:
    """Daily change of the holdings under one tag."""

    tag: str
    profit: Decimal
    profit_rate: Decimal


@dataclass
class DailyChangeView:
    """Per-tag daily change: gainers first, then losers."""

    items: list[TagDailyChange] = field(default_factory=list)
    total_gain: Decimal = field(default_factory=lambda: Decimal("0"))
    total_loss: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def net_profit(self) -> Decimal:
        return self.total_gain - self.total_loss


@dataclass
class SyncSummary:
    """Outcome of a batch quote refresh."""

    success_count: int = 0
    fail_count: int = 0
    failed_ids: list[str] = field(default_factory=list)
    synced_at: Optional[datetime] = None


@dataclass
class ContributionOrder:
    """Validated buy produced by the contribution planner."""

    fund_id: str
    amount: Decimal
    price: Decimal
    shares: Decimal


@dataclass
class ExecutionSummary:
    """Outcome of executing recurring contributions."""

    executed_ids: list[str] = field(default_factory=list)
    skipped_ids: list[str] = field(default_factory=list)
    total_invested: Decimal = field(default_factory=lambda: Decimal("0"))
    sync: Optional[SyncSummary] = None


@dataclass
class ImportSummary:
    """Summary of a JSON import."""

    fund_count: int = 0
    transaction_count: int = 0
    replaced_funds: bool = False
    replaced_transactions: bool = False

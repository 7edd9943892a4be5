"""Holding and ContributionConfig domain models."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from fund_ledger.domain.models.enums import ContributionFrequency


@dataclass(frozen=True)
class ContributionConfig:
    """Recurring contribution: buy ``amount`` of money every ``frequency``."""

    frequency: ContributionFrequency = ContributionFrequency.DAILY
    amount: Decimal = field(default_factory=lambda: Decimal("0"))

    def __post_init__(self) -> None:
        if isinstance(self.frequency, str):
            object.__setattr__(self, "frequency", ContributionFrequency(self.frequency))

    @property
    def is_active(self) -> bool:
        """Return True if a positive amount is configured."""
        return self.amount > 0


@dataclass
class Holding:
    """
    Tracked fund position.

    Shares and cost basis are only changed through the ledger engine so the
    weighted-average cost stays consistent with the transaction list.
    Cost basis carries no meaning while shares == 0.
    """

    fund_id: str
    name: str
    shares: Decimal = field(default_factory=lambda: Decimal("0"))
    cost_basis: Decimal = field(default_factory=lambda: Decimal("0"))
    current_price: Decimal = field(default_factory=lambda: Decimal("0"))
    previous_price: Optional[Decimal] = None  # price before the last update
    initial_price: Optional[Decimal] = None  # cost basis fallback when emptied by a revert
    price_updated_at: Optional[str] = None  # "YYYY-MM-DD HH:mm", UTC+8
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    contribution: Optional[ContributionConfig] = None
    tag: Optional[str] = None
    change_percent: Optional[Decimal] = None

    @property
    def market_value(self) -> Decimal:
        return self.shares * self.current_price

    @property
    def total_cost(self) -> Decimal:
        return self.shares * self.cost_basis

    @property
    def has_daily_reference(self) -> bool:
        """
        Return True if the previous price can be used for the daily change.

        The previous price must be known, positive and different from the
        current price.
        """
        return (
            self.previous_price is not None
            and self.previous_price > 0
            and self.previous_price != self.current_price
        )

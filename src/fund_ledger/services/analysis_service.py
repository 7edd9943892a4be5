"""Portfolio statistics and analytics."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from fund_ledger.core.money import ZERO, percent_of, round_money
from fund_ledger.domain.models import Holding
from fund_ledger.domain.views import (
    AllocationItem,
    AllocationView,
    DailyChangeView,
    PortfolioStatistics,
    PriceChange,
    TagDailyChange,
)
from fund_ledger.repositories.portfolio_store import PortfolioStore

UNTAGGED = "Untagged"


def holding_profit(holding: Holding) -> Decimal:
    """Unrealized profit: market value minus cost."""
    return holding.market_value - holding.total_cost


def holding_profit_rate(holding: Holding) -> Decimal:
    """Unrealized profit as a percentage of cost (0 when cost is 0)."""
    return percent_of(holding_profit(holding), holding.total_cost)


def price_change_since_initial(holding: Holding) -> PriceChange:
    """Change of the current price against the recorded initial price."""
    if not holding.initial_price:
        return PriceChange(change=ZERO, change_rate=ZERO)
    change = holding.current_price - holding.initial_price
    return PriceChange(change=change, change_rate=percent_of(change, holding.initial_price))


def daily_change(holding: Holding) -> Optional[PriceChange]:
    """
    Change of the current price against the previous price.

    None when the previous price is unknown, non-positive or equal to the
    current price.
    """
    if not holding.has_daily_reference:
        return None
    change = holding.current_price - holding.previous_price
    return PriceChange(change=change, change_rate=percent_of(change, holding.previous_price))


def compute_statistics(holdings: Iterable[Holding]) -> PortfolioStatistics:
    """
    Derive portfolio totals from a holdings snapshot.

    Daily profit only counts holdings with a usable previous price, and those
    same holdings form the denominator of the daily rate, so a holding
    without one neither helps nor hurts the daily figure.
    """
    holdings = list(holdings)
    total_value = sum((h.market_value for h in holdings), ZERO)
    total_cost = sum((h.total_cost for h in holdings), ZERO)
    total_profit = total_value - total_cost

    today_profit = ZERO
    previous_value = ZERO
    for holding in holdings:
        if not holding.has_daily_reference:
            continue
        today_profit += (holding.current_price - holding.previous_price) * holding.shares
        previous_value += holding.previous_price * holding.shares

    return PortfolioStatistics(
        total_value=total_value,
        total_cost=total_cost,
        total_profit=total_profit,
        total_profit_rate=percent_of(total_profit, total_cost),
        today_profit=today_profit,
        today_profit_rate=percent_of(today_profit, previous_value),
        fund_count=len(holdings),
    )


def _tag_of(holding: Holding) -> str:
    tag = (holding.tag or "").strip()
    return tag or UNTAGGED


def allocation_by_tag(holdings: Iterable[Holding]) -> AllocationView:
    """Share of total market value per tag, largest first."""
    values: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for holding in holdings:
        values[_tag_of(holding)] += holding.market_value

    total_value = sum(values.values(), ZERO)
    items = [
        AllocationItem(
            tag=tag,
            market_value=round_money(value),
            percentage=round_money(percent_of(value, total_value)),
        )
        for tag, value in values.items()
    ]
    items.sort(key=lambda x: x.percentage, reverse=True)
    return AllocationView(items=items, total_value=round_money(total_value))


def daily_change_by_tag(holdings: Iterable[Holding]) -> DailyChangeView:
    """
    Daily change per tag over holdings with a usable previous price.

    Gainers come first ordered by profit, then losers ordered by the size of
    the loss. Flat tags are left out.
    """
    current: dict[str, Decimal] = defaultdict(lambda: ZERO)
    previous: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for holding in holdings:
        if not holding.has_daily_reference:
            continue
        tag = _tag_of(holding)
        current[tag] += holding.shares * holding.current_price
        previous[tag] += holding.shares * holding.previous_price

    gainers: list[TagDailyChange] = []
    losers: list[TagDailyChange] = []
    for tag, value in current.items():
        profit = value - previous[tag]
        item = TagDailyChange(
            tag=tag,
            profit=profit,
            profit_rate=percent_of(profit, previous[tag]),
        )
        if profit > ZERO:
            gainers.append(item)
        elif profit < ZERO:
            losers.append(item)

    gainers.sort(key=lambda x: x.profit, reverse=True)
    losers.sort(key=lambda x: abs(x.profit), reverse=True)
    return DailyChangeView(
        items=gainers + losers,
        total_gain=sum((g.profit for g in gainers), ZERO),
        total_loss=sum((abs(item.profit) for item in losers), ZERO),
    )


class AnalysisService:
    """
    Service for portfolio analytics over the stored holdings.

    The computations are the pure functions above; this class only loads
    the current holdings for them.
    """

    def __init__(self, store: PortfolioStore):
        self._store = store

    def statistics(self) -> PortfolioStatistics:
        return compute_statistics(self._store.load_holdings())

    def summary(self) -> PortfolioStatistics:
        """Statistics with money and rate fields rounded to 2 places."""
        stats = self.statistics()
        return PortfolioStatistics(
            total_value=round_money(stats.total_value),
            total_cost=round_money(stats.total_cost),
            total_profit=round_money(stats.total_profit),
            total_profit_rate=round_money(stats.total_profit_rate),
            today_profit=round_money(stats.today_profit),
            today_profit_rate=round_money(stats.today_profit_rate),
            fund_count=stats.fund_count,
        )

    def allocation(self) -> AllocationView:
        return allocation_by_tag(self._store.load_holdings())

    def daily_change(self) -> DailyChangeView:
        return daily_change_by_tag(self._store.load_holdings())

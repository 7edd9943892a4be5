"""View models for service outputs."""

from fund_ledger.domain.views.portfolio import (
    Quote,
    PortfolioStatistics,
    PriceChange,
    AllocationItem,
    AllocationView,
    TagDailyChange,
    DailyChangeView,
    SyncSummary,
    ContributionOrder,
    ExecutionSummary,
    ImportSummary,
)

__all__ = [
    "Quote",
    "PortfolioStatistics",
    "PriceChange",
    "AllocationItem",
    "AllocationView",
    "TagDailyChange",
    "DailyChangeView",
    "SyncSummary",
    "ContributionOrder",
    "ExecutionSummary",
    "ImportSummary",
]

"""Service layer - business logic orchestration."""

from fund_ledger.services.ledger_engine import LedgerEngine, weighted_cost
from fund_ledger.services.valuation_tracker import ValuationSnapshotTracker, roll_snapshot
from fund_ledger.services.analysis_service import AnalysisService, compute_statistics
from fund_ledger.services.contribution_planner import ContributionPlanner
from fund_ledger.services.market_data_service import MarketDataService, QuoteBatch
from fund_ledger.services.portfolio_service import (
    HoldingCreate,
    HoldingUpdate,
    PortfolioService,
)

__all__ = [
    "LedgerEngine",
    "weighted_cost",
    "ValuationSnapshotTracker",
    "roll_snapshot",
    "AnalysisService",
    "compute_statistics",
    "ContributionPlanner",
    "MarketDataService",
    "QuoteBatch",
    "HoldingCreate",
    "HoldingUpdate",
    "PortfolioService",
]

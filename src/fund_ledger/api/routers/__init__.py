"""API routers package."""

from fund_ledger.api.routers.holdings import router as holdings_router
from fund_ledger.api.routers.transactions import router as transactions_router
from fund_ledger.api.routers.contributions import router as contributions_router
from fund_ledger.api.routers.analysis import router as analysis_router
from fund_ledger.api.routers.data import router as data_router

__all__ = [
    "holdings_router",
    "transactions_router",
    "contributions_router",
    "analysis_router",
    "data_router",
]

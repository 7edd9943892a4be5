"""Transaction endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from fund_ledger.api.deps import get_portfolio_service
from fund_ledger.api.schemas import (
    TransactionCreateRequest,
    TransactionListResponse,
    TransactionResponse,
)
from fund_ledger.api.schemas.transaction import to_response
from fund_ledger.services import PortfolioService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def record_transaction(
    data: TransactionCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> TransactionResponse:
    """Record a buy or sell against a holding."""
    transaction = service.record_transaction(
        fund_id=data.fund_id,
        txn_type=data.txn_type,
        shares=data.shares,
        price=data.price,
    )
    return to_response(transaction)


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    fund_id: Optional[str] = Query(None, description="Only this fund's transactions"),
    service: PortfolioService = Depends(get_portfolio_service),
) -> TransactionListResponse:
    """List transactions, newest first."""
    transactions = service.list_transactions(fund_id=fund_id)
    return TransactionListResponse(
        transactions=[to_response(t) for t in transactions],
        count=len(transactions),
    )


@router.post("/{txn_id}/toggle-revert", response_model=TransactionResponse)
def toggle_revert(
    txn_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> TransactionResponse:
    """Revert an active transaction or restore a reverted one."""
    return to_response(service.toggle_revert(txn_id))

"""Recurring contribution endpoints."""

from fastapi import APIRouter, Depends

from fund_ledger.api.deps import get_portfolio_service
from fund_ledger.api.schemas import (
    ContributionExecuteRequest,
    ContributionUpdateRequest,
    ExecutionSummaryResponse,
    HoldingListResponse,
    HoldingResponse,
)
from fund_ledger.services import PortfolioService

router = APIRouter(prefix="/contributions", tags=["contributions"])


@router.put("", response_model=HoldingListResponse)
def update_contributions(
    data: ContributionUpdateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingListResponse:
    """Set the contribution config of several holdings."""
    changed = service.update_contributions(
        {fund_id: config.to_domain() for fund_id, config in data.contributions.items()}
    )
    return HoldingListResponse(
        holdings=[HoldingResponse.from_domain(h) for h in changed],
        count=len(changed),
    )


@router.post("/execute", response_model=ExecutionSummaryResponse)
def execute_contributions(
    data: ContributionExecuteRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> ExecutionSummaryResponse:
    """Execute recurring contributions as buys at current prices."""
    summary = service.execute_contributions(
        selected_ids=data.fund_ids,
        sync_first=data.sync_first,
    )
    return ExecutionSummaryResponse.model_validate(summary)

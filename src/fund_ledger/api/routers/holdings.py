"""Holding management endpoints."""

from fastapi import APIRouter, Depends

from fund_ledger.api.deps import get_portfolio_service
from fund_ledger.api.schemas import (
    BatchPriceUpdateRequest,
    HoldingCreateRequest,
    HoldingListResponse,
    HoldingResponse,
    HoldingUpdateRequest,
    PriceUpdateRequest,
    SyncSummaryResponse,
)
from fund_ledger.services import HoldingCreate, HoldingUpdate, PortfolioService

router = APIRouter(prefix="/holdings", tags=["holdings"])


@router.get("", response_model=HoldingListResponse)
def list_holdings(
    service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingListResponse:
    """List all holdings."""
    holdings = service.list_holdings()
    return HoldingListResponse(
        holdings=[HoldingResponse.from_domain(h) for h in holdings],
        count=len(holdings),
    )


@router.post("", response_model=HoldingResponse, status_code=201)
def add_holding(
    data: HoldingCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingResponse:
    """Add a new holding."""
    holding = service.add_holding(
        HoldingCreate(
            fund_id=data.fund_id,
            name=data.name,
            shares=data.shares,
            cost_basis=data.cost_basis,
            current_price=data.current_price,
            initial_price=data.initial_price,
            price_updated_at=data.price_updated_at,
            contribution=data.contribution.to_domain() if data.contribution else None,
            tag=data.tag,
        )
    )
    return HoldingResponse.from_domain(holding)


# Registered before the /{fund_id} routes so the paths are not taken as ids
@router.post("/prices", response_model=HoldingListResponse)
def batch_update_prices(
    data: BatchPriceUpdateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingListResponse:
    """Set manual prices for several holdings; returns those that changed."""
    changed = service.batch_update_prices(data.prices)
    return HoldingListResponse(
        holdings=[HoldingResponse.from_domain(h) for h in changed],
        count=len(changed),
    )


@router.post("/sync", response_model=SyncSummaryResponse)
def sync_prices(
    service: PortfolioService = Depends(get_portfolio_service),
) -> SyncSummaryResponse:
    """Refresh every holding from the quote provider."""
    return SyncSummaryResponse.model_validate(service.sync_prices())


@router.delete("", status_code=204)
def clear_all(
    service: PortfolioService = Depends(get_portfolio_service),
) -> None:
    """Delete every holding and transaction."""
    service.clear_all()


@router.get("/{fund_id}", response_model=HoldingResponse)
def get_holding(
    fund_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingResponse:
    """Get a holding by fund id."""
    return HoldingResponse.from_domain(service.get_holding(fund_id))


@router.patch("/{fund_id}", response_model=HoldingResponse)
def update_holding(
    fund_id: str,
    data: HoldingUpdateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingResponse:
    """Edit a holding (partial update)."""
    holding = service.update_holding(
        fund_id,
        HoldingUpdate(
            name=data.name,
            shares=data.shares,
            cost_basis=data.cost_basis,
            initial_price=data.initial_price,
            tag=data.tag,
        ),
    )
    return HoldingResponse.from_domain(holding)


@router.delete("/{fund_id}", status_code=204)
def delete_holding(
    fund_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> None:
    """Delete a holding; its transactions are kept."""
    service.delete_holding(fund_id)


@router.put("/{fund_id}/price", response_model=HoldingResponse)
def update_price(
    fund_id: str,
    data: PriceUpdateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingResponse:
    """Set a manual price for a holding."""
    return HoldingResponse.from_domain(service.update_price(fund_id, data.price))

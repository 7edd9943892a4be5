"""Portfolio analysis endpoints."""

from fastapi import APIRouter, Depends

from fund_ledger.api.deps import get_analysis_service, get_tracker
from fund_ledger.api.schemas import (
    AllocationResponse,
    DailyChangeResponse,
    SnapshotResponse,
    StatisticsResponse,
    TagDailyChangeResponse,
)
from fund_ledger.services import AnalysisService, ValuationSnapshotTracker

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.get("/statistics", response_model=StatisticsResponse)
def get_statistics(
    analysis: AnalysisService = Depends(get_analysis_service),
) -> StatisticsResponse:
    """Get portfolio totals and today's profit."""
    return StatisticsResponse.model_validate(analysis.summary())


@router.get("/allocation", response_model=AllocationResponse)
def get_allocation(
    analysis: AnalysisService = Depends(get_analysis_service),
) -> AllocationResponse:
    """Get market value allocation by tag."""
    return AllocationResponse.model_validate(analysis.allocation())


@router.get("/daily-change", response_model=DailyChangeResponse)
def get_daily_change(
    analysis: AnalysisService = Depends(get_analysis_service),
) -> DailyChangeResponse:
    """Get today's change per tag, gainers first."""
    view = analysis.daily_change()
    return DailyChangeResponse(
        items=[TagDailyChangeResponse.model_validate(item) for item in view.items],
        total_gain=view.total_gain,
        total_loss=view.total_loss,
        net_profit=view.net_profit,
    )


@router.get("/snapshot", response_model=SnapshotResponse)
def get_snapshot(
    tracker: ValuationSnapshotTracker = Depends(get_tracker),
) -> SnapshotResponse:
    """Get the stored today/yesterday total values."""
    snapshot = tracker.snapshot()
    return SnapshotResponse(
        today_total_value=snapshot.today_total_value,
        yesterday_total_value=snapshot.yesterday_total_value,
        last_update_date=snapshot.last_update_date,
        change_since_yesterday=tracker.change_since_yesterday(),
    )

"""Pydantic schemas for recurring contribution endpoints."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fund_ledger.api.schemas.holding import ContributionSchema, SyncSummaryResponse


class ContributionUpdateRequest(BaseModel):
    """Request schema for setting contribution configs."""

    contributions: dict[str, ContributionSchema] = Field(
        ..., description="fund_id -> contribution config"
    )


class ContributionExecuteRequest(BaseModel):
    """Request schema for executing recurring contributions."""

    fund_ids: Optional[list[str]] = Field(
        default=None, description="Holdings to execute; all when omitted"
    )
    sync_first: bool = Field(default=True, description="Refresh quotes before buying")


class ExecutionSummaryResponse(BaseModel):
    """Response schema for executed contributions."""

    model_config = {"from_attributes": True}

    executed_ids: list[str]
    skipped_ids: list[str]
    total_invested: Decimal
    sync: Optional[SyncSummaryResponse] = None

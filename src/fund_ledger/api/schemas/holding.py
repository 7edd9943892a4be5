"""Pydantic schemas for holding endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fund_ledger.domain.models import ContributionConfig, ContributionFrequency, Holding
from fund_ledger.services.analysis_service import (
    daily_change,
    holding_profit,
    holding_profit_rate,
)


class ContributionSchema(BaseModel):
    """Recurring contribution config."""

    frequency: ContributionFrequency = ContributionFrequency.DAILY
    amount: Decimal = Field(default=Decimal("0"), ge=0, description="Money per contribution")

    def to_domain(self) -> ContributionConfig:
        return ContributionConfig(frequency=self.frequency, amount=self.amount)


class HoldingCreateRequest(BaseModel):
    """Request schema for adding a holding."""

    fund_id: str = Field(..., min_length=1, max_length=20, description="Fund code")
    name: str = Field(default="", max_length=100)
    shares: Decimal = Field(default=Decimal("0"), ge=0)
    cost_basis: Decimal = Field(default=Decimal("0"), ge=0, description="Average cost per share")
    current_price: Optional[Decimal] = Field(
        default=None, ge=0, description="Defaults to the cost basis"
    )
    initial_price: Optional[Decimal] = Field(default=None, ge=0)
    price_updated_at: Optional[str] = Field(
        default=None, description="'YYYY-MM-DD HH:mm' (UTC+8) or ISO-8601"
    )
    contribution: Optional[ContributionSchema] = None
    tag: Optional[str] = Field(default=None, max_length=50)

    @field_validator("fund_id")
    @classmethod
    def strip_fund_id(cls, v: str) -> str:
        return v.strip()


class HoldingUpdateRequest(BaseModel):
    """Request schema for editing a holding (partial update)."""

    name: Optional[str] = Field(default=None, max_length=100)
    shares: Optional[Decimal] = Field(default=None, ge=0)
    cost_basis: Optional[Decimal] = Field(default=None, ge=0)
    initial_price: Optional[Decimal] = Field(default=None, ge=0)
    tag: Optional[str] = Field(default=None, max_length=50)


class PriceUpdateRequest(BaseModel):
    """Request schema for a manual price update."""

    price: Decimal


class BatchPriceUpdateRequest(BaseModel):
    """Request schema for manual price updates of several holdings."""

    prices: dict[str, Decimal] = Field(..., description="fund_id -> new price")


class HoldingResponse(BaseModel):
    """Response schema for a single holding with derived figures."""

    fund_id: str
    name: str
    shares: Decimal
    cost_basis: Decimal
    current_price: Decimal
    previous_price: Optional[Decimal] = None
    initial_price: Optional[Decimal] = None
    price_updated_at: Optional[str] = None
    change_percent: Optional[Decimal] = None
    contribution: Optional[ContributionSchema] = None
    tag: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    market_value: Decimal
    total_cost: Decimal
    profit: Decimal
    profit_rate: Decimal
    daily_change: Optional[Decimal] = None
    daily_change_rate: Optional[Decimal] = None

    @classmethod
    def from_domain(cls, holding: Holding) -> "HoldingResponse":
        change = daily_change(holding)
        contribution = None
        if holding.contribution is not None:
            contribution = ContributionSchema(
                frequency=holding.contribution.frequency,
                amount=holding.contribution.amount,
            )
        return cls(
            fund_id=holding.fund_id,
            name=holding.name,
            shares=holding.shares,
            cost_basis=holding.cost_basis,
            current_price=holding.current_price,
            previous_price=holding.previous_price,
            initial_price=holding.initial_price,
            price_updated_at=holding.price_updated_at,
            change_percent=holding.change_percent,
            contribution=contribution,
            tag=holding.tag,
            created_at=holding.created_at,
            updated_at=holding.updated_at,
            market_value=holding.market_value,
            total_cost=holding.total_cost,
            profit=holding_profit(holding),
            profit_rate=holding_profit_rate(holding),
            daily_change=change.change if change else None,
            daily_change_rate=change.change_rate if change else None,
        )


class HoldingListResponse(BaseModel):
    """Response schema for listing holdings."""

    holdings: list[HoldingResponse]
    count: int


class SyncSummaryResponse(BaseModel):
    """Response schema for a quote refresh."""

    model_config = {"from_attributes": True}

    success_count: int
    fail_count: int
    failed_ids: list[str]
    synced_at: Optional[datetime] = None

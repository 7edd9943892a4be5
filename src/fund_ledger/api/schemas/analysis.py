"""Pydantic schemas for analysis endpoints."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class StatisticsResponse(BaseModel):
    """Response schema for portfolio statistics (rounded to 2 places)."""

    model_config = {"from_attributes": True}

    total_value: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_profit_rate: Decimal
    today_profit: Decimal
    today_profit_rate: Decimal
    fund_count: int


class AllocationItemResponse(BaseModel):
    """Response schema for a single allocation item."""

    model_config = {"from_attributes": True}

    tag: str
    market_value: Decimal
    percentage: Decimal


class AllocationResponse(BaseModel):
    """Response schema for allocation breakdown."""

    model_config = {"from_attributes": True}

    items: list[AllocationItemResponse]
    total_value: Decimal


class TagDailyChangeResponse(BaseModel):
    """Response schema for one tag's daily change."""

    model_config = {"from_attributes": True}

    tag: str
    profit: Decimal
    profit_rate: Decimal


class DailyChangeResponse(BaseModel):
    """Response schema for per-tag daily change."""

    items: list[TagDailyChangeResponse]
    total_gain: Decimal
    total_loss: Decimal
    net_profit: Decimal


class SnapshotResponse(BaseModel):
    """Response schema for the stored valuation snapshot."""

    today_total_value: Optional[Decimal] = None
    yesterday_total_value: Optional[Decimal] = None
    last_update_date: Optional[date] = None
    change_since_yesterday: Optional[Decimal] = None

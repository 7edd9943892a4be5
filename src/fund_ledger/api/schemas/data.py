"""Pydantic schemas for import/export endpoints."""

from pydantic import BaseModel


class ImportSummaryResponse(BaseModel):
    """Response schema for JSON import results."""

    model_config = {"from_attributes": True}

    fund_count: int
    transaction_count: int
    replaced_funds: bool
    replaced_transactions: bool


class BackupResponse(BaseModel):
    """Response schema for a backup written to the export directory."""

    path: str

"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fund_ledger.domain.models import Transaction, TransactionType


class TransactionCreateRequest(BaseModel):
    """
    Request schema for recording a buy or sell.

    Quantities are checked by the ledger engine so that non-positive values
    surface as INVALID_QUANTITY errors.
    """

    fund_id: str = Field(..., min_length=1, description="Fund code")
    txn_type: TransactionType = Field(..., description="buy or sell")
    shares: Decimal = Field(..., description="Number of shares")
    price: Decimal = Field(..., description="Price per share")


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    txn_id: str
    fund_id: str
    fund_name: Optional[str] = None
    txn_type: TransactionType
    shares: Decimal
    price: Decimal
    amount: Decimal
    txn_time: datetime
    reverted: bool


class TransactionListResponse(BaseModel):
    """Response schema for listing transactions."""

    transactions: list[TransactionResponse]
    count: int


def to_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse.model_validate(transaction)

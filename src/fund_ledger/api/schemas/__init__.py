"""Pydantic schemas for API request/response."""

from fund_ledger.api.schemas.holding import (
    ContributionSchema,
    HoldingCreateRequest,
    HoldingUpdateRequest,
    PriceUpdateRequest,
    BatchPriceUpdateRequest,
    HoldingResponse,
    HoldingListResponse,
    SyncSummaryResponse,
)
from fund_ledger.api.schemas.transaction import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from fund_ledger.api.schemas.contribution import (
    ContributionUpdateRequest,
    ContributionExecuteRequest,
    ExecutionSummaryResponse,
)
from fund_ledger.api.schemas.analysis import (
    StatisticsResponse,
    AllocationItemResponse,
    AllocationResponse,
    TagDailyChangeResponse,
    DailyChangeResponse,
    SnapshotResponse,
)
from fund_ledger.api.schemas.data import BackupResponse, ImportSummaryResponse

__all__ = [
    "ContributionSchema",
    "HoldingCreateRequest",
    "HoldingUpdateRequest",
    "PriceUpdateRequest",
    "BatchPriceUpdateRequest",
    "HoldingResponse",
    "HoldingListResponse",
    "SyncSummaryResponse",
    "TransactionCreateRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "ContributionUpdateRequest",
    "ContributionExecuteRequest",
    "ExecutionSummaryResponse",
    "StatisticsResponse",
    "AllocationItemResponse",
    "AllocationResponse",
    "TagDailyChangeResponse",
    "DailyChangeResponse",
    "SnapshotResponse",
    "ImportSummaryResponse",
    "BackupResponse",
]

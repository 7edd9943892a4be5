"""Domain layer - pure business models with no external dependencies."""

from fund_ledger.domain.models import (
    Holding,
    ContributionConfig,
    Transaction,
    ValuationSnapshot,
    TransactionType,
    ContributionFrequency,
)

__all__ = [
    "Holding",
    "ContributionConfig",
    "Transaction",
    "ValuationSnapshot",
    "TransactionType",
    "ContributionFrequency",
]

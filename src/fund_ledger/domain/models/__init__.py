"""Domain models package."""

from fund_ledger.domain.models.enums import TransactionType, ContributionFrequency
from fund_ledger.domain.models.holding import Holding, ContributionConfig
from fund_ledger.domain.models.transaction import Transaction
from fund_ledger.domain.models.snapshot import ValuationSnapshot

__all__ = [
    "TransactionType",
    "ContributionFrequency",
    "Holding",
    "ContributionConfig",
    "Transaction",
    "ValuationSnapshot",
]

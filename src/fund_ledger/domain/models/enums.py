"""Enumerations for domain models."""

from enum import Enum


class TransactionType(str, Enum):
    """Kinds of ledger transactions."""

    BUY = "buy"
    SELL = "sell"


class ContributionFrequency(str, Enum):
    """Cadence of a recurring contribution."""

    DAILY = "daily"  # only cadence that can be auto-executed
    WEEKLY = "weekly"
    MONTHLY = "monthly"

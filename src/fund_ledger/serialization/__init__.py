"""JSON record codec shared by the store and the import/export payloads."""

from fund_ledger.serialization.legacy import (
    parse_contribution,
    parse_frequency,
    parse_amount,
)
from fund_ledger.serialization.records import (
    FundRecord,
    TransactionRecord,
    EXPORT_FUND_FIELDS,
    holding_from_record,
    holding_to_record,
    transaction_from_record,
    transaction_to_record,
)

__all__ = [
    "parse_contribution",
    "parse_frequency",
    "parse_amount",
    "FundRecord",
    "TransactionRecord",
    "EXPORT_FUND_FIELDS",
    "holding_from_record",
    "holding_to_record",
    "transaction_from_record",
    "transaction_to_record",
]

"""JSON import functionality."""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from fund_ledger.core.exceptions import ValidationError
from fund_ledger.domain.models import Holding, Transaction
from fund_ledger.domain.views import ImportSummary
from fund_ledger.repositories.portfolio_store import PortfolioStore
from fund_ledger.serialization import holding_from_record, transaction_from_record
from fund_ledger.services.valuation_tracker import ValuationSnapshotTracker

logger = logging.getLogger(__name__)

FUNDS_FIELD = "funds"
TRANSACTIONS_FIELD = "transactions"


class JsonImporter:
    """
    JSON importer for holdings and transactions.

    Each list present in the payload replaces the stored list wholesale; a
    list that is absent leaves the stored one untouched. The payload is
    fully parsed before anything is written, so a bad record aborts the
    whole import.
    """

    def __init__(
        self,
        store: PortfolioStore,
        tracker: Optional[ValuationSnapshotTracker] = None,
    ):
        self._store = store
        self._tracker = tracker

    def import_json(self, text: str) -> ImportSummary:
        """Import a JSON payload string."""
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e
        return self.import_payload(payload)

    def import_file(self, path: str) -> ImportSummary:
        """Import a JSON payload from a file."""
        file_path = Path(path)
        if not file_path.exists():
            raise ValidationError(f"File not found: {path}")
        return self.import_json(file_path.read_text(encoding="utf-8"))

    def import_payload(self, payload: Any) -> ImportSummary:
        """Import an already decoded payload."""
        if not isinstance(payload, dict):
            raise ValidationError("Import payload must be a JSON object")
        if FUNDS_FIELD not in payload and TRANSACTIONS_FIELD not in payload:
            raise ValidationError("Import payload has neither funds nor transactions")

        holdings = self._parse_funds(payload[FUNDS_FIELD]) if FUNDS_FIELD in payload else None
        transactions = (
            self._parse_transactions(payload[TRANSACTIONS_FIELD])
            if TRANSACTIONS_FIELD in payload
            else None
        )

        summary = ImportSummary()
        if holdings is not None:
            self._store.save_holdings(holdings)
            summary.fund_count = len(holdings)
            summary.replaced_funds = True
        if transactions is not None:
            self._store.save_transactions(transactions)
            summary.transaction_count = len(transactions)
            summary.replaced_transactions = True

        if self._tracker is not None and holdings is not None:
            total_value = sum((h.market_value for h in holdings), Decimal("0"))
            self._tracker.record_valuation(total_value)

        logger.info(
            "Imported %d funds and %d transactions",
            summary.fund_count, summary.transaction_count,
        )
        return summary

    @staticmethod
    def _parse_funds(raw: Any) -> list[Holding]:
        if not isinstance(raw, list):
            raise ValidationError(f"'{FUNDS_FIELD}' must be a list")
        holdings = [holding_from_record(r) for r in raw]
        seen: set[str] = set()
        for holding in holdings:
            if holding.fund_id in seen:
                raise ValidationError(f"Duplicate fund id in import: {holding.fund_id}")
            seen.add(holding.fund_id)
        return holdings

    @staticmethod
    def _parse_transactions(raw: Any) -> list[Transaction]:
        if not isinstance(raw, list):
            raise ValidationError(f"'{TRANSACTIONS_FIELD}' must be a list")
        transactions = [transaction_from_record(r) for r in raw]
        return sorted(transactions, key=lambda t: t.txn_time, reverse=True)

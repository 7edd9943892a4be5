"""JSON export functionality."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from fund_ledger.core.timezone import to_market
from fund_ledger.repositories.portfolio_store import PortfolioStore
from fund_ledger.serialization import holding_to_record, transaction_to_record

logger = logging.getLogger(__name__)


class JsonExporter:
    """
    JSON exporter for holdings and transactions.

    Produces the ``{"funds": [...], "transactions": [...]}`` payload used
    for backup and transfer. Transient fields such as the previous price are
    left out of fund records.
    """

    def __init__(self, store: PortfolioStore):
        self._store = store

    def build_payload(self) -> dict[str, Any]:
        """Return the export payload as plain JSON-compatible data."""
        return {
            "funds": [holding_to_record(h, export=True) for h in self._store.load_holdings()],
            "transactions": [
                transaction_to_record(t, export=True) for t in self._store.load_transactions()
            ],
        }

    def export_json(self) -> str:
        """Return the export payload as a JSON string."""
        return json.dumps(self.build_payload(), ensure_ascii=False, indent=2)

    def export_to_file(self, path: str) -> Path:
        """Write the export payload to path, creating parent directories."""
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(self.export_json(), encoding="utf-8")
        logger.info("Exported portfolio to %s", file_path)
        return file_path

    def export_backup(self, directory: Path, when: datetime) -> Path:
        """Write a timestamped backup file into directory."""
        name = f"fund-ledger-{to_market(when).strftime('%Y%m%d-%H%M%S')}.json"
        return self.export_to_file(str(Path(directory) / name))

"""JSON import/export endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from fund_ledger.api.deps import get_json_exporter, get_json_importer
from fund_ledger.api.schemas import BackupResponse, ImportSummaryResponse
from fund_ledger.config.settings import get_settings
from fund_ledger.core.timezone import now_market
from fund_ledger.interchange import JsonExporter, JsonImporter

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/export")
def export_data(
    exporter: JsonExporter = Depends(get_json_exporter),
) -> dict[str, Any]:
    """Export holdings and transactions as ``{funds, transactions}``."""
    return exporter.build_payload()


@router.post("/backup", response_model=BackupResponse, status_code=201)
def backup_data(
    exporter: JsonExporter = Depends(get_json_exporter),
) -> BackupResponse:
    """Write the export payload to a timestamped file in the export directory."""
    path = exporter.export_backup(get_settings().get_export_dir(), now_market())
    return BackupResponse(path=str(path))


@router.post("/import", response_model=ImportSummaryResponse)
def import_data(
    payload: Any = Body(..., description="{funds: [...], transactions: [...]}"),
    importer: JsonImporter = Depends(get_json_importer),
) -> ImportSummaryResponse:
    """Import a payload; each list present replaces the stored one."""
    return ImportSummaryResponse.model_validate(importer.import_payload(payload))

"""Dependency injection for FastAPI."""

from typing import Generator

from fastapi import Depends

from fund_ledger.app_context import AppContext, get_app_context
from fund_ledger.interchange import JsonExporter, JsonImporter
from fund_ledger.services import AnalysisService, PortfolioService, ValuationSnapshotTracker


def get_context() -> Generator[AppContext, None, None]:
    """Provide the application context, holding its lock for the request."""
    context = get_app_context()
    with context.lock:
        yield context


def get_portfolio_service(context: AppContext = Depends(get_context)) -> PortfolioService:
    """Provide PortfolioService instance."""
    return context.portfolio


def get_analysis_service(context: AppContext = Depends(get_context)) -> AnalysisService:
    """Provide AnalysisService instance."""
    return context.analysis


def get_tracker(context: AppContext = Depends(get_context)) -> ValuationSnapshotTracker:
    """Provide ValuationSnapshotTracker instance."""
    return context.tracker


def get_json_exporter(context: AppContext = Depends(get_context)) -> JsonExporter:
    """Provide JsonExporter instance."""
    return context.json_exporter


def get_json_importer(context: AppContext = Depends(get_context)) -> JsonImporter:
    """Provide JsonImporter instance."""
    return context.json_importer

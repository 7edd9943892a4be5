"""JSON import/export module."""

from fund_ledger.interchange.exporter import JsonExporter
from fund_ledger.interchange.importer import JsonImporter

__all__ = [
    "JsonExporter",
    "JsonImporter",
]

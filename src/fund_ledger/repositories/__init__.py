"""Repository layer - data access abstractions and implementations."""

from fund_ledger.repositories.protocols import KeyValueStore
from fund_ledger.repositories.memory_store import InMemoryKeyValueStore, JsonFileKeyValueStore
from fund_ledger.repositories.portfolio_store import PortfolioStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "PortfolioStore",
]

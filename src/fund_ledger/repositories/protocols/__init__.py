"""Repository protocol definitions (interfaces)."""

from fund_ledger.repositories.protocols.key_value_store import KeyValueStore

__all__ = [
    "KeyValueStore",
]

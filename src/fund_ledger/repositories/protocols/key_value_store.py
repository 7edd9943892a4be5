"""Key-value store protocol."""

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    """
    Interface for persisted state.

    Keys are strings; values are anything ``json.dumps`` accepts.
    """

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return the value stored under key, or default."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...

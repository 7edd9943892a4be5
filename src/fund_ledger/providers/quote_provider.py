"""Quote provider protocol."""

from typing import Optional, Protocol

from fund_ledger.domain.views import Quote


class QuoteProvider(Protocol):
    """
    Protocol for fund quote sources.

    Implementations fetch one fund's latest price estimate. They may return
    None when the fund is unknown and may raise on network failures; the
    market data service treats both as a failed fetch.
    """

    def get_quote(self, fund_id: str) -> Optional[Quote]:
        """Fetch the quote for one fund id."""
        ...

"""Quote providers module."""

from fund_ledger.providers.quote_provider import QuoteProvider
from fund_ledger.providers.stub_provider import StubQuoteProvider

__all__ = [
    "QuoteProvider",
    "StubQuoteProvider",
]

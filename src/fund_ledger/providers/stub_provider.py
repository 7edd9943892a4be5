"""Stub quote provider for offline/testing use."""

import random
from decimal import Decimal
from typing import Optional

from fund_ledger.core.timezone import format_price_timestamp, now_market
from fund_ledger.domain.views import Quote


# Deterministic fake quotes (name, current, previous close) for the demo funds
_STUB_QUOTES: dict[str, tuple[str, Decimal, Decimal]] = {
    "002834": ("华夏新锦绣灵活配置混合A", Decimal("1.2345"), Decimal("1.2290")),
    "021483": ("华夏国证自由现金流ETF联接A", Decimal("1.0532"), Decimal("1.0561")),
    "012365": ("广发中证传媒ETF联接C", Decimal("0.8721"), Decimal("0.8650")),
    "001092": ("广发生物科技指数A", Decimal("0.9874"), Decimal("0.9901")),
}


class StubQuoteProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Uses predefined quotes for the demo funds; generates seeded random
    prices for unknown ids.
    """

    def __init__(self, seed: int = 42):
        self._seed = seed

    def get_quote(self, fund_id: str) -> Optional[Quote]:
        """Return a stub quote; blank ids yield None."""
        fund_id = (fund_id or "").strip()
        if not fund_id:
            return None

        if fund_id in _STUB_QUOTES:
            name, current, previous = _STUB_QUOTES[fund_id]
        else:
            # Seed per id so repeated calls agree
            rng = random.Random(f"{self._seed}:{fund_id}")
            name = f"Fund {fund_id}"
            current = Decimal(str(0.5 + rng.random() * 2)).quantize(Decimal("0.0001"))
            change = Decimal(str((rng.random() - 0.5) * 0.04))
            previous = (current / (1 + change)).quantize(Decimal("0.0001"))

        change_percent = ((current - previous) / previous * 100).quantize(Decimal("0.01"))
        return Quote(
            fund_id=fund_id,
            name=name,
            current_price=current,
            previous_close=previous,
            change_percent=change_percent,
            as_of=format_price_timestamp(now_market()),
        )

"""Core utilities and shared functionality."""

from fund_ledger.core.timezone import (
    now_market,
    to_market,
    parse_datetime_market,
    format_price_timestamp,
    normalize_price_timestamp,
    market_date,
    Clock,
    SystemClock,
    FixedClock,
    MARKET_TZ,
)
from fund_ledger.core.money import (
    to_decimal,
    round_money,
    percent_of,
    format_currency,
    format_percent,
)
from fund_ledger.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    HoldingNotFoundError,
    InvalidQuantityError,
    InsufficientSharesError,
    NegativeSharesError,
    UnsupportedFrequencyError,
    AmountTooSmallError,
)

__all__ = [
    "now_market",
    "to_market",
    "parse_datetime_market",
    "format_price_timestamp",
    "normalize_price_timestamp",
    "market_date",
    "Clock",
    "SystemClock",
    "FixedClock",
    "MARKET_TZ",
    "to_decimal",
    "round_money",
    "percent_of",
    "format_currency",
    "format_percent",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "HoldingNotFoundError",
    "InvalidQuantityError",
    "InsufficientSharesError",
    "NegativeSharesError",
    "UnsupportedFrequencyError",
    "AmountTooSmallError",
]

"""Timezone utilities for UTC+8 market time."""

from datetime import date, datetime
from typing import Optional, Protocol

import pytz
from dateutil import parser as date_parser

# Fund quotes are published in China Standard Time, which has no DST.
MARKET_TZ = pytz.FixedOffset(8 * 60)

PRICE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

MARKET_CLOSE_HOUR = 15


def now_market() -> datetime:
    """Return current time in market time (UTC+8)."""
    return datetime.now(MARKET_TZ)


def to_market(dt: datetime) -> datetime:
    """Convert a datetime to market time."""
    if dt.tzinfo is None:
        # Assume naive datetime is already market time
        return MARKET_TZ.localize(dt)
    return dt.astimezone(MARKET_TZ)


def parse_datetime_market(value: str) -> datetime:
    """
    Parse a datetime string and return it in market time.

    If no timezone is provided in the string, assumes UTC+8.
    """
    dt = date_parser.parse(value)
    return to_market(dt)


def format_price_timestamp(dt: datetime) -> str:
    """Format a datetime as the local ``YYYY-MM-DD HH:mm`` price timestamp."""
    return to_market(dt).strftime(PRICE_TIMESTAMP_FORMAT)


def is_price_timestamp(value: str) -> bool:
    """Return True if value is already in ``YYYY-MM-DD HH:mm`` form."""
    try:
        datetime.strptime(value, PRICE_TIMESTAMP_FORMAT)
    except ValueError:
        return False
    return True


def normalize_price_timestamp(value: Optional[str]) -> Optional[str]:
    """
    Convert any supported timestamp string to the local price timestamp format.

    Values already in ``YYYY-MM-DD HH:mm`` are taken as market time and kept.
    ISO-8601 values (``2026-01-23T21:00:00.000Z``) are converted to UTC+8.
    Empty values return None.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if is_price_timestamp(value):
        return value
    try:
        return format_price_timestamp(parse_datetime_market(value))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Unrecognized timestamp: {value}") from e


def market_date(dt: datetime) -> date:
    """Return the calendar date of dt in market time."""
    return to_market(dt).date()


def is_after_market_close(dt: datetime) -> bool:
    """Check whether dt is at or after the 15:00 market close."""
    return to_market(dt).hour >= MARKET_CLOSE_HOUR


class Clock(Protocol):
    """Source of the current time; injected so day boundaries are testable."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the system time, reported in market time."""

    def now(self) -> datetime:
        return now_market()


class FixedClock:
    """Clock pinned to a given instant; advance it manually."""

    def __init__(self, current: datetime):
        self._current = to_market(current)

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = to_market(current)

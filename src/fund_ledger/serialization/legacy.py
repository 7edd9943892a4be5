"""
Parser for contribution configs written by older releases.

Older data stored the recurring contribution with localized frequency labels
(``"日定投"``) and amounts as display strings (``"100.00元"``, ``"¥1,000"``).
Every recognized shape maps to a canonical ContributionConfig; anything
else is rejected with a ValidationError instead of being guessed at.
"""

import re
from decimal import Decimal
from typing import Any, Optional

from fund_ledger.core.exceptions import ValidationError
from fund_ledger.core.money import to_decimal
from fund_ledger.domain.models import ContributionConfig, ContributionFrequency


FREQUENCY_ALIASES: dict[str, ContributionFrequency] = {
    "daily": ContributionFrequency.DAILY,
    "日定投": ContributionFrequency.DAILY,
    "weekly": ContributionFrequency.WEEKLY,
    "周定投": ContributionFrequency.WEEKLY,
    "monthly": ContributionFrequency.MONTHLY,
    "月定投": ContributionFrequency.MONTHLY,
}

# Currency marks and thousands separators seen in display-formatted amounts
_AMOUNT_NOISE = re.compile(r"[元¥￥,，\s]")


def parse_frequency(raw: Any) -> ContributionFrequency:
    """Map a frequency value (enum, English or localized label) to the enum."""
    if isinstance(raw, ContributionFrequency):
        return raw
    if not isinstance(raw, str):
        raise ValidationError(f"Unrecognized contribution frequency: {raw!r}")
    frequency = FREQUENCY_ALIASES.get(raw.strip().lower())
    if frequency is None:
        raise ValidationError(f"Unrecognized contribution frequency: {raw!r}")
    return frequency


def parse_amount(raw: Any) -> Decimal:
    """Map an amount (number, numeric string or display string) to Decimal."""
    if isinstance(raw, bool):
        raise ValidationError(f"Unrecognized contribution amount: {raw!r}")
    if isinstance(raw, (int, float, Decimal)):
        try:
            return to_decimal(raw)
        except ValueError as e:
            raise ValidationError(f"Unrecognized contribution amount: {raw!r}") from e
    if isinstance(raw, str):
        cleaned = _AMOUNT_NOISE.sub("", raw)
        if not cleaned:
            return Decimal("0")
        try:
            return to_decimal(cleaned)
        except ValueError as e:
            raise ValidationError(f"Unrecognized contribution amount: {raw!r}") from e
    raise ValidationError(f"Unrecognized contribution amount: {raw!r}")


def parse_contribution(raw: Any) -> Optional[ContributionConfig]:
    """
    Normalize a stored or imported contribution config.

    Accepts None, an existing ContributionConfig, or a mapping with
    ``frequency`` and ``amount`` keys in any of the legacy shapes. A missing
    amount counts as 0 (configured but inactive).
    """
    if raw is None:
        return None
    if isinstance(raw, ContributionConfig):
        return raw
    if not isinstance(raw, dict):
        raise ValidationError(f"Unrecognized contribution config: {raw!r}")
    if "frequency" not in raw:
        raise ValidationError(f"Contribution config is missing a frequency: {raw!r}")

    frequency = parse_frequency(raw["frequency"])
    amount = parse_amount(raw.get("amount", 0))
    if amount < 0:
        raise ValidationError(f"Contribution amount cannot be negative: {raw!r}")
    return ContributionConfig(frequency=frequency, amount=amount)

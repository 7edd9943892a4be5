"""Recurring contribution planning."""

import logging
from decimal import Decimal
from typing import Iterable

from fund_ledger.core.exceptions import (
    AmountTooSmallError,
    HoldingNotFoundError,
    UnsupportedFrequencyError,
    ValidationError,
)
from fund_ledger.domain.models import ContributionConfig, ContributionFrequency, Holding
from fund_ledger.domain.views import ContributionOrder

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class ContributionPlanner:
    """
    Turns configured recurring contributions into buy orders.

    Planning is all-or-nothing: every selected holding is validated before
    any order is returned, so a single bad entry aborts the whole batch.
    Only daily contributions can be executed.
    """

    def plan_execution(
        self,
        holdings: Iterable[Holding],
        selected_ids: Iterable[str],
    ) -> list[ContributionOrder]:
        """
        Validate the selected holdings and return one order per active config.

        Holdings without a config or with amount <= 0 produce no order.
        Raises HoldingNotFoundError, UnsupportedFrequencyError or
        AmountTooSmallError before returning anything.
        """
        by_id = {h.fund_id: h for h in holdings}
        orders: list[ContributionOrder] = []

        for fund_id in selected_ids:
            holding = by_id.get(fund_id)
            if holding is None:
                raise HoldingNotFoundError(fund_id)

            config = holding.contribution
            if config is None or not config.is_active:
                continue

            if config.frequency != ContributionFrequency.DAILY:
                raise UnsupportedFrequencyError(fund_id, config.frequency.value)

            price = holding.current_price
            if price <= ZERO:
                raise AmountTooSmallError(fund_id, str(config.amount), str(price))
            shares = config.amount / price
            if shares <= ZERO:
                raise AmountTooSmallError(fund_id, str(config.amount), str(price))

            orders.append(
                ContributionOrder(
                    fund_id=fund_id,
                    amount=config.amount,
                    price=price,
                    shares=shares,
                )
            )

        logger.debug("Planned %d contribution orders", len(orders))
        return orders

    def skipped_ids(
        self,
        holdings: Iterable[Holding],
        selected_ids: Iterable[str],
    ) -> list[str]:
        """Return the selected ids that have no active contribution."""
        by_id = {h.fund_id: h for h in holdings}
        skipped = []
        for fund_id in selected_ids:
            holding = by_id.get(fund_id)
            if holding is not None and (
                holding.contribution is None or not holding.contribution.is_active
            ):
                skipped.append(fund_id)
        return skipped

    def validate_update(
        self,
        holdings: Iterable[Holding],
        updates: dict[str, ContributionConfig],
    ) -> None:
        """Check that every updated holding exists and every amount is >= 0."""
        known = {h.fund_id for h in holdings}
        for fund_id, config in updates.items():
            if fund_id not in known:
                raise HoldingNotFoundError(fund_id)
            if config.amount < ZERO:
                raise ValidationError(
                    f"Contribution amount for {fund_id} must be >= 0, got {config.amount}"
                )

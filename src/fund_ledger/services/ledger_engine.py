"""Ledger engine: applies and reverts buy/sell transactions on a holding."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from fund_ledger.core.exceptions import (
    InsufficientSharesError,
    InvalidQuantityError,
    NegativeSharesError,
    ValidationError,
)
from fund_ledger.core.timezone import Clock, SystemClock
from fund_ledger.domain.models import Holding, Transaction, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def weighted_cost(
    shares: Decimal,
    cost_basis: Decimal,
    traded_shares: Decimal,
    traded_price: Decimal,
) -> tuple[Decimal, Decimal]:
    """Return (new_shares, new_cost) after buying traded_shares at traded_price."""
    new_shares = shares + traded_shares
    new_cost = (shares * cost_basis + traded_shares * traded_price) / new_shares
    return new_shares, new_cost


class LedgerEngine:
    """
    Owns the rules for how transactions move shares and cost basis.

    Cost basis is a weighted average: a buy blends its price into the cost,
    a sell leaves the cost untouched. Every operation returns a new Holding
    and never mutates its inputs, so a raised error leaves the caller's state
    exactly as it was.

    Reverting works as a stateless delta against the holding's *current*
    state rather than a replay of the full ledger. Because a weighted average
    is not separable per transaction, reverting trades out of order on a
    holding with several buys and sells can yield a different cost basis
    than reverting them newest-first. Callers needing exact history must
    revert in reverse chronological order.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._clock = clock or SystemClock()
        self._new_id = id_factory

    def apply_transaction(
        self,
        holding: Holding,
        txn_type: TransactionType,
        shares: Decimal,
        price: Decimal,
        txn_time: Optional[datetime] = None,
    ) -> tuple[Holding, Transaction]:
        """
        Apply a buy or sell to a holding.

        Returns the updated holding and the new (active) transaction record.
        Raises InvalidQuantityError for non-positive shares or price and
        InsufficientSharesError when selling more than is held.
        """
        try:
            txn_type = TransactionType(txn_type)
        except ValueError as e:
            raise ValidationError(f"Unknown transaction type: {txn_type!r}") from e
        if shares <= ZERO or price <= ZERO:
            raise InvalidQuantityError(str(shares), str(price))

        if txn_type == TransactionType.BUY:
            new_shares, new_cost = weighted_cost(
                holding.shares, holding.cost_basis, shares, price
            )
        else:
            if shares > holding.shares:
                raise InsufficientSharesError(
                    holding.fund_id, str(shares), str(holding.shares)
                )
            new_shares, new_cost = holding.shares - shares, holding.cost_basis

        now = txn_time or self._clock.now()
        transaction = Transaction(
            txn_id=self._new_id(),
            fund_id=holding.fund_id,
            fund_name=holding.name,
            txn_type=txn_type,
            shares=shares,
            price=price,
            txn_time=now,
            reverted=False,
        )
        updated = self._with_position(holding, new_shares, new_cost)

        logger.debug(
            "Applied %s %s x %s on %s: shares %s -> %s",
            txn_type.value, shares, price, holding.fund_id, holding.shares, new_shares,
        )
        return updated, transaction

    def toggle_revert(
        self,
        transaction: Transaction,
        holding: Holding,
    ) -> tuple[Holding, Transaction]:
        """
        Revert an active transaction or restore a reverted one.

        Returns the recomputed holding and the transaction with its reverted
        flag flipped. Raises NegativeSharesError if the result would leave
        negative shares; nothing is modified in that case.

        Reverting records the position held at that moment on the returned
        transaction. Restoring a buy while the holding still sits exactly
        where that revert left it returns the recorded position as-is, so a
        revert followed by a restore is exact rather than subject to decimal
        rounding in the re-averaged cost.
        """
        if transaction.fund_id != holding.fund_id:
            raise ValidationError(
                f"Transaction {transaction.txn_id} belongs to {transaction.fund_id}, "
                f"not {holding.fund_id}"
            )

        if transaction.reverted:
            new_shares, new_cost = self._restore(transaction, holding)
        else:
            new_shares, new_cost = self._revert(transaction, holding)

        if new_shares < ZERO:
            raise NegativeSharesError(holding.fund_id, str(new_shares))

        updated = self._with_position(holding, new_shares, new_cost)
        if transaction.reverted:
            toggled = transaction.with_reverted(False)
        else:
            toggled = transaction.with_reverted(True, holding.shares, holding.cost_basis)

        logger.info(
            "%s transaction %s on %s: shares %s -> %s",
            "Restored" if transaction.reverted else "Reverted",
            transaction.txn_id, holding.fund_id, holding.shares, new_shares,
        )
        return updated, toggled

    @staticmethod
    def _revert(transaction: Transaction, holding: Holding) -> tuple[Decimal, Decimal]:
        if transaction.txn_type == TransactionType.SELL:
            return holding.shares + transaction.shares, holding.cost_basis

        new_shares = holding.shares - transaction.shares
        if new_shares <= ZERO:
            # Nothing left to average over; fall back to the recorded initial price
            return new_shares, holding.initial_price or ZERO
        total_cost = holding.shares * holding.cost_basis - transaction.amount
        return new_shares, total_cost / new_shares

    @classmethod
    def _restore(cls, transaction: Transaction, holding: Holding) -> tuple[Decimal, Decimal]:
        if transaction.txn_type == TransactionType.BUY:
            if cls._undoes_last_revert(transaction, holding):
                return transaction.restore_shares, transaction.restore_cost_basis
            return weighted_cost(
                holding.shares, holding.cost_basis, transaction.shares, transaction.price
            )
        return holding.shares - transaction.shares, holding.cost_basis

    @classmethod
    def _undoes_last_revert(cls, transaction: Transaction, holding: Holding) -> bool:
        """True when holding is exactly what reverting from the recorded position gave."""
        if transaction.restore_shares is None or transaction.restore_cost_basis is None:
            return False
        before = replace(
            holding,
            shares=transaction.restore_shares,
            cost_basis=transaction.restore_cost_basis,
        )
        return cls._revert(transaction, before) == (holding.shares, holding.cost_basis)

    def _with_position(self, holding: Holding, shares: Decimal, cost_basis: Decimal) -> Holding:
        return replace(
            holding,
            shares=shares,
            cost_basis=cost_basis,
            updated_at=self._clock.now().isoformat(),
        )

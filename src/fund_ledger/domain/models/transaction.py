"""Transaction domain model."""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fund_ledger.domain.models.enums import TransactionType


@dataclass(frozen=True)
class Transaction:
    """
    Ledger entry for a buy or sell of a single fund.

    Immutable apart from the reverted flag, which is flipped by producing a
    copy through ``with_reverted``. The ledger engine never deletes entries.
    """

    txn_id: str
    fund_id: str
    txn_type: TransactionType
    shares: Decimal
    price: Decimal
    txn_time: datetime
    fund_name: Optional[str] = None
    reverted: bool = False
    # Position held just before this entry was reverted; cleared on restore
    restore_shares: Optional[Decimal] = None
    restore_cost_basis: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            object.__setattr__(self, "txn_type", TransactionType(self.txn_type))

    @property
    def amount(self) -> Decimal:
        """Money traded: shares x price."""
        return self.shares * self.price

    @property
    def is_active(self) -> bool:
        return not self.reverted

    def with_reverted(
        self,
        reverted: bool,
        restore_shares: Optional[Decimal] = None,
        restore_cost_basis: Optional[Decimal] = None,
    ) -> "Transaction":
        """Return a copy with the reverted flag and pre-revert position set."""
        return replace(
            self,
            reverted=reverted,
            restore_shares=restore_shares,
            restore_cost_basis=restore_cost_basis,
        )

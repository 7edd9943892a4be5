"""
Unit tests for LedgerEngine.

Tests cover:
- Weighted-average cost on buys
- Sells leaving cost unchanged
- Quantity validation
- Revert and restore of buys and sells
- Negative share protection on revert/restore
- Exact revert/restore round trips
- Weighted-mean cost over buy sequences
"""

import random

import pytest
from decimal import Decimal

from fund_ledger.core.exceptions import (
    InsufficientSharesError,
    InvalidQuantityError,
    NegativeSharesError,
    ValidationError,
)
from fund_ledger.domain.models import TransactionType
from fund_ledger.services import LedgerEngine, weighted_cost

from tests.conftest import make_holding, market_datetime, assert_decimal_equal


# =============================================================================
# WEIGHTED COST TESTS
# =============================================================================


class TestWeightedCost:
    """Tests for the weighted-average cost formula."""

    def test_weighted_cost_blends_prices(self):
        """
        GIVEN 1000 shares at cost 1.0
        WHEN 500 shares are bought at 1.2
        THEN shares = 1500 and cost = (1000 + 600) / 1500
        """
        shares, cost = weighted_cost(Decimal("1000"), Decimal("1.0"), Decimal("500"), Decimal("1.2"))

        assert shares == Decimal("1500")
        assert_decimal_equal(cost, Decimal("1.0667"))

    def test_weighted_cost_from_empty_position(self):
        """Buying into an empty position takes the trade price as cost."""
        shares, cost = weighted_cost(Decimal("0"), Decimal("0"), Decimal("200"), Decimal("1.5"))

        assert shares == Decimal("200")
        assert cost == Decimal("1.5")


# =============================================================================
# APPLY TESTS
# =============================================================================


class TestApplyTransaction:
    """Tests for applying buys and sells."""

    def test_buy_updates_shares_and_cost(self, ledger_engine: LedgerEngine):
        """
        GIVEN holding 1000 @ 1.0
        WHEN buy 500 @ 1.2
        THEN holding is 1500 @ ~1.0667 and the transaction is active
        """
        holding = make_holding(shares="1000", cost_basis="1.0")

        updated, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("500"), Decimal("1.2")
        )

        assert updated.shares == Decimal("1500")
        assert_decimal_equal(updated.cost_basis, Decimal("1.0667"))
        assert txn.txn_type == TransactionType.BUY
        assert txn.shares == Decimal("500")
        assert txn.price == Decimal("1.2")
        assert txn.amount == Decimal("600.0")
        assert txn.reverted is False
        assert txn.fund_id == holding.fund_id
        assert txn.fund_name == holding.name
        assert txn.txn_id == "txn-1"

    def test_sell_keeps_cost_basis(self, ledger_engine: LedgerEngine):
        """
        GIVEN holding 1500 @ 1.0667 (after the buy above)
        WHEN sell 300 @ 1.3
        THEN shares = 1200 and cost is unchanged
        """
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_buy, _ = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("500"), Decimal("1.2")
        )

        after_sell, txn = ledger_engine.apply_transaction(
            after_buy, TransactionType.SELL, Decimal("300"), Decimal("1.3")
        )

        assert after_sell.shares == Decimal("1200")
        assert after_sell.cost_basis == after_buy.cost_basis
        assert txn.txn_type == TransactionType.SELL

    def test_sell_entire_position(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="1000", cost_basis="1.0")

        updated, _ = ledger_engine.apply_transaction(
            holding, TransactionType.SELL, Decimal("1000"), Decimal("1.1")
        )

        assert updated.shares == Decimal("0")

    def test_sell_more_than_held_raises(self, ledger_engine: LedgerEngine):
        """
        GIVEN holding with 100 shares
        WHEN selling 150
        THEN InsufficientSharesError and the holding is unchanged
        """
        holding = make_holding(shares="100", cost_basis="1.0")

        with pytest.raises(InsufficientSharesError) as exc_info:
            ledger_engine.apply_transaction(
                holding, TransactionType.SELL, Decimal("150"), Decimal("1.0")
            )

        assert exc_info.value.code == "INSUFFICIENT_SHARES"
        assert holding.shares == Decimal("100")

    @pytest.mark.parametrize(
        "shares,price",
        [
            ("0", "1.0"),
            ("-10", "1.0"),
            ("10", "0"),
            ("10", "-1.0"),
        ],
    )
    def test_non_positive_quantity_raises(self, ledger_engine, shares, price):
        holding = make_holding()

        with pytest.raises(InvalidQuantityError) as exc_info:
            ledger_engine.apply_transaction(
                holding, TransactionType.BUY, Decimal(shares), Decimal(price)
            )

        assert exc_info.value.code == "INVALID_QUANTITY"

    def test_string_transaction_type_accepted(self, ledger_engine: LedgerEngine):
        holding = make_holding()

        _, txn = ledger_engine.apply_transaction(holding, "buy", Decimal("10"), Decimal("1.0"))

        assert txn.txn_type == TransactionType.BUY

    def test_unknown_transaction_type_raises(self, ledger_engine: LedgerEngine):
        holding = make_holding()

        with pytest.raises(ValidationError) as exc_info:
            ledger_engine.apply_transaction(holding, "gift", Decimal("10"), Decimal("1.0"))

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert "gift" in exc_info.value.message

    def test_explicit_transaction_time(self, ledger_engine: LedgerEngine):
        holding = make_holding()
        when = market_datetime(2026, 3, 10, 9, 45)

        _, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("10"), Decimal("1.0"), txn_time=when
        )

        assert txn.txn_time == when

    def test_inputs_are_not_mutated(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="1000", cost_basis="1.0")

        ledger_engine.apply_transaction(holding, TransactionType.BUY, Decimal("500"), Decimal("2"))

        assert holding.shares == Decimal("1000")
        assert holding.cost_basis == Decimal("1.0")


# =============================================================================
# REVERT / RESTORE TESTS
# =============================================================================


class TestToggleRevert:
    """Tests for reverting and restoring transactions."""

    def test_revert_buy_restores_previous_position(self, ledger_engine: LedgerEngine):
        """
        GIVEN holding 1000 @ 1.0, then buy 500 @ 1.6 -> 1500 @ 1.2
        WHEN the buy is reverted
        THEN holding is back to 1000 @ 1.0 and the transaction is reverted
        """
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("500"), Decimal("1.6")
        )
        assert after_buy.cost_basis == Decimal("1.2")

        reverted_holding, reverted_txn = ledger_engine.toggle_revert(txn, after_buy)

        assert reverted_holding.shares == Decimal("1000")
        assert reverted_holding.cost_basis == Decimal("1.0")
        assert reverted_txn.reverted is True
        assert reverted_txn.txn_id == txn.txn_id

    def test_restore_buy_reapplies_it(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("500"), Decimal("1.6")
        )
        reverted_holding, reverted_txn = ledger_engine.toggle_revert(txn, after_buy)

        restored_holding, restored_txn = ledger_engine.toggle_revert(
            reverted_txn, reverted_holding
        )

        assert restored_holding.shares == Decimal("1500")
        assert restored_holding.cost_basis == Decimal("1.2")
        assert restored_txn.reverted is False

    def test_revert_sell_returns_shares(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_sell, txn = ledger_engine.apply_transaction(
            holding, TransactionType.SELL, Decimal("300"), Decimal("1.3")
        )

        reverted_holding, _ = ledger_engine.toggle_revert(txn, after_sell)

        assert reverted_holding.shares == Decimal("1000")
        assert reverted_holding.cost_basis == Decimal("1.0")

    def test_revert_only_buy_falls_back_to_initial_price(self, ledger_engine: LedgerEngine):
        """
        GIVEN an empty holding with initial price 0.9, then buy 100 @ 1.5
        WHEN the buy is reverted
        THEN shares = 0 and cost falls back to the initial price
        """
        holding = make_holding(shares="0", cost_basis="0", initial_price="0.9")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("100"), Decimal("1.5")
        )

        reverted_holding, _ = ledger_engine.toggle_revert(txn, after_buy)

        assert reverted_holding.shares == Decimal("0")
        assert reverted_holding.cost_basis == Decimal("0.9")

    def test_revert_only_buy_without_initial_price(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="0", cost_basis="0")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("100"), Decimal("1.5")
        )

        reverted_holding, _ = ledger_engine.toggle_revert(txn, after_buy)

        assert reverted_holding.shares == Decimal("0")
        assert reverted_holding.cost_basis == Decimal("0")

    def test_revert_buy_after_shares_sold_raises(self, ledger_engine: LedgerEngine):
        """
        GIVEN buy 100 then sell 100 on an empty holding
        WHEN the buy is reverted
        THEN NegativeSharesError (0 - 100 < 0)
        """
        holding = make_holding(shares="0", cost_basis="0")
        after_buy, buy_txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("100"), Decimal("1.0")
        )
        after_sell, _ = ledger_engine.apply_transaction(
            after_buy, TransactionType.SELL, Decimal("100"), Decimal("1.1")
        )

        with pytest.raises(NegativeSharesError) as exc_info:
            ledger_engine.toggle_revert(buy_txn, after_sell)

        assert exc_info.value.code == "NEGATIVE_SHARES"

    def test_restore_sell_beyond_holding_raises(self, ledger_engine: LedgerEngine):
        """
        GIVEN sell 300 reverted, then the shares were sold again
        WHEN the reverted sell is restored with too few shares held
        THEN NegativeSharesError
        """
        holding = make_holding(shares="300", cost_basis="1.0")
        after_sell, sell_txn = ledger_engine.apply_transaction(
            holding, TransactionType.SELL, Decimal("300"), Decimal("1.2")
        )
        back, reverted_sell = ledger_engine.toggle_revert(sell_txn, after_sell)
        emptied, _ = ledger_engine.apply_transaction(
            back, TransactionType.SELL, Decimal("200"), Decimal("1.2")
        )

        with pytest.raises(NegativeSharesError):
            ledger_engine.toggle_revert(reverted_sell, emptied)

    def test_revert_against_other_fund_raises(self, ledger_engine: LedgerEngine):
        holding = make_holding(fund_id="000001")
        other = make_holding(fund_id="000002")
        _, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("10"), Decimal("1.0")
        )

        with pytest.raises(ValidationError):
            ledger_engine.toggle_revert(txn, other)

    def test_newest_first_revert_round_trip(self, ledger_engine: LedgerEngine):
        """
        GIVEN several buys and sells applied in order
        WHEN every transaction is reverted newest first
        THEN the holding returns to its starting position
        """
        start = make_holding(shares="1000", cost_basis="1.0")
        holding = start
        applied = []
        for txn_type, shares, price in [
            (TransactionType.BUY, "500", "1.2"),
            (TransactionType.SELL, "300", "1.3"),
            (TransactionType.BUY, "200", "0.9"),
        ]:
            holding, txn = ledger_engine.apply_transaction(
                holding, txn_type, Decimal(shares), Decimal(price)
            )
            applied.append(txn)

        for txn in reversed(applied):
            holding, _ = ledger_engine.toggle_revert(txn, holding)

        assert holding.shares == start.shares
        assert_decimal_equal(holding.cost_basis, start.cost_basis)

    def test_revert_records_position_before_it(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("300"), Decimal("1.37")
        )

        _, reverted_txn = ledger_engine.toggle_revert(txn, after_buy)

        assert reverted_txn.restore_shares == after_buy.shares
        assert reverted_txn.restore_cost_basis == after_buy.cost_basis

    def test_restore_clears_recorded_position(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("300"), Decimal("1.37")
        )
        reverted_holding, reverted_txn = ledger_engine.toggle_revert(txn, after_buy)

        _, restored_txn = ledger_engine.toggle_revert(reverted_txn, reverted_holding)

        assert restored_txn.restore_shares is None
        assert restored_txn.restore_cost_basis is None

    def test_restore_after_other_trades_reaverages(self, ledger_engine: LedgerEngine):
        """
        GIVEN a reverted buy of 300 @ 1.37 on 1000 @ 1.0
        AND another buy of 100 @ 2.0 applied afterwards
        WHEN the first buy is restored
        THEN its price is blended into the current position
        """
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("300"), Decimal("1.37")
        )
        reverted_holding, reverted_txn = ledger_engine.toggle_revert(txn, after_buy)
        later, _ = ledger_engine.apply_transaction(
            reverted_holding, TransactionType.BUY, Decimal("100"), Decimal("2.0")
        )

        restored, _ = ledger_engine.toggle_revert(reverted_txn, later)

        expected_shares, expected_cost = weighted_cost(
            later.shares, later.cost_basis, Decimal("300"), Decimal("1.37")
        )
        assert restored.shares == expected_shares == Decimal("1400")
        assert restored.cost_basis == expected_cost


# =============================================================================
# ROUND TRIP AND SEQUENCE TESTS
# =============================================================================


def random_quantity(rng: random.Random, places: int, upper: int) -> Decimal:
    """Positive Decimal with the given number of decimal places."""
    return Decimal(rng.randint(1, upper * 10 ** places)).scaleb(-places)


class TestRevertRestoreExactness:
    """Revert followed by restore returns the holding to the exact same position."""

    @pytest.mark.parametrize("seed", range(5))
    def test_buy_round_trip_is_exact(self, ledger_engine: LedgerEngine, seed):
        """
        GIVEN random positions and random buys with whole and fractional shares
        WHEN each buy is reverted and then restored
        THEN shares and cost basis equal the post-buy values exactly
        """
        rng = random.Random(seed)

        for _ in range(200):
            holding = make_holding(
                shares=str(random_quantity(rng, rng.choice([0, 2]), 100_000)),
                cost_basis=str(random_quantity(rng, 4, 10)),
            )
            after_buy, txn = ledger_engine.apply_transaction(
                holding,
                TransactionType.BUY,
                random_quantity(rng, rng.choice([0, 2]), 10_000),
                random_quantity(rng, 4, 10),
            )

            reverted_holding, reverted_txn = ledger_engine.toggle_revert(txn, after_buy)
            restored, restored_txn = ledger_engine.toggle_revert(reverted_txn, reverted_holding)

            assert restored.shares == after_buy.shares
            assert restored.cost_basis == after_buy.cost_basis
            assert restored_txn.reverted is False

    def test_repeated_toggling_does_not_drift(self, ledger_engine: LedgerEngine):
        holding = make_holding(shares="1000", cost_basis="1.0")
        after_buy, txn = ledger_engine.apply_transaction(
            holding, TransactionType.BUY, Decimal("333"), Decimal("1.2345")
        )

        current = after_buy
        for _ in range(50):
            current, txn = ledger_engine.toggle_revert(txn, current)
            current, txn = ledger_engine.toggle_revert(txn, current)

        assert current.shares == after_buy.shares
        assert current.cost_basis == after_buy.cost_basis

    @pytest.mark.parametrize("seed", range(3))
    def test_sell_round_trip_is_exact(self, ledger_engine: LedgerEngine, seed):
        rng = random.Random(seed)

        for _ in range(100):
            holding = make_holding(
                shares=str(random_quantity(rng, 2, 100_000)),
                cost_basis=str(random_quantity(rng, 4, 10)),
            )
            sold = min(random_quantity(rng, 2, 100_000), holding.shares)
            after_sell, txn = ledger_engine.apply_transaction(
                holding, TransactionType.SELL, sold, random_quantity(rng, 4, 10)
            )

            reverted_holding, reverted_txn = ledger_engine.toggle_revert(txn, after_sell)
            restored, _ = ledger_engine.toggle_revert(reverted_txn, reverted_holding)

            assert restored.shares == after_sell.shares
            assert restored.cost_basis == after_sell.cost_basis


class TestBuySequenceCost:
    """Cost basis after a run of buys is the share-weighted mean of their prices."""

    @pytest.mark.parametrize(
        "buys",
        [
            [("100", "1.0"), ("100", "2.0")],
            [("1000", "1.2345"), ("333", "0.9876"), ("0.5", "3.1")],
            [("10", "1.1"), ("20", "1.2"), ("30", "1.3"), ("40", "1.4")],
        ],
    )
    def test_cost_is_weighted_mean_after_each_buy(self, ledger_engine: LedgerEngine, buys):
        holding = make_holding(shares="0", cost_basis="0")
        total_shares = Decimal("0")
        total_amount = Decimal("0")

        for shares, price in buys:
            holding, _ = ledger_engine.apply_transaction(
                holding, TransactionType.BUY, Decimal(shares), Decimal(price)
            )
            total_shares += Decimal(shares)
            total_amount += Decimal(shares) * Decimal(price)

            assert holding.shares == total_shares
            assert_decimal_equal(holding.cost_basis, total_amount / total_shares, Decimal("1e-20"))

    @pytest.mark.parametrize("seed", range(3))
    def test_random_buy_sequences(self, ledger_engine: LedgerEngine, seed):
        rng = random.Random(seed)
        holding = make_holding(shares="0", cost_basis="0")
        total_shares = Decimal("0")
        total_amount = Decimal("0")

        for _ in range(100):
            shares = random_quantity(rng, rng.choice([0, 2]), 10_000)
            price = random_quantity(rng, 4, 10)
            holding, _ = ledger_engine.apply_transaction(holding, TransactionType.BUY, shares, price)
            total_shares += shares
            total_amount += shares * price

            assert holding.shares == total_shares
            assert_decimal_equal(holding.cost_basis, total_amount / total_shares, Decimal("1e-20"))

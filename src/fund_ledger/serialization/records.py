"""JSON record schemas for holdings and transactions.

Records use the camelCase keys of the persisted and exported payloads
(``costPrice``, ``priceUpdatedAt``...). Numbers are accepted as JSON numbers
or numeric strings.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)

from fund_ledger.core.exceptions import ValidationError
from fund_ledger.core.timezone import normalize_price_timestamp, parse_datetime_market, to_market
from fund_ledger.domain.models import Holding, Transaction, TransactionType
from fund_ledger.serialization.legacy import parse_contribution


# Fields an export needs to rebuild state; the rest is derived or transient
EXPORT_FUND_FIELDS = (
    "id",
    "name",
    "shares",
    "costPrice",
    "currentPrice",
    "initialPrice",
    "priceUpdatedAt",
    "createdAt",
    "investmentStrategy",
    "tag",
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class FundRecord(BaseModel):
    """Serialized Holding."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str = ""
    shares: Decimal = Field(default=Decimal("0"), ge=0)
    cost_price: Decimal = Field(default=Decimal("0"), ge=0, alias="costPrice")
    current_price: Decimal = Field(default=Decimal("0"), alias="currentPrice")
    last_price: Optional[Decimal] = Field(default=None, alias="lastPrice")
    initial_price: Optional[Decimal] = Field(default=None, alias="initialPrice")
    price_updated_at: Optional[str] = Field(default=None, alias="priceUpdatedAt")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    investment_strategy: Optional[Any] = Field(default=None, alias="investmentStrategy")
    tag: Optional[str] = None
    change_percent: Optional[Decimal] = Field(
        default=None,
        validation_alias=AliasChoices("changePercent", "gszzl", "change_percent"),
        serialization_alias="changePercent",
    )

    @field_validator(
        "last_price", "initial_price", "change_percent", "price_updated_at", "tag", mode="before"
    )
    @classmethod
    def blank_is_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Any:
        # Fund codes are digits and sometimes arrive as JSON numbers
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


class TransactionRecord(BaseModel):
    """Serialized Transaction."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    fund_id: str = Field(..., min_length=1, alias="fundId")
    fund_name: Optional[str] = Field(default=None, alias="fundName")
    type: TransactionType
    shares: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., gt=0)
    amount: Optional[Decimal] = None
    date: str
    reverted: bool = False
    # Stored only; exports leave these out
    restore_shares: Optional[Decimal] = Field(default=None, ge=0, alias="restoreShares")
    restore_cost_price: Optional[Decimal] = Field(default=None, ge=0, alias="restoreCostPrice")

    @field_validator("fund_id", mode="before")
    @classmethod
    def fund_id_as_string(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


def _encode(value: Any, numeric: bool) -> Any:
    """Make a dumped record JSON-safe; Decimals become floats or exact strings."""
    if isinstance(value, Decimal):
        return float(value) if numeric else str(value)
    if isinstance(value, dict):
        return {k: _encode(v, numeric) for k, v in value.items()}
    if isinstance(value, list):
        return [_encode(v, numeric) for v in value]
    if hasattr(value, "value"):  # Enum
        return value.value
    return value


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"]) or "record"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def holding_from_record(data: Any) -> Holding:
    """Build a Holding from a fund record, normalizing legacy shapes."""
    if not isinstance(data, dict):
        raise ValidationError(f"Fund record must be an object, got {type(data).__name__}")
    try:
        record = FundRecord.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid fund record {data.get('id')!r}: {_format_errors(e)}") from e

    try:
        price_updated_at = normalize_price_timestamp(record.price_updated_at)
    except ValueError as e:
        raise ValidationError(f"Invalid fund record {record.id!r}: {e}") from e

    return Holding(
        fund_id=record.id,
        name=record.name,
        shares=record.shares,
        cost_basis=record.cost_price,
        current_price=record.current_price,
        previous_price=record.last_price,
        initial_price=record.initial_price,
        price_updated_at=price_updated_at,
        created_at=record.created_at,
        updated_at=record.updated_at,
        contribution=parse_contribution(record.investment_strategy),
        tag=record.tag,
        change_percent=record.change_percent,
    )


def holding_to_record(holding: Holding, export: bool = False) -> dict[str, Any]:
    """
    Serialize a Holding.

    Storage records keep every field with exact decimal strings. Export
    records keep only EXPORT_FUND_FIELDS, with plain JSON numbers.
    """
    contribution = None
    if holding.contribution is not None:
        contribution = {
            "frequency": holding.contribution.frequency.value,
            "amount": holding.contribution.amount,
        }
    record = FundRecord(
        id=holding.fund_id,
        name=holding.name,
        shares=holding.shares,
        cost_price=holding.cost_basis,
        current_price=holding.current_price,
        last_price=holding.previous_price,
        initial_price=holding.initial_price,
        price_updated_at=holding.price_updated_at,
        created_at=holding.created_at,
        updated_at=holding.updated_at,
        investment_strategy=contribution,
        tag=holding.tag,
        change_percent=holding.change_percent,
    )
    data = record.model_dump(by_alias=True, exclude_none=True)
    if export:
        data = {k: v for k, v in data.items() if k in EXPORT_FUND_FIELDS}
    return _encode(data, numeric=export)


def transaction_from_record(data: Any) -> Transaction:
    """Build a Transaction from a transaction record."""
    if not isinstance(data, dict):
        raise ValidationError(
            f"Transaction record must be an object, got {type(data).__name__}"
        )
    try:
        record = TransactionRecord.model_validate(data)
        txn_time = parse_datetime_market(record.date)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid transaction record {data.get('id')!r}: {_format_errors(e)}"
        ) from e
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid transaction date {data.get('date')!r}") from e

    return Transaction(
        txn_id=record.id,
        fund_id=record.fund_id,
        fund_name=record.fund_name,
        txn_type=record.type,
        shares=record.shares,
        price=record.price,
        txn_time=txn_time,
        reverted=record.reverted,
        restore_shares=record.restore_shares if record.reverted else None,
        restore_cost_basis=record.restore_cost_price if record.reverted else None,
    )


def transaction_to_record(transaction: Transaction, export: bool = False) -> dict[str, Any]:
    """Serialize a Transaction; amount is included for readers of the payload."""
    data = {
        "id": transaction.txn_id,
        "fundId": transaction.fund_id,
        "fundName": transaction.fund_name,
        "type": transaction.txn_type.value,
        "shares": transaction.shares,
        "price": transaction.price,
        "amount": transaction.amount,
        "date": _isoformat(transaction.txn_time),
        "reverted": transaction.reverted,
    }
    if data["fundName"] is None:
        del data["fundName"]
    if not export and transaction.restore_shares is not None:
        data["restoreShares"] = transaction.restore_shares
        data["restoreCostPrice"] = transaction.restore_cost_basis
    return _encode(data, numeric=export)


def _isoformat(dt: datetime) -> str:
    return to_market(dt).isoformat()

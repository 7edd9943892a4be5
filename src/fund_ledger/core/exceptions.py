"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str, code: str = "NOT_FOUND"):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", code=code)


class HoldingNotFoundError(NotFoundError):
    """Raised when a fund holding does not exist."""

    def __init__(self, fund_id: str):
        super().__init__("Holding", fund_id, code="HOLDING_NOT_FOUND")


class InvalidQuantityError(AppError):
    """Raised when a transaction has non-positive shares or price."""

    def __init__(self, shares: str, price: str):
        super().__init__(
            f"Invalid quantity: shares {shares} and price {price} must both be > 0",
            code="INVALID_QUANTITY",
        )


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than held."""

    def __init__(self, fund_id: str, requested: str, available: str):
        super().__init__(
            f"Insufficient shares of {fund_id}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
        )


class NegativeSharesError(AppError):
    """Raised when reverting or restoring a transaction would leave negative shares."""

    def __init__(self, fund_id: str, resulting: str):
        super().__init__(
            f"Operation on {fund_id} would leave negative shares: {resulting}",
            code="NEGATIVE_SHARES",
        )


class UnsupportedFrequencyError(AppError):
    """Raised when a non-daily contribution is submitted for auto-execution."""

    def __init__(self, fund_id: str, frequency: str):
        super().__init__(
            f"Only daily contributions can be executed; {fund_id} is configured as {frequency}",
            code="UNSUPPORTED_FREQUENCY",
        )


class AmountTooSmallError(AppError):
    """Raised when a contribution would buy no shares."""

    def __init__(self, fund_id: str, amount: str, price: str):
        super().__init__(
            f"Contribution for {fund_id} buys no shares: amount {amount} at price {price}",
            code="AMOUNT_TOO_SMALL",
        )

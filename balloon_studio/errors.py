"""Custom exceptions for the balloon studio service."""

from dataclasses import asdict, dataclass
from typing import Any


class BalloonStudioError(Exception):
    """Base exception for all balloon studio errors."""

    pass


class ValidationError(BalloonStudioError):
    """Raised when requirement or order-line data is malformed."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.errors = errors or []
        super().__init__(message)


@dataclass(frozen=True)
class StockShortage:
    """One line that could not be covered by stock."""

    color: str
    size: str
    requested: int
    available: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class InsufficientStockError(BalloonStudioError):
    """Raised when consuming stock would drive a quantity negative."""

    def __init__(self, shortages: list[StockShortage]):
        self.shortages = shortages
        lines = ", ".join(
            f"{s.color} {s.size} (need {s.requested}, have {s.available})"
            for s in shortages
        )
        super().__init__(f"Insufficient stock: {lines}")


class InvalidTransitionError(BalloonStudioError):
    """Raised when an order status change is not allowed."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from '{current}' to '{requested}'")


class NotFoundError(BalloonStudioError):
    """Raised when a referenced entity does not exist."""

    entity = "Resource"

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(f"{self.entity} not found: {identifier}")


class DesignNotFoundError(NotFoundError):
    entity = "Design"


class OrderNotFoundError(NotFoundError):
    entity = "Order"


class ProductionNotFoundError(NotFoundError):
    entity = "Production record"


class StockRecordNotFoundError(NotFoundError):
    entity = "Stock record"


class AccessoryNotFoundError(NotFoundError):
    entity = "Accessory"


class StockRecordExistsError(BalloonStudioError):
    """Raised when creating a stock record for an existing color and size."""

    def __init__(self, color: str, size: str):
        self.color = color
        self.size = size
        super().__init__(f"Stock record already exists for {color} {size}")


class AccessDeniedError(BalloonStudioError):
    """Raised when the caller does not own the resource and is not allowed by role."""

    def __init__(self, reason: str = "Access denied"):
        super().__init__(reason)


class AuthenticationRequiredError(BalloonStudioError):
    """Raised when a request carries no caller identity."""

    def __init__(self) -> None:
        super().__init__("Authentication required")


class ConcurrentUpdateError(BalloonStudioError):
    """Raised when an optimistic transaction keeps conflicting."""

    def __init__(self, keys: list[str], attempts: int):
        self.keys = keys
        self.attempts = attempts
        super().__init__(
            f"Concurrent update on {', '.join(keys)} after {attempts} attempts; retry the request"
        )

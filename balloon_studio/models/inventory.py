"""Balloon stock models."""

from datetime import datetime
from enum import Enum

from pydantic import Field, computed_field

from balloon_studio.models.base import CamelModel, utcnow

DEFAULT_THRESHOLD = 20


class BalloonColor(str, Enum):
    """Colors the studio stocks."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    PINK = "pink"
    ORANGE = "orange"
    WHITE = "white"
    BLACK = "black"
    SILVER = "silver"
    GOLD = "gold"


class BalloonSize(str, Enum):
    """The two balloon sizes tracked in stock."""

    SMALL = "11inch"
    LARGE = "16inch"

    @property
    def category(self) -> str:
        """Requirement key for this size ('small' or 'large')."""
        return "small" if self is BalloonSize.SMALL else "large"

    @classmethod
    def for_category(cls, category: str) -> "BalloonSize":
        """Map 'small'/'large' to a size."""
        if category == "small":
            return cls.SMALL
        if category == "large":
            return cls.LARGE
        raise ValueError(f"Unknown balloon category: {category}")


class StockStatus(str, Enum):
    """Derived stock level of a record."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


def calculate_stock_status(quantity: int, threshold: int) -> StockStatus:
    """Classify a quantity against its low-stock threshold."""
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity < threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class StockRecord(CamelModel):
    """Stock level for one (color, size) pair."""

    color: BalloonColor
    size: BalloonSize
    quantity: int = Field(default=0, ge=0)
    threshold: int = Field(default=DEFAULT_THRESHOLD, ge=0)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def status(self) -> StockStatus:
        """Stock status, always recomputed from quantity and threshold."""
        return calculate_stock_status(self.quantity, self.threshold)

    @property
    def key(self) -> tuple[str, str]:
        return (self.color.value, self.size.value)

    @property
    def needs_restock(self) -> bool:
        """Check if the record is low or out of stock."""
        return self.status is not StockStatus.IN_STOCK

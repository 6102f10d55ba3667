"""Accessory stock models."""

from datetime import datetime

from pydantic import Field, computed_field

from balloon_studio.models.base import CamelModel, utcnow
from balloon_studio.models.inventory import StockStatus, calculate_stock_status

DEFAULT_ACCESSORY_THRESHOLD = 5


class Accessory(CamelModel):
    """Non-balloon supply (pumps, weights, ribbon) tracked by count."""

    id: int
    name: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    threshold: int = Field(default=DEFAULT_ACCESSORY_THRESHOLD, ge=0)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def status(self) -> StockStatus:
        """Same rule as balloon stock: derived, never stored."""
        return calculate_stock_status(self.quantity, self.threshold)


class DesignAccessory(CamelModel):
    """An accessory attached to a design, with how many the design uses."""

    accessory: Accessory
    quantity: int = Field(ge=1)

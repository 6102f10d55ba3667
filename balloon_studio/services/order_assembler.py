"""Turns stock shortfalls or explicit lines into priced order items."""

from typing import Iterable, Mapping

from pydantic import Field

from balloon_studio.errors import ValidationError
from balloon_studio.models.availability import AvailabilityLine, AvailabilityStatus
from balloon_studio.models.base import CamelModel
from balloon_studio.models.inventory import BalloonColor, BalloonSize
from balloon_studio.models.order import OrderItem
from balloon_studio.services.catalog import PriceTable, parse_color


class OrderLineRequest(CamelModel):
    """Caller-supplied order line. Unit price defaults to the price table."""

    color: str
    size: BalloonSize
    quantity: int = Field(ge=0, strict=True)
    unit_price: int | None = Field(default=None, ge=0, strict=True)


class OrderDraft(CamelModel):
    """Priced items and totals, ready to be persisted as an order."""

    items: list[OrderItem] = Field(default_factory=list)
    total_quantity: int = 0
    total_cost: int = 0


class OrderAssembler:
    """Builds order items with integer-cent pricing."""

    def __init__(self, prices: PriceTable):
        self.prices = prices

    def _item(
        self,
        color: BalloonColor,
        size: BalloonSize,
        quantity: int,
        unit_price: int | None = None,
    ) -> OrderItem:
        item = OrderItem(
            color=color,
            size=size,
            quantity=quantity,
            unit_price=self.prices.unit_price(size) if unit_price is None else unit_price,
        )
        item.calculate_subtotal()
        return item

    @staticmethod
    def _draft(items: list[OrderItem]) -> OrderDraft:
        if not items:
            raise ValidationError("Order must contain at least one item")
        return OrderDraft(
            items=items,
            total_quantity=sum(item.quantity for item in items),
            total_cost=sum(item.subtotal for item in items),
        )

    def build_order(
        self,
        lines: Iterable[AvailabilityLine],
        quantities: Mapping[tuple[str, BalloonSize], int] | None = None,
    ) -> OrderDraft:
        """
        Order exactly the shortfall of each unavailable line.

        Args:
            lines: Availability lines; only unavailable ones are ordered
            quantities: Caller overrides keyed by (color, size). Used as-is;
                zero drops the line.

        Returns:
            Draft with one item per ordered line
        """
        quantities = quantities or {}
        items = []

        for line in lines:
            if line.status is not AvailabilityStatus.UNAVAILABLE:
                continue

            quantity = quantities.get((line.color, line.size), line.shortfall)
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
                raise ValidationError(
                    f"Invalid quantity for {line.label}: {quantity!r}",
                    errors=[{"color": line.color, "size": line.size.value}],
                )
            if quantity == 0:
                continue

            items.append(self._item(parse_color(line.color), line.size, quantity))

        return self._draft(items)

    def build_from_lines(self, lines: Iterable[OrderLineRequest]) -> OrderDraft:
        """Price explicit lines, keeping any caller-supplied unit price."""
        items = [
            self._item(parse_color(line.color), line.size, line.quantity, line.unit_price)
            for line in lines
            if line.quantity > 0
        ]
        return self._draft(items)

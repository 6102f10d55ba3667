"""Inventory reconciliation: applying consumption and replenishment to stock."""

from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from balloon_studio.errors import (
    InsufficientStockError,
    StockShortage,
    ValidationError,
)
from balloon_studio.models.design import MaterialRequirements
from balloon_studio.models.inventory import (
    DEFAULT_THRESHOLD,
    BalloonColor,
    BalloonSize,
    StockRecord,
)
from balloon_studio.models.order import OrderItem
from balloon_studio.services.availability import validate_requirements
from balloon_studio.services.catalog import parse_color
from balloon_studio.state.inventory import InventoryStore, StockKey
from balloon_studio.state.manager import LinkedWrite
from balloon_studio.utils.logging import InventoryLogger


class StockAdjustment(BaseModel):
    """Signed change to one stock line."""

    color: BalloonColor
    size: BalloonSize
    delta: int

    @property
    def key(self) -> StockKey:
        return (self.color, self.size)


def _require_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError(
            f"Quantity must be a positive integer, got {quantity!r}",
            errors=[{"field": "quantity", "value": repr(quantity)}],
        )
    return quantity


def merge_adjustments(adjustments: Iterable[StockAdjustment]) -> dict[StockKey, int]:
    """Sum deltas per (color, size), dropping lines that cancel out."""
    merged: dict[StockKey, int] = {}
    for adjustment in adjustments:
        merged[adjustment.key] = merged.get(adjustment.key, 0) + adjustment.delta
    return {key: delta for key, delta in merged.items() if delta != 0}


def plan_adjustments(
    current: Mapping[StockKey, StockRecord | None],
    deltas: Mapping[StockKey, int],
    default_threshold: int = DEFAULT_THRESHOLD,
) -> dict[StockKey, StockRecord]:
    """
    Compute the records that result from applying deltas.

    Increments on a missing record create it with the default threshold.
    Any line that would go negative fails the whole plan, and every such
    line is reported.
    """
    shortages: list[StockShortage] = []
    planned: dict[StockKey, StockRecord] = {}

    for (color, size), delta in deltas.items():
        record = current.get((color, size))
        on_hand = record.quantity if record else 0
        new_quantity = on_hand + delta

        if new_quantity < 0:
            shortages.append(
                StockShortage(
                    color=color.value,
                    size=size.value,
                    requested=-delta,
                    available=on_hand,
                )
            )
            continue

        if record is None:
            planned[(color, size)] = StockRecord(
                color=color,
                size=size,
                quantity=new_quantity,
                threshold=default_threshold,
            )
        else:
            planned[(color, size)] = record.model_copy(update={"quantity": new_quantity})

    if shortages:
        raise InsufficientStockError(shortages)

    return planned


class InventoryReconciler:
    """
    Applies stock changes atomically.

    A batch (a whole design's consumption or a whole order's replenishment)
    is written all-or-nothing: either every line is updated or none is.
    """

    def __init__(
        self,
        store: InventoryStore,
        default_threshold: int = DEFAULT_THRESHOLD,
        audit: InventoryLogger | None = None,
    ):
        self.store = store
        self.default_threshold = default_threshold
        self.audit = audit or InventoryLogger("inventory_reconciler")

    async def consume(
        self,
        color: BalloonColor,
        size: BalloonSize,
        quantity: int,
        reason: str = "consumption",
    ) -> StockRecord:
        """Take balloons out of stock; fails without change if not enough."""
        quantity = _require_quantity(quantity)
        records = await self.apply(
            [StockAdjustment(color=color, size=size, delta=-quantity)],
            reason=reason,
        )
        return records[0]

    async def replenish(
        self,
        color: BalloonColor,
        size: BalloonSize,
        quantity: int,
        reason: str = "replenishment",
    ) -> StockRecord:
        """Add balloons to stock, creating the record if needed."""
        quantity = _require_quantity(quantity)
        records = await self.apply(
            [StockAdjustment(color=color, size=size, delta=quantity)],
            reason=reason,
        )
        return records[0]

    async def consume_requirements(
        self,
        requirements: Mapping[str, Any] | MaterialRequirements,
        reason: str = "design_consumption",
        **context: Any,
    ) -> list[StockRecord]:
        """Consume a color -> {small, large} mapping as one batch."""
        validated = validate_requirements(requirements)

        adjustments = []
        for color_name, requirement in validated.items():
            color = parse_color(color_name)
            for size in (BalloonSize.SMALL, BalloonSize.LARGE):
                count = getattr(requirement, size.category)
                if count:
                    adjustments.append(StockAdjustment(color=color, size=size, delta=-count))

        return await self.apply(adjustments, reason=reason, **context)

    async def replenish_items(
        self,
        items: Iterable[OrderItem],
        reason: str = "order_received",
        linked: LinkedWrite | None = None,
        **context: Any,
    ) -> list[StockRecord]:
        """
        Add every line of an order to stock as one batch.

        With ``linked`` (the order record itself), the order write and the
        stock change commit together.
        """
        adjustments = [
            StockAdjustment(color=item.color, size=item.size, delta=item.quantity)
            for item in items
        ]
        return await self.apply(adjustments, reason=reason, linked=linked, **context)

    async def apply(
        self,
        adjustments: list[StockAdjustment],
        reason: str,
        linked: LinkedWrite | None = None,
        **context: Any,
    ) -> list[StockRecord]:
        """
        Apply a batch of adjustments in one atomic update.

        Args:
            adjustments: Signed changes; several on the same line are summed
            reason: Why stock is changing, for the audit log
            linked: Another record to write in the same transaction
            context: Extra audit fields (design_id, order_id, ...)

        Returns:
            Resulting records, one per distinct (color, size)
        """
        deltas = merge_adjustments(adjustments)
        if not deltas and linked is None:
            return []

        before: dict[StockKey, StockRecord | None] = {}

        def _mutate(current: dict[StockKey, StockRecord | None]) -> dict[StockKey, StockRecord]:
            before.clear()
            before.update(current)
            return plan_adjustments(current, deltas, self.default_threshold)

        try:
            written = await self.store.modify(list(deltas), _mutate, linked=linked)
        except InsufficientStockError as e:
            self.audit.log_rejected(reason=reason, error=str(e), **context)
            raise

        for key, delta in deltas.items():
            color, size = key
            previous = before.get(key)
            if previous is None:
                self.audit.log_created(
                    color=color.value,
                    size=size.value,
                    quantity=written[key].quantity,
                    threshold=written[key].threshold,
                    reason=reason,
                    **context,
                )
            else:
                self.audit.log_adjustment(
                    color=color.value,
                    size=size.value,
                    delta=delta,
                    before=previous.quantity,
                    after=written[key].quantity,
                    reason=reason,
                    **context,
                )

        return [written[key] for key in deltas]

"""Order workflow: placing supplier orders and moving them through their lifecycle."""

from datetime import datetime

from balloon_studio.errors import AccessDeniedError, ConcurrentUpdateError, ValidationError
from balloon_studio.models.base import utcnow
from balloon_studio.models.inventory import BalloonColor, BalloonSize
from balloon_studio.models.order import Order, OrderItem, OrderPriority, OrderStatus
from balloon_studio.models.user import CurrentUser
from balloon_studio.services.availability import AvailabilityEvaluator
from balloon_studio.services.order_assembler import OrderAssembler, OrderDraft, OrderLineRequest
from balloon_studio.services.reconciler import InventoryReconciler
from balloon_studio.state.designs import DesignStore
from balloon_studio.state.inventory import InventoryStore
from balloon_studio.state.orders import OrderStore
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Supplier orders for balloons.

    Responsibilities:
    - Build orders from explicit lines, from a design's shortfall, or from
      the simplified single-line form
    - Enforce the status transition table
    - Add ordered balloons to stock exactly once per order
    """

    def __init__(
        self,
        orders: OrderStore,
        designs: DesignStore,
        inventory: InventoryStore,
        reconciler: InventoryReconciler,
        assembler: OrderAssembler,
        evaluator: AvailabilityEvaluator,
        max_simple_quantity: int = 100,
    ):
        self.orders = orders
        self.designs = designs
        self.inventory = inventory
        self.reconciler = reconciler
        self.assembler = assembler
        self.evaluator = evaluator
        self.max_simple_quantity = max_simple_quantity

    async def _persist(
        self,
        user: CurrentUser,
        draft: OrderDraft,
        design_id: int | None = None,
        supplier_name: str | None = None,
        priority: OrderPriority = OrderPriority.NORMAL,
        expected_delivery_date: datetime | None = None,
        notes: str | None = None,
        restock_now: bool = False,
    ) -> Order:
        order = Order(
            id=await self.orders.next_id(),
            user_id=user.id,
            design_id=design_id,
            supplier_name=supplier_name,
            priority=priority,
            expected_delivery_date=expected_delivery_date,
            notes=notes,
            items=draft.items,
            total_quantity=draft.total_quantity,
            total_cost=draft.total_cost,
        )

        if not restock_now:
            return await self.orders.create_order(order)

        order.inventory_applied = True
        creation = self.orders.creation(order)
        await self.reconciler.replenish_items(
            order.items,
            reason="order_placed",
            linked=creation,
            order_id=order.id,
            design_id=design_id,
        )
        created = Order(**creation.result)
        self.orders.log_created(created)
        return created

    async def get_order(self, user: CurrentUser, order_id: int) -> Order:
        """Load an order the caller owns (or any order for admins)."""
        order = await self.orders.require_order(order_id)
        if not user.can_access(order.user_id):
            raise AccessDeniedError(f"Order {order_id} belongs to another user")
        return order

    async def list_orders(self, user: CurrentUser) -> list[Order]:
        return await self.orders.list_for_user(user.id)

    async def list_design_orders(self, user: CurrentUser, design_id: int) -> list[Order]:
        design = await self.designs.require_design(design_id)
        if not user.can_access(design.user_id):
            raise AccessDeniedError(f"Design {design_id} belongs to another user")
        return await self.orders.list_for_design(design_id)

    async def create_order(
        self,
        user: CurrentUser,
        lines: list[OrderLineRequest],
        **details,
    ) -> Order:
        """Create a pending order from explicit lines."""
        design_id = details.get("design_id")
        if design_id is not None:
            design = await self.designs.require_design(design_id)
            if not user.can_access(design.user_id):
                raise AccessDeniedError(f"Design {design_id} belongs to another user")

        draft = self.assembler.build_from_lines(lines)
        return await self._persist(user, draft, **details)

    async def create_design_order(
        self,
        user: CurrentUser,
        design_id: int,
        lines: list[OrderLineRequest] | None = None,
        **details,
    ) -> Order:
        """
        Order the balloons a design is missing and restock them immediately.

        Without explicit lines, the design's requirements are checked against
        current stock and exactly the shortfall of each unavailable line is
        ordered.
        """
        design = await self.designs.require_design(design_id)
        if not user.can_access(design.user_id):
            raise AccessDeniedError(f"Design {design_id} belongs to another user")

        if lines:
            draft = self.assembler.build_from_lines(lines)
        else:
            if not design.material_requirements:
                raise ValidationError("Design has no material requirements")
            report = self.evaluator.evaluate(
                design.material_requirements, await self.inventory.list_items()
            )
            if not report.unavailable_items:
                raise ValidationError("Nothing to order: all balloons for this design are in stock")
            draft = self.assembler.build_order(report.unavailable_items)

        details.setdefault("notes", f"Order for design #{design_id}")
        return await self._persist(
            user, draft, design_id=design_id, restock_now=True, **details
        )

    async def create_balloon_order(
        self,
        user: CurrentUser,
        color: BalloonColor,
        size: BalloonSize,
        quantity: int,
        event_name: str | None = None,
    ) -> Order:
        """Single-line order from the simplified form."""
        if not 1 <= quantity <= self.max_simple_quantity:
            raise ValidationError(
                f"Please choose between 1 and {self.max_simple_quantity} balloons",
                errors=[{"field": "quantity", "value": quantity}],
            )

        draft = self.assembler.build_from_lines(
            [OrderLineRequest(color=color.value, size=size, quantity=quantity)]
        )
        notes = (
            f"Balloons for {event_name}: {quantity} {color.value} {size.value}"
            if event_name
            else f"Balloon order: {quantity} {color.value} {size.value}"
        )
        return await self._persist(user, draft, supplier_name="Store Inventory", notes=notes)

    async def add_item(self, user: CurrentUser, order_id: int, line: OrderLineRequest) -> Order:
        """Append a line to a pending order and recompute its totals."""
        await self.get_order(user, order_id)
        draft = self.assembler.build_from_lines([line])

        def _add(order: Order) -> None:
            if order.status is not OrderStatus.PENDING:
                raise ValidationError(
                    f"Items can only be added to pending orders (order is {order.status.value})"
                )
            for item in draft.items:
                order.add_item(item.model_copy())
            order.updated_at = utcnow()

        order = await self.orders.update_order(order_id, _add)
        logger.info("order_item_added", order_id=order_id, total_cost=order.total_cost)
        return order

    async def update_order(
        self,
        user: CurrentUser,
        order_id: int,
        status: OrderStatus | None = None,
        notes: str | None = None,
        supplier_name: str | None = None,
        expected_delivery_date: datetime | None = None,
        priority: OrderPriority | None = None,
    ) -> Order:
        """
        Update an order's details and/or status.

        Every requested status goes through the transition table, including
        a request for the status the order already has. Moving to
        ``completed`` writes the status change and the restock in one
        transaction, so the ordered balloons are added to stock exactly once
        and never without the order recording it. Cancelling never changes
        stock.
        """
        if all(
            value is None
            for value in (status, notes, supplier_name, expected_delivery_date, priority)
        ):
            raise ValidationError("No valid update fields provided")

        previous = await self.get_order(user, order_id)
        restock = status is OrderStatus.COMPLETED and not previous.inventory_applied

        def _update(order: Order) -> None:
            if status is not None:
                order.transition_to(status, note=notes)
                if restock:
                    if order.inventory_applied or order.items != previous.items:
                        raise ConcurrentUpdateError([f"order:{order_id}"], 1)
                    order.inventory_applied = True

            if notes is not None:
                order.notes = notes
            if supplier_name is not None:
                order.supplier_name = supplier_name
            if expected_delivery_date is not None:
                order.expected_delivery_date = expected_delivery_date
            if priority is not None:
                order.priority = priority
            order.updated_at = utcnow()

        if restock:
            change = self.orders.change(order_id, _update)
            await self.reconciler.replenish_items(
                previous.items, reason="order_completed", linked=change, order_id=order_id
            )
            order = Order(**change.result)
        else:
            order = await self.orders.update_order(order_id, _update)

        if order.status is not previous.status:
            logger.info(
                "order_status_changed",
                order_id=order_id,
                from_status=previous.status.value,
                to_status=order.status.value,
                restocked=restock,
            )

        return order

    @staticmethod
    def items_summary(items: list[OrderItem]) -> str:
        return ", ".join(f"{i.quantity} {i.color.value} {i.size.value}" for i in items)

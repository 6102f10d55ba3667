"""Order-related data models."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field

from balloon_studio.errors import InvalidTransitionError
from balloon_studio.models.base import CamelModel, utcnow
from balloon_studio.models.inventory import BalloonColor, BalloonSize


class OrderStatus(str, Enum):
    """Order status progression."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderTransitions:
    """Valid order status transitions. Completed and cancelled are terminal."""

    TRANSITIONS = {
        OrderStatus.PENDING: [OrderStatus.PROCESSING, OrderStatus.CANCELLED],
        OrderStatus.PROCESSING: [
            OrderStatus.SHIPPED,
            OrderStatus.COMPLETED,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.SHIPPED: [OrderStatus.COMPLETED, OrderStatus.CANCELLED],
        OrderStatus.COMPLETED: [],
        OrderStatus.CANCELLED: [],
    }

    @classmethod
    def can_transition(cls, from_state: OrderStatus, to_state: OrderStatus) -> bool:
        """Check if a state transition is valid."""
        return to_state in cls.TRANSITIONS.get(from_state, [])

    @classmethod
    def allowed_from(cls, state: OrderStatus) -> list[OrderStatus]:
        return list(cls.TRANSITIONS.get(state, []))


class OrderPriority(str, Enum):
    """How quickly the supplier should deliver."""

    NORMAL = "normal"
    RUSH = "rush"
    URGENT = "urgent"


class OrderItem(CamelModel):
    """Individual line in an order. Money is in integer cents."""

    id: UUID = Field(default_factory=uuid4)
    inventory_type: str = "balloon"
    color: BalloonColor
    size: BalloonSize
    quantity: int = Field(ge=1)
    unit_price: int = Field(ge=0)
    subtotal: int = Field(default=0, ge=0)

    def calculate_subtotal(self) -> int:
        """Calculate subtotal for this item."""
        self.subtotal = self.unit_price * self.quantity
        return self.subtotal


class StatusChange(CamelModel):
    """Entry in an order's status history."""

    status: OrderStatus
    note: str | None = None
    changed_at: datetime = Field(default_factory=utcnow)


class Order(CamelModel):
    """Supplier order for balloons."""

    id: int
    user_id: int
    design_id: int | None = None
    status: OrderStatus = OrderStatus.PENDING

    # Supplier details
    supplier_name: str | None = None
    expected_delivery_date: datetime | None = None
    priority: OrderPriority = OrderPriority.NORMAL
    notes: str | None = None

    # Items
    items: list[OrderItem] = Field(default_factory=list)

    # Totals
    total_quantity: int = Field(default=0, ge=0)
    total_cost: int = Field(default=0, ge=0)

    # Whether the ordered balloons have been added to stock
    inventory_applied: bool = False

    status_history: list[StatusChange] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def calculate_totals(self) -> None:
        """Recalculate quantity and cost totals from the items."""
        self.total_quantity = sum(item.quantity for item in self.items)
        self.total_cost = sum(item.subtotal for item in self.items)

    def add_item(self, item: OrderItem) -> None:
        """Add an item to the order."""
        item.calculate_subtotal()
        self.items.append(item)
        self.calculate_totals()

    @property
    def is_terminal(self) -> bool:
        return not OrderTransitions.allowed_from(self.status)

    def can_transition_to(self, status: OrderStatus) -> bool:
        return OrderTransitions.can_transition(self.status, status)

    def transition_to(self, status: OrderStatus, note: str | None = None) -> None:
        """Move the order to a new status, rejecting moves outside the transition table."""
        if not self.can_transition_to(status):
            raise InvalidTransitionError(self.status.value, status.value)
        self.status = status
        self.updated_at = utcnow()
        self.status_history.append(StatusChange(status=status, note=note))

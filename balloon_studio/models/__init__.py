"""Data models for the balloon studio service."""

from balloon_studio.models.accessory import Accessory, DesignAccessory
from balloon_studio.models.availability import (
    AvailabilityLine,
    AvailabilityReport,
    AvailabilityStatus,
)
from balloon_studio.models.design import (
    ColorRequirement,
    Design,
    DesignElement,
    MaterialRequirements,
)
from balloon_studio.models.inventory import (
    BalloonColor,
    BalloonSize,
    StockRecord,
    StockStatus,
    calculate_stock_status,
)
from balloon_studio.models.order import (
    Order,
    OrderItem,
    OrderPriority,
    OrderStatus,
    OrderTransitions,
    StatusChange,
)
from balloon_studio.models.production import ProductionRecord, ProductionStatus
from balloon_studio.models.user import CurrentUser, UserRole

__all__ = [
    # Accessory
    "Accessory",
    "DesignAccessory",
    # Availability
    "AvailabilityLine",
    "AvailabilityReport",
    "AvailabilityStatus",
    # Design
    "ColorRequirement",
    "Design",
    "DesignElement",
    "MaterialRequirements",
    # Inventory
    "BalloonColor",
    "BalloonSize",
    "StockRecord",
    "StockStatus",
    "calculate_stock_status",
    # Order
    "Order",
    "OrderItem",
    "OrderPriority",
    "OrderStatus",
    "OrderTransitions",
    "StatusChange",
    # Production
    "ProductionRecord",
    "ProductionStatus",
    # User
    "CurrentUser",
    "UserRole",
]

"""Business logic for designs, stock and orders."""

from balloon_studio.services.accessories import AccessoryService
from balloon_studio.services.availability import (
    AvailabilityEvaluator,
    overall_status,
    validate_requirements,
)
from balloon_studio.services.catalog import (
    COLOR_TABLE,
    PriceTable,
    format_cents,
    parse_color,
    parse_size,
    resolve_color,
)
from balloon_studio.services.designs import DesignService
from balloon_studio.services.order_assembler import OrderAssembler, OrderDraft, OrderLineRequest
from balloon_studio.services.orders import OrderService
from balloon_studio.services.reconciler import InventoryReconciler, StockAdjustment
from balloon_studio.services.requirements import RequirementExtractor, RequirementSummary

__all__ = [
    "AccessoryService",
    "AvailabilityEvaluator",
    "overall_status",
    "validate_requirements",
    "COLOR_TABLE",
    "PriceTable",
    "format_cents",
    "parse_color",
    "parse_size",
    "resolve_color",
    "DesignService",
    "OrderAssembler",
    "OrderDraft",
    "OrderLineRequest",
    "OrderService",
    "InventoryReconciler",
    "StockAdjustment",
    "RequirementExtractor",
    "RequirementSummary",
]

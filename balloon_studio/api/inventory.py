"""Stock record endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import Field

from balloon_studio.api.deps import (
    get_current_user,
    get_evaluator,
    get_inventory_store,
    require_inventory_manager,
)
from balloon_studio.config import get_settings
from balloon_studio.errors import ValidationError
from balloon_studio.models.availability import AvailabilityReport
from balloon_studio.models.base import CamelModel
from balloon_studio.models.inventory import StockRecord
from balloon_studio.models.user import CurrentUser
from balloon_studio.services.availability import AvailabilityEvaluator
from balloon_studio.services.catalog import parse_color, parse_size
from balloon_studio.state.inventory import InventoryStore

router = APIRouter(prefix="/inventory", tags=["inventory"])


# Request/Response Models


class CreateStockRequest(CamelModel):
    """Request to create a stock record."""

    color: str
    size: str
    quantity: int = Field(default=0, ge=0)
    threshold: int | None = Field(default=None, ge=0)


class UpdateStockRequest(CamelModel):
    """Manual stock edit; at least one field is required."""

    quantity: int | None = Field(default=None, ge=0)
    threshold: int | None = Field(default=None, ge=0)


class CheckAvailabilityRequest(CamelModel):
    """Per-color balloon counts to check against stock."""

    balloon_counts: dict[str, Any]


# Routes


@router.get("", response_model=list[StockRecord])
async def list_inventory(
    user: CurrentUser = Depends(get_current_user),
    store: InventoryStore = Depends(get_inventory_store),
) -> list[StockRecord]:
    """Get every stock record."""
    return await store.list_items()


@router.get("/color/{color}", response_model=list[StockRecord])
async def list_inventory_by_color(
    color: str,
    user: CurrentUser = Depends(get_current_user),
    store: InventoryStore = Depends(get_inventory_store),
) -> list[StockRecord]:
    return await store.list_by_color(parse_color(color))


@router.get("/restock", response_model=list[StockRecord])
async def list_restock_needed(
    user: CurrentUser = Depends(get_current_user),
    store: InventoryStore = Depends(get_inventory_store),
) -> list[StockRecord]:
    """Get records that are low or out of stock."""
    return await store.list_needing_restock()


@router.post("", response_model=StockRecord, status_code=status.HTTP_201_CREATED)
async def create_stock_record(
    request: CreateStockRequest,
    user: CurrentUser = Depends(require_inventory_manager),
    store: InventoryStore = Depends(get_inventory_store),
) -> StockRecord:
    threshold = (
        request.threshold
        if request.threshold is not None
        else get_settings().default_stock_threshold
    )
    record = StockRecord(
        color=parse_color(request.color),
        size=parse_size(request.size),
        quantity=request.quantity,
        threshold=threshold,
    )
    return await store.create_item(record)


@router.patch("/{color}/{size}", response_model=StockRecord)
async def update_stock_record(
    color: str,
    size: str,
    request: UpdateStockRequest,
    user: CurrentUser = Depends(require_inventory_manager),
    store: InventoryStore = Depends(get_inventory_store),
) -> StockRecord:
    """Manually set quantity and/or threshold; status is recomputed."""
    if request.quantity is None and request.threshold is None:
        raise ValidationError("No valid update fields provided")

    return await store.update_item(
        parse_color(color),
        parse_size(size),
        quantity=request.quantity,
        threshold=request.threshold,
    )


@router.post("/check-availability", response_model=AvailabilityReport)
async def check_availability(
    request: CheckAvailabilityRequest,
    user: CurrentUser = Depends(get_current_user),
    store: InventoryStore = Depends(get_inventory_store),
    evaluator: AvailabilityEvaluator = Depends(get_evaluator),
) -> AvailabilityReport:
    """
    Check per-color balloon counts against current stock.

    Returns whether everything is available, the missing lines and the
    per-color breakdown.
    """
    return evaluator.evaluate(request.balloon_counts, await store.list_items())

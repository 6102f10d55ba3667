"""Design endpoints: CRUD, inventory checks, consumption and ordering."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import Field

from balloon_studio.api.deps import get_current_user, get_design_service, get_order_service
from balloon_studio.models.availability import AvailabilityLine, AvailabilityReport
from balloon_studio.models.base import CamelModel
from balloon_studio.models.design import Design, DesignElement
from balloon_studio.models.order import Order, OrderPriority
from balloon_studio.models.production import ProductionRecord
from balloon_studio.models.user import CurrentUser
from balloon_studio.services.designs import DesignService
from balloon_studio.services.order_assembler import OrderLineRequest
from balloon_studio.services.orders import OrderService
from balloon_studio.services.requirements import RequirementSummary

router = APIRouter(prefix="/designs", tags=["designs"])


# Request/Response Models


class DesignFields(CamelModel):
    client_name: str | None = None
    project_name: str | None = None
    event_type: str | None = None
    event_date: str | None = None
    notes: str | None = None
    background_url: str | None = None


class CreateDesignRequest(DesignFields):
    """Request to create a design from canvas elements."""

    elements: list[DesignElement] = Field(default_factory=list)


class UpdateDesignRequest(DesignFields):
    elements: list[DesignElement] | None = None


class CreateDesignResponse(CamelModel):
    """Created design with its balloon analysis."""

    design: Design
    analysis: RequirementSummary


class CheckInventoryRequest(CamelModel):
    material_requirements: dict[str, Any] | None = None


class InventoryCheckResponse(AvailabilityReport):
    """Availability report with the lines split by outcome."""

    available_lines: list[AvailabilityLine]
    unavailable_lines: list[AvailabilityLine]


class SaveToInventoryRequest(CamelModel):
    material_counts: dict[str, Any] | None = None


class SaveToInventoryResponse(CamelModel):
    message: str
    production: ProductionRecord


class DesignOrderRequest(CamelModel):
    """Order for a design; without items the design's shortfall is ordered."""

    items: list[OrderLineRequest] | None = None
    supplier_name: str | None = None
    priority: OrderPriority = OrderPriority.NORMAL
    expected_delivery_date: datetime | None = None
    notes: str | None = None


# Routes


@router.post("", response_model=CreateDesignResponse, status_code=status.HTTP_201_CREATED)
async def create_design(
    request: CreateDesignRequest,
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> CreateDesignResponse:
    """
    Create a design.

    Balloon requirements are extracted from the canvas elements and stored
    with the design.
    """
    fields = request.model_dump(exclude={"elements"}, exclude_none=True)
    design, summary = await service.create_design(user, request.elements, **fields)
    return CreateDesignResponse(design=design, analysis=summary)


@router.get("", response_model=list[Design])
async def list_designs(
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> list[Design]:
    return await service.list_designs(user)


@router.get("/{design_id}", response_model=Design)
async def get_design(
    design_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> Design:
    return await service.get_design(user, design_id)


@router.patch("/{design_id}", response_model=Design)
async def update_design(
    design_id: int,
    request: UpdateDesignRequest,
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> Design:
    fields = request.model_dump(exclude={"elements"}, exclude_none=True)
    return await service.update_design(user, design_id, elements=request.elements, **fields)


@router.post("/{design_id}/check-inventory", response_model=InventoryCheckResponse)
async def check_design_inventory(
    design_id: int,
    request: CheckInventoryRequest = CheckInventoryRequest(),
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> InventoryCheckResponse:
    """Check the design's requirements (or the supplied ones) against stock."""
    report = await service.check_inventory(user, design_id, request.material_requirements)
    return InventoryCheckResponse(
        lines=report.lines,
        status=report.status,
        available_lines=report.available_items,
        unavailable_lines=report.unavailable_items,
    )


@router.post("/{design_id}/save-to-inventory", response_model=SaveToInventoryResponse)
async def save_to_inventory(
    design_id: int,
    request: SaveToInventoryRequest = SaveToInventoryRequest(),
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> SaveToInventoryResponse:
    """
    Take the design's balloons out of stock and start production.

    Fails with 400 and every short line if stock cannot cover the counts;
    stock is left untouched in that case.
    """
    production = await service.save_to_inventory(user, design_id, request.material_counts)
    return SaveToInventoryResponse(
        message="Inventory updated successfully",
        production=production,
    )


@router.post("/{design_id}/order", response_model=Order, status_code=status.HTTP_201_CREATED)
async def order_for_design(
    design_id: int,
    request: DesignOrderRequest = DesignOrderRequest(),
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Order balloons for a design; stock is replenished immediately."""
    details = request.model_dump(exclude={"items"}, exclude_none=True)
    return await service.create_design_order(user, design_id, request.items, **details)


@router.get("/{design_id}/production", response_model=list[ProductionRecord])
async def list_design_production(
    design_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> list[ProductionRecord]:
    return await service.list_production(user, design_id)

"""Order and production endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import Field

from balloon_studio.api.deps import get_current_user, get_design_service, get_order_service
from balloon_studio.models.base import CamelModel
from balloon_studio.models.order import Order, OrderPriority, OrderStatus
from balloon_studio.models.production import ProductionRecord
from balloon_studio.models.user import CurrentUser
from balloon_studio.services.catalog import format_cents, parse_color, parse_size
from balloon_studio.services.designs import DesignService
from balloon_studio.services.order_assembler import OrderLineRequest
from balloon_studio.services.orders import OrderService

router = APIRouter(tags=["orders"])


# Request/Response Models


class CreateOrderRequest(CamelModel):
    """Request to create an order from explicit lines."""

    items: list[OrderLineRequest]
    design_id: int | None = None
    supplier_name: str | None = None
    priority: OrderPriority = OrderPriority.NORMAL
    expected_delivery_date: datetime | None = None
    notes: str | None = None


class UpdateOrderRequest(CamelModel):
    status: OrderStatus | None = None
    notes: str | None = None
    supplier_name: str | None = None
    expected_delivery_date: datetime | None = None
    priority: OrderPriority | None = None


class BalloonOrderRequest(CamelModel):
    """Simplified single-line order."""

    color: str
    size: str
    quantity: int
    event_name: str | None = None


class BalloonOrderResponse(CamelModel):
    message: str
    formatted_total: str
    order: Order


class CompleteProductionRequest(CamelModel):
    actual_time: str | None = Field(default=None, max_length=100)


# Routes


@router.get("/orders", response_model=list[Order])
async def list_orders(
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> list[Order]:
    return await service.list_orders(user)


@router.post("/orders", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: CreateOrderRequest,
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Create a pending order; stock is replenished when it completes."""
    details = request.model_dump(exclude={"items"}, exclude_none=True)
    return await service.create_order(user, request.items, **details)


@router.post(
    "/orders/balloon",
    response_model=BalloonOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_balloon_order(
    request: BalloonOrderRequest,
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> BalloonOrderResponse:
    """
    Simplified order form: one color, one size, a bounded quantity.

    Color and size are checked against the stocked enumerations.
    """
    order = await service.create_balloon_order(
        user,
        color=parse_color(request.color),
        size=parse_size(request.size),
        quantity=request.quantity,
        event_name=request.event_name,
    )
    return BalloonOrderResponse(
        message=f"Your order for {service.items_summary(order.items)} balloons is on its way!",
        formatted_total=format_cents(order.total_cost),
        order=order,
    )


@router.get("/orders/design/{design_id}", response_model=list[Order])
async def list_design_orders(
    design_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> list[Order]:
    return await service.list_design_orders(user, design_id)


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> Order:
    return await service.get_order(user, order_id)


@router.patch("/orders/{order_id}", response_model=Order)
async def update_order(
    order_id: int,
    request: UpdateOrderRequest,
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> Order:
    """
    Update an order's status and details.

    Status changes must follow the order lifecycle; completing an order
    adds its balloons to stock if that has not happened yet.
    """
    return await service.update_order(user, order_id, **request.model_dump())


@router.post("/orders/{order_id}/items", response_model=Order, status_code=status.HTTP_201_CREATED)
async def add_order_item(
    order_id: int,
    request: OrderLineRequest,
    user: CurrentUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> Order:
    return await service.add_item(user, order_id, request)


@router.patch("/production/{production_id}/complete", response_model=ProductionRecord)
async def complete_production(
    production_id: int,
    request: CompleteProductionRequest = CompleteProductionRequest(),
    user: CurrentUser = Depends(get_current_user),
    service: DesignService = Depends(get_design_service),
) -> ProductionRecord:
    return await service.complete_production(user, production_id, request.actual_time)

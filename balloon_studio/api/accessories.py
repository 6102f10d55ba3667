"""Accessory endpoints."""

from fastapi import APIRouter, Depends, status
from pydantic import Field

from balloon_studio.api.deps import (
    get_accessory_service,
    get_current_user,
    require_inventory_manager,
)
from balloon_studio.models.accessory import DEFAULT_ACCESSORY_THRESHOLD, Accessory, DesignAccessory
from balloon_studio.models.base import CamelModel
from balloon_studio.models.user import CurrentUser
from balloon_studio.services.accessories import AccessoryService

router = APIRouter(prefix="/accessories", tags=["accessories"])


# Request/Response Models


class CreateAccessoryRequest(CamelModel):
    name: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    threshold: int = Field(default=DEFAULT_ACCESSORY_THRESHOLD, ge=0)


class UpdateAccessoryRequest(CamelModel):
    """Accessory edit; at least one field is required."""

    name: str | None = Field(default=None, min_length=1)
    quantity: int | None = Field(default=None, ge=0)
    threshold: int | None = Field(default=None, ge=0)


class AddToDesignRequest(CamelModel):
    quantity: int = Field(ge=1)


# Routes


@router.get("", response_model=list[Accessory])
async def list_accessories(
    user: CurrentUser = Depends(get_current_user),
    service: AccessoryService = Depends(get_accessory_service),
) -> list[Accessory]:
    return await service.list_accessories()


@router.get("/design/{design_id}", response_model=list[DesignAccessory])
async def list_design_accessories(
    design_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: AccessoryService = Depends(get_accessory_service),
) -> list[DesignAccessory]:
    """Get the accessories attached to a design the caller owns."""
    return await service.list_for_design(user, design_id)


@router.get("/{accessory_id}", response_model=Accessory)
async def get_accessory(
    accessory_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: AccessoryService = Depends(get_accessory_service),
) -> Accessory:
    return await service.get_accessory(accessory_id)


@router.post("", response_model=Accessory, status_code=status.HTTP_201_CREATED)
async def create_accessory(
    request: CreateAccessoryRequest,
    user: CurrentUser = Depends(require_inventory_manager),
    service: AccessoryService = Depends(get_accessory_service),
) -> Accessory:
    return await service.create_accessory(
        user, request.name, quantity=request.quantity, threshold=request.threshold
    )


@router.patch("/{accessory_id}", response_model=Accessory)
async def update_accessory(
    accessory_id: int,
    request: UpdateAccessoryRequest,
    user: CurrentUser = Depends(require_inventory_manager),
    service: AccessoryService = Depends(get_accessory_service),
) -> Accessory:
    """Edit an accessory; status is recomputed from quantity and threshold."""
    return await service.update_accessory(
        user,
        accessory_id,
        name=request.name,
        quantity=request.quantity,
        threshold=request.threshold,
    )


@router.post(
    "/{accessory_id}/add-to-design/{design_id}",
    response_model=list[DesignAccessory],
)
async def add_accessory_to_design(
    accessory_id: int,
    design_id: int,
    request: AddToDesignRequest,
    user: CurrentUser = Depends(get_current_user),
    service: AccessoryService = Depends(get_accessory_service),
) -> list[DesignAccessory]:
    """Attach an accessory to a design; returns the design's accessories."""
    return await service.add_to_design(user, accessory_id, design_id, request.quantity)

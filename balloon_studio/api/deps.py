"""Request dependencies: caller identity, stores and services."""

from fastapi import Depends, Header

from balloon_studio.config import get_settings
from balloon_studio.errors import AccessDeniedError, AuthenticationRequiredError, ValidationError
from balloon_studio.models.user import CurrentUser, UserRole
from balloon_studio.services.accessories import AccessoryService
from balloon_studio.services.availability import AvailabilityEvaluator
from balloon_studio.services.catalog import PriceTable
from balloon_studio.services.designs import DesignService
from balloon_studio.services.order_assembler import OrderAssembler
from balloon_studio.services.orders import OrderService
from balloon_studio.services.reconciler import InventoryReconciler
from balloon_studio.services.requirements import RequirementExtractor
from balloon_studio.state.accessories import AccessoryStore
from balloon_studio.state.designs import DesignStore, ProductionStore
from balloon_studio.state.inventory import InventoryStore
from balloon_studio.state.manager import StateManager, get_state_manager
from balloon_studio.state.orders import OrderStore


async def get_current_user(
    x_user_id: int | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> CurrentUser:
    """
    Caller identity as forwarded by the session layer.

    The session gateway in front of the service sets ``X-User-Id`` and
    ``X-User-Role``; a request without an id is unauthenticated.
    """
    if x_user_id is None:
        raise AuthenticationRequiredError()
    try:
        role = UserRole(x_user_role) if x_user_role else UserRole.DESIGNER
    except ValueError:
        raise ValidationError(f"Unknown role '{x_user_role}'") from None
    return CurrentUser(id=x_user_id, role=role)


async def require_inventory_manager(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    if not user.can_manage_inventory:
        raise AccessDeniedError("Only admins and inventory managers can edit stock")
    return user


async def get_inventory_store(
    state_manager: StateManager = Depends(get_state_manager),
) -> InventoryStore:
    return InventoryStore(state_manager)


def get_evaluator() -> AvailabilityEvaluator:
    return AvailabilityEvaluator(get_settings().default_stock_threshold)


async def get_reconciler(
    inventory: InventoryStore = Depends(get_inventory_store),
) -> InventoryReconciler:
    return InventoryReconciler(inventory, get_settings().default_stock_threshold)


async def get_design_service(
    state_manager: StateManager = Depends(get_state_manager),
    inventory: InventoryStore = Depends(get_inventory_store),
    reconciler: InventoryReconciler = Depends(get_reconciler),
) -> DesignService:
    return DesignService(
        designs=DesignStore(state_manager),
        productions=ProductionStore(state_manager),
        inventory=inventory,
        reconciler=reconciler,
        extractor=RequirementExtractor.from_settings(),
        evaluator=get_evaluator(),
    )


async def get_order_service(
    state_manager: StateManager = Depends(get_state_manager),
    inventory: InventoryStore = Depends(get_inventory_store),
    reconciler: InventoryReconciler = Depends(get_reconciler),
) -> OrderService:
    settings = get_settings()
    return OrderService(
        orders=OrderStore(state_manager),
        designs=DesignStore(state_manager),
        inventory=inventory,
        reconciler=reconciler,
        assembler=OrderAssembler(PriceTable.from_settings(settings)),
        evaluator=get_evaluator(),
        max_simple_quantity=settings.balloon_order_max_quantity,
    )


async def get_accessory_service(
    state_manager: StateManager = Depends(get_state_manager),
) -> AccessoryService:
    return AccessoryService(AccessoryStore(state_manager), DesignStore(state_manager))

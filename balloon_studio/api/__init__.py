"""HTTP API for the balloon studio service."""

from fastapi import APIRouter

from balloon_studio.api.accessories import router as accessories_router
from balloon_studio.api.designs import router as designs_router
from balloon_studio.api.errors import register_error_handlers
from balloon_studio.api.inventory import router as inventory_router
from balloon_studio.api.orders import router as orders_router

router = APIRouter()
router.include_router(inventory_router)
router.include_router(accessories_router)
router.include_router(designs_router)
router.include_router(orders_router)

__all__ = ["router", "register_error_handlers"]

"""State management modules."""

from balloon_studio.state.accessories import AccessoryStore
from balloon_studio.state.designs import DesignStore, ProductionStore
from balloon_studio.state.inventory import InventoryStore
from balloon_studio.state.manager import LinkedWrite, StateManager
from balloon_studio.state.orders import OrderStore

__all__ = [
    "StateManager",
    "LinkedWrite",
    "InventoryStore",
    "AccessoryStore",
    "DesignStore",
    "ProductionStore",
    "OrderStore",
]

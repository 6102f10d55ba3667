"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from httpx import ASGITransport, AsyncClient

from balloon_studio.main import app
from balloon_studio.models.design import DesignElement
from balloon_studio.models.inventory import BalloonColor, BalloonSize, StockRecord
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


@pytest_asyncio.fixture
async def state_manager() -> AsyncGenerator[StateManager, None]:
    """Create a state manager backed by an in-memory Redis."""
    client = FakeRedis(server=FakeServer(), decode_responses=True)
    manager = StateManager(redis_client=client)
    yield manager
    await manager.disconnect()


@pytest.fixture
def inventory_store(state_manager: StateManager) -> InventoryStore:
    return InventoryStore(state_manager)


@pytest.fixture
def order_store(state_manager: StateManager) -> OrderStore:
    return OrderStore(state_manager)


@pytest.fixture
def design_store(state_manager: StateManager) -> DesignStore:
    return DesignStore(state_manager)


@pytest.fixture
def accessory_service(state_manager: StateManager) -> AccessoryService:
    return AccessoryService(AccessoryStore(state_manager), DesignStore(state_manager))


@pytest.fixture
def reconciler(inventory_store: InventoryStore) -> InventoryReconciler:
    return InventoryReconciler(inventory_store)


@pytest.fixture
def design_service(
    state_manager: StateManager,
    inventory_store: InventoryStore,
    reconciler: InventoryReconciler,
) -> DesignService:
    return DesignService(
        designs=DesignStore(state_manager),
        productions=ProductionStore(state_manager),
        inventory=inventory_store,
        reconciler=reconciler,
        extractor=RequirementExtractor(),
        evaluator=AvailabilityEvaluator(),
    )


@pytest.fixture
def order_service(
    state_manager: StateManager,
    inventory_store: InventoryStore,
    reconciler: InventoryReconciler,
) -> OrderService:
    return OrderService(
        orders=OrderStore(state_manager),
        designs=DesignStore(state_manager),
        inventory=inventory_store,
        reconciler=reconciler,
        assembler=OrderAssembler(PriceTable(small_cents=50, large_cents=75)),
        evaluator=AvailabilityEvaluator(),
    )


@pytest_asyncio.fixture
async def test_client(state_manager: StateManager) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client sharing the in-memory state."""

    async def _state_manager() -> StateManager:
        return state_manager

    app.dependency_overrides[get_state_manager] = _state_manager
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# Sample data fixtures


@pytest.fixture
def designer() -> CurrentUser:
    return CurrentUser(id=1, role=UserRole.DESIGNER)


@pytest.fixture
def other_designer() -> CurrentUser:
    return CurrentUser(id=2, role=UserRole.DESIGNER)


@pytest.fixture
def admin() -> CurrentUser:
    return CurrentUser(id=99, role=UserRole.ADMIN)


@pytest.fixture
def designer_headers() -> dict[str, str]:
    return {"X-User-Id": "1", "X-User-Role": "designer"}


@pytest.fixture
def manager_headers() -> dict[str, str]:
    return {"X-User-Id": "7", "X-User-Role": "inventory_manager"}


@pytest.fixture
def cluster_elements() -> list[DesignElement]:
    """Two red clusters and one blue cluster, plus a non-cluster element."""
    return [
        DesignElement(id="c1", type="balloon-cluster", colors=["red", "white"]),
        DesignElement(id="c2", type="balloon-cluster", colors=["#FF5252"]),
        DesignElement(id="c3", type="balloon-cluster", colors=["Blue"]),
        DesignElement(id="t1", type="text", colors=["gold"]),
    ]


@pytest_asyncio.fixture
async def stocked(inventory_store: InventoryStore) -> InventoryStore:
    """Stock red and blue in both sizes."""
    for record in (
        StockRecord(color=BalloonColor.RED, size=BalloonSize.SMALL, quantity=50, threshold=20),
        StockRecord(color=BalloonColor.RED, size=BalloonSize.LARGE, quantity=5, threshold=20),
        StockRecord(color=BalloonColor.BLUE, size=BalloonSize.SMALL, quantity=100, threshold=20),
        StockRecord(color=BalloonColor.BLUE, size=BalloonSize.LARGE, quantity=30, threshold=20),
    ):
        await inventory_store.create_item(record)
    return inventory_store

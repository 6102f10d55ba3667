"""Tests for the design and order workflows."""

import asyncio

import pytest

from balloon_studio.errors import (
    AccessDeniedError,
    ConcurrentUpdateError,
    InsufficientStockError,
    InvalidTransitionError,
    ValidationError,
)
from balloon_studio.models.availability import AvailabilityStatus
from balloon_studio.models.design import DesignElement
from balloon_studio.models.inventory import BalloonColor, BalloonSize
from balloon_studio.models.order import OrderStatus
from balloon_studio.models.production import ProductionStatus
from balloon_studio.models.user import CurrentUser
from balloon_studio.services import reconciler as reconciler_module
from balloon_studio.services.designs import DesignService
from balloon_studio.services.order_assembler import OrderLineRequest
from balloon_studio.services.orders import OrderService
from balloon_studio.state.inventory import InventoryStore
from balloon_studio.state.manager import LinkedWrite


async def _quantity(store: InventoryStore, color: BalloonColor, size: BalloonSize) -> int:
    record = await store.get_item(color, size)
    return record.quantity if record else 0


@pytest.mark.asyncio
async def test_create_design_snapshots_requirements(
    design_service: DesignService,
    designer: CurrentUser,
    cluster_elements: list[DesignElement],
) -> None:
    design, summary = await design_service.create_design(
        designer, cluster_elements, client_name="Ada", project_name="Birthday arch"
    )

    assert design.user_id == designer.id
    assert design.client_name == "Ada"
    assert design.total_balloons == 39
    assert design.estimated_clusters == 3
    assert summary.colors == ["red", "blue"]

    stored = await design_service.get_design(designer, design.id)
    assert stored.material_requirements["red"].small == 22


@pytest.mark.asyncio
async def test_update_design_re_extracts(
    design_service: DesignService,
    designer: CurrentUser,
    cluster_elements: list[DesignElement],
) -> None:
    design, _ = await design_service.create_design(designer, cluster_elements)

    updated = await design_service.update_design(
        designer,
        design.id,
        elements=[DesignElement(id="x", colors=["gold"])],
        notes="smaller",
    )

    assert list(updated.material_requirements) == ["gold"]
    assert updated.total_balloons == 13
    assert updated.notes == "smaller"


@pytest.mark.asyncio
async def test_designs_are_private_to_owner_and_admin(
    design_service: DesignService,
    designer: CurrentUser,
    other_designer: CurrentUser,
    admin: CurrentUser,
    cluster_elements: list[DesignElement],
) -> None:
    design, _ = await design_service.create_design(designer, cluster_elements)

    with pytest.raises(AccessDeniedError):
        await design_service.get_design(other_designer, design.id)

    assert (await design_service.get_design(admin, design.id)).id == design.id


@pytest.mark.asyncio
async def test_check_inventory_uses_snapshot(
    design_service: DesignService,
    stocked: InventoryStore,
    designer: CurrentUser,
    cluster_elements: list[DesignElement],
) -> None:
    design, _ = await design_service.create_design(designer, cluster_elements)

    report = await design_service.check_inventory(designer, design.id)

    # red 16inch: 5 in stock for 4 needed, at or below threshold
    assert report.status is AvailabilityStatus.LOW
    assert report.available


@pytest.mark.asyncio
async def test_save_to_inventory_consumes_and_starts_production(
    design_service: DesignService,
    stocked: InventoryStore,
    designer: CurrentUser,
    cluster_elements: list[DesignElement],
) -> None:
    design, _ = await design_service.create_design(designer, cluster_elements)

    production = await design_service.save_to_inventory(designer, design.id)

    assert production.design_id == design.id
    assert production.status is ProductionStatus.PENDING
    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.SMALL) == 28
    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.LARGE) == 1
    assert await _quantity(stocked, BalloonColor.BLUE, BalloonSize.SMALL) == 89
    assert await _quantity(stocked, BalloonColor.BLUE, BalloonSize.LARGE) == 28

    completed = await design_service.complete_production(designer, production.id, "3 hours")
    assert completed.status is ProductionStatus.COMPLETED
    assert completed.completion_date is not None
    assert [p.id for p in await design_service.list_production(designer, design.id)] == [
        production.id
    ]


@pytest.mark.asyncio
async def test_save_to_inventory_shortfall_leaves_stock(
    design_service: DesignService,
    stocked: InventoryStore,
    designer: CurrentUser,
    cluster_elements: list[DesignElement],
) -> None:
    design, _ = await design_service.create_design(designer, cluster_elements)

    with pytest.raises(InsufficientStockError):
        await design_service.save_to_inventory(
            designer, design.id, {"red": {"small": 1, "large": 6}}
        )

    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.SMALL) == 50
    assert await design_service.list_production(designer, design.id) == []


@pytest.mark.asyncio
async def test_design_order_restocks_shortfall_immediately(
    design_service: DesignService,
    order_service: OrderService,
    stocked: InventoryStore,
    designer: CurrentUser,
) -> None:
    design, _ = await design_service.create_design(
        designer, [DesignElement(id=str(i), colors=["red"]) for i in range(5)]
    )
    # Needs 55 small red (50 in stock) and 10 large red (5 in stock)

    order = await order_service.create_design_order(designer, design.id)

    assert order.design_id == design.id
    assert order.inventory_applied
    assert order.status is OrderStatus.PENDING
    assert {(i.size, i.quantity) for i in order.items} == {
        (BalloonSize.SMALL, 5),
        (BalloonSize.LARGE, 5),
    }
    assert order.total_cost == 5 * 50 + 5 * 75
    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.SMALL) == 55
    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.LARGE) == 10

    report = await design_service.check_inventory(designer, design.id)
    assert report.available


@pytest.mark.asyncio
async def test_design_order_with_nothing_missing(
    design_service: DesignService,
    order_service: OrderService,
    stocked: InventoryStore,
    designer: CurrentUser,
) -> None:
    design, _ = await design_service.create_design(
        designer, [DesignElement(id="b", colors=["blue"])]
    )

    with pytest.raises(ValidationError, match="Nothing to order"):
        await order_service.create_design_order(designer, design.id)


@pytest.mark.asyncio
async def test_completing_an_order_restocks_once(
    order_service: OrderService,
    inventory_store: InventoryStore,
    designer: CurrentUser,
) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="green", size=BalloonSize.SMALL, quantity=30)]
    )
    assert not order.inventory_applied
    assert await _quantity(inventory_store, BalloonColor.GREEN, BalloonSize.SMALL) == 0

    await order_service.update_order(designer, order.id, status=OrderStatus.PROCESSING)
    completed = await order_service.update_order(designer, order.id, status=OrderStatus.COMPLETED)

    assert completed.inventory_applied
    assert await _quantity(inventory_store, BalloonColor.GREEN, BalloonSize.SMALL) == 30

    with pytest.raises(InvalidTransitionError):
        await order_service.update_order(designer, order.id, status=OrderStatus.PROCESSING)
    assert await _quantity(inventory_store, BalloonColor.GREEN, BalloonSize.SMALL) == 30


@pytest.mark.asyncio
async def test_concurrent_completion_restocks_once(
    order_service: OrderService,
    inventory_store: InventoryStore,
    designer: CurrentUser,
) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="white", size=BalloonSize.LARGE, quantity=7)]
    )
    await order_service.update_order(designer, order.id, status=OrderStatus.PROCESSING)

    results = await asyncio.gather(
        order_service.update_order(designer, order.id, status=OrderStatus.COMPLETED),
        order_service.update_order(designer, order.id, status=OrderStatus.COMPLETED),
        return_exceptions=True,
    )

    assert sum(1 for r in results if not isinstance(r, Exception)) >= 1
    assert await _quantity(inventory_store, BalloonColor.WHITE, BalloonSize.LARGE) == 7


@pytest.mark.asyncio
async def test_cancel_does_not_touch_stock(
    order_service: OrderService,
    inventory_store: InventoryStore,
    designer: CurrentUser,
) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="black", size=BalloonSize.SMALL, quantity=3)]
    )

    cancelled = await order_service.update_order(
        designer, order.id, status=OrderStatus.CANCELLED, notes="changed mind"
    )

    assert cancelled.status is OrderStatus.CANCELLED
    assert cancelled.status_history[-1].note == "changed mind"
    assert await inventory_store.get_item(BalloonColor.BLACK, BalloonSize.SMALL) is None


@pytest.mark.asyncio
async def test_update_requires_a_field(order_service: OrderService, designer: CurrentUser) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="red", size=BalloonSize.SMALL, quantity=1)]
    )

    with pytest.raises(ValidationError):
        await order_service.update_order(designer, order.id)


@pytest.mark.asyncio
async def test_add_item_only_while_pending(order_service: OrderService, designer: CurrentUser) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="red", size=BalloonSize.SMALL, quantity=10)]
    )

    updated = await order_service.add_item(
        designer, order.id, OrderLineRequest(color="gold", size=BalloonSize.LARGE, quantity=2)
    )
    assert updated.total_quantity == 12
    assert updated.total_cost == 10 * 50 + 2 * 75

    await order_service.update_order(designer, order.id, status=OrderStatus.PROCESSING)
    with pytest.raises(ValidationError):
        await order_service.add_item(
            designer, order.id, OrderLineRequest(color="gold", size=BalloonSize.LARGE, quantity=2)
        )


@pytest.mark.asyncio
async def test_orders_are_private(
    order_service: OrderService, designer: CurrentUser, other_designer: CurrentUser
) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="red", size=BalloonSize.SMALL, quantity=1)]
    )

    with pytest.raises(AccessDeniedError):
        await order_service.get_order(other_designer, order.id)
    assert await order_service.list_orders(other_designer) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("quantity", [0, 101, -5])
async def test_balloon_order_quantity_bounds(
    order_service: OrderService, designer: CurrentUser, quantity: int
) -> None:
    with pytest.raises(ValidationError):
        await order_service.create_balloon_order(
            designer, BalloonColor.PINK, BalloonSize.SMALL, quantity
        )


@pytest.mark.asyncio
async def test_balloon_order(order_service: OrderService, designer: CurrentUser) -> None:
    order = await order_service.create_balloon_order(
        designer, BalloonColor.PINK, BalloonSize.LARGE, 100, event_name="Mia's party"
    )

    assert order.supplier_name == "Store Inventory"
    assert order.total_cost == 7500
    assert "Mia's party" in order.notes


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path",
    [
        [OrderStatus.PENDING],
        [OrderStatus.PROCESSING, OrderStatus.PROCESSING],
        [OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.COMPLETED],
        [OrderStatus.CANCELLED, OrderStatus.CANCELLED],
    ],
)
async def test_same_status_is_an_invalid_transition(
    order_service: OrderService, designer: CurrentUser, path: list[OrderStatus]
) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="red", size=BalloonSize.SMALL, quantity=2)]
    )
    *steps, repeated = path
    for status in steps:
        await order_service.update_order(designer, order.id, status=status)

    with pytest.raises(InvalidTransitionError) as exc_info:
        await order_service.update_order(designer, order.id, status=repeated)

    assert (exc_info.value.current, exc_info.value.requested) == (repeated.value, repeated.value)
    stored = await order_service.get_order(designer, order.id)
    assert len(stored.status_history) == len(steps)


@pytest.mark.asyncio
async def test_design_order_leaves_stock_alone_when_order_write_fails(
    design_service: DesignService,
    order_service: OrderService,
    stocked: InventoryStore,
    designer: CurrentUser,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    design, _ = await design_service.create_design(
        designer, [DesignElement(id=str(i), colors=["red"]) for i in range(5)]
    )

    def _failing_creation(order):
        def _fail(current):
            raise RuntimeError("order write failed")

        return LinkedWrite(key=f"order:{order.id}", change=_fail)

    monkeypatch.setattr(order_service.orders, "creation", _failing_creation)

    with pytest.raises(RuntimeError):
        await order_service.create_design_order(designer, design.id)

    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.SMALL) == 50
    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.LARGE) == 5
    assert await order_service.list_design_orders(designer, design.id) == []


@pytest.mark.asyncio
async def test_failed_restock_leaves_order_uncompleted(
    order_service: OrderService,
    inventory_store: InventoryStore,
    designer: CurrentUser,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    order = await order_service.create_order(
        designer, [OrderLineRequest(color="orange", size=BalloonSize.SMALL, quantity=9)]
    )
    await order_service.update_order(designer, order.id, status=OrderStatus.PROCESSING)

    def _conflict(*args, **kwargs):
        raise ConcurrentUpdateError(["inventory:orange:11inch"], 3)

    monkeypatch.setattr(reconciler_module, "plan_adjustments", _conflict)

    with pytest.raises(ConcurrentUpdateError):
        await order_service.update_order(designer, order.id, status=OrderStatus.COMPLETED)

    stored = await order_service.get_order(designer, order.id)
    assert stored.status is OrderStatus.PROCESSING
    assert not stored.inventory_applied
    assert await inventory_store.get_item(BalloonColor.ORANGE, BalloonSize.SMALL) is None

    monkeypatch.undo()
    completed = await order_service.update_order(designer, order.id, status=OrderStatus.COMPLETED)

    assert completed.inventory_applied
    assert await _quantity(inventory_store, BalloonColor.ORANGE, BalloonSize.SMALL) == 9


@pytest.mark.asyncio
async def test_completing_a_design_order_does_not_restock_again(
    design_service: DesignService,
    order_service: OrderService,
    stocked: InventoryStore,
    designer: CurrentUser,
) -> None:
    design, _ = await design_service.create_design(
        designer, [DesignElement(id=str(i), colors=["red"]) for i in range(5)]
    )
    order = await order_service.create_design_order(designer, design.id)

    await order_service.update_order(designer, order.id, status=OrderStatus.PROCESSING)
    await order_service.update_order(designer, order.id, status=OrderStatus.COMPLETED)

    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.SMALL) == 55
    assert await _quantity(stocked, BalloonColor.RED, BalloonSize.LARGE) == 10

"""Order persistence."""

from typing import Callable

from balloon_studio.errors import OrderNotFoundError
from balloon_studio.models.order import Order
from balloon_studio.state.manager import LinkedWrite, StateManager
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)


class OrderStore:
    """Manages order persistence and the per-user and per-design indexes."""

    def __init__(self, state_manager: StateManager):
        self.state = state_manager

    def _order_key(self, order_id: int) -> str:
        """Generate Redis key for an order."""
        return f"order:{order_id}"

    def _user_index_key(self, user_id: int) -> str:
        return f"orders:user:{user_id}"

    def _design_index_key(self, design_id: int) -> str:
        return f"orders:design:{design_id}"

    async def next_id(self) -> int:
        return await self.state.increment("order:next_id")

    def creation(self, order: Order) -> LinkedWrite:
        """Write that stores a new order together with its index entries."""
        index = {self._user_index_key(order.user_id): {str(order.id): order.id}}
        if order.design_id is not None:
            index[self._design_index_key(order.design_id)] = {str(order.id): order.id}

        return LinkedWrite(
            key=self._order_key(order.id),
            change=lambda current: order.model_dump(mode="json"),
            index=index,
        )

    def change(self, order_id: int, change: Callable[[Order], None]) -> LinkedWrite:
        """
        Write that applies ``change`` to the stored order.

        ``change`` mutates the order in place and may raise to abort; it can
        run more than once on write conflicts.
        """

        def _change(data: dict | None) -> dict:
            if not data:
                raise OrderNotFoundError(order_id)
            order = Order(**data)
            change(order)
            return order.model_dump(mode="json")

        return LinkedWrite(key=self._order_key(order_id), change=_change)

    def log_created(self, order: Order) -> None:
        logger.info(
            "order_created",
            order_id=order.id,
            user_id=order.user_id,
            design_id=order.design_id,
            total_quantity=order.total_quantity,
            total_cost=order.total_cost,
            inventory_applied=order.inventory_applied,
        )

    async def create_order(self, order: Order) -> Order:
        """Persist a new order and index it."""
        created = Order(**await self.state.commit(self.creation(order)))
        self.log_created(created)
        return created

    async def get_order(self, order_id: int) -> Order | None:
        """Retrieve an order by ID."""
        data = await self.state.get(self._order_key(order_id))
        if not data:
            return None
        return Order(**data)

    async def require_order(self, order_id: int) -> Order:
        order = await self.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def update_order(self, order_id: int, change: Callable[[Order], None]) -> Order:
        """Atomically apply ``change`` to the stored order."""
        return Order(**await self.state.commit(self.change(order_id, change)))

    async def _list(self, index_key: str) -> list[Order]:
        ids = await self.state.zrange(index_key)
        values = await self.state.get_many([self._order_key(int(i)) for i in ids])
        return [Order(**value) for value in values if value]

    async def list_for_user(self, user_id: int) -> list[Order]:
        return await self._list(self._user_index_key(user_id))

    async def list_for_design(self, design_id: int) -> list[Order]:
        return await self._list(self._design_index_key(design_id))

"""Accessory persistence and per-design accessory lists."""

from typing import Any

from balloon_studio.errors import AccessoryNotFoundError
from balloon_studio.models.accessory import Accessory, DesignAccessory
from balloon_studio.models.base import utcnow
from balloon_studio.state.manager import LinkedWrite, StateManager
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)


class AccessoryStore:
    """Manages accessory records and which designs use them."""

    INDEX_KEY = "accessories:index"

    def __init__(self, state_manager: StateManager):
        self.state = state_manager

    def _accessory_key(self, accessory_id: int) -> str:
        """Generate Redis key for an accessory."""
        return f"accessory:{accessory_id}"

    def _design_key(self, design_id: int) -> str:
        return f"design:{design_id}:accessories"

    async def create_accessory(self, name: str, quantity: int, threshold: int) -> Accessory:
        """Create an accessory with the next id."""
        accessory_id = await self.state.increment("accessory:next_id")
        accessory = Accessory(id=accessory_id, name=name, quantity=quantity, threshold=threshold)

        data = await self.state.commit(
            LinkedWrite(
                key=self._accessory_key(accessory_id),
                change=lambda current: accessory.model_dump(mode="json"),
                index={self.INDEX_KEY: {str(accessory_id): accessory_id}},
            )
        )

        logger.info(
            "accessory_created",
            accessory_id=accessory_id,
            name=name,
            quantity=quantity,
            threshold=threshold,
        )
        return Accessory(**data)

    async def get_accessory(self, accessory_id: int) -> Accessory | None:
        data = await self.state.get(self._accessory_key(accessory_id))
        if not data:
            return None
        return Accessory(**data)

    async def require_accessory(self, accessory_id: int) -> Accessory:
        accessory = await self.get_accessory(accessory_id)
        if accessory is None:
            raise AccessoryNotFoundError(accessory_id)
        return accessory

    async def list_accessories(self) -> list[Accessory]:
        """Get every accessory, ordered by id."""
        ids = await self.state.zrange(self.INDEX_KEY)
        values = await self.state.get_many([self._accessory_key(int(i)) for i in ids])
        return [Accessory(**value) for value in values if value]

    async def update_accessory(self, accessory_id: int, **changes: Any) -> Accessory:
        """Atomically change name, quantity and/or threshold; status follows."""

        def _update(data: dict | None) -> dict:
            if not data:
                raise AccessoryNotFoundError(accessory_id)
            accessory = Accessory(**{**data, **changes, "updated_at": utcnow()})
            return accessory.model_dump(mode="json")

        data = await self.state.commit(
            LinkedWrite(key=self._accessory_key(accessory_id), change=_update)
        )
        logger.info("accessory_updated", accessory_id=accessory_id, changes=sorted(changes))
        return Accessory(**data)

    async def add_to_design(self, design_id: int, accessory_id: int, quantity: int) -> None:
        """Attach an accessory to a design, adding to any quantity already attached."""

        def _add(current: dict | None) -> dict:
            counts = dict(current or {})
            counts[str(accessory_id)] = counts.get(str(accessory_id), 0) + quantity
            return counts

        await self.state.commit(LinkedWrite(key=self._design_key(design_id), change=_add))
        logger.info(
            "accessory_added_to_design",
            design_id=design_id,
            accessory_id=accessory_id,
            quantity=quantity,
        )

    async def list_for_design(self, design_id: int) -> list[DesignAccessory]:
        """Accessories attached to a design, in the order they were first added."""
        counts = await self.state.get(self._design_key(design_id)) or {}
        accessories = await self.state.get_many(
            [self._accessory_key(int(i)) for i in counts]
        )
        return [
            DesignAccessory(accessory=Accessory(**data), quantity=quantity)
            for data, quantity in zip(accessories, counts.values())
            if data
        ]

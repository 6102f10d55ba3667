"""Design and production record persistence."""

from balloon_studio.errors import DesignNotFoundError, ProductionNotFoundError
from balloon_studio.models.base import utcnow
from balloon_studio.models.design import Design
from balloon_studio.models.production import ProductionRecord
from balloon_studio.state.manager import StateManager
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)


class DesignStore:
    """Manages design persistence."""

    def __init__(self, state_manager: StateManager):
        self.state = state_manager

    def _design_key(self, design_id: int) -> str:
        """Generate Redis key for a design."""
        return f"design:{design_id}"

    def _user_index_key(self, user_id: int) -> str:
        return f"designs:user:{user_id}"

    async def next_id(self) -> int:
        return await self.state.increment("design:next_id")

    async def save_design(self, design: Design) -> None:
        """Save a design and index it under its owner."""
        design.updated_at = utcnow()
        await self.state.set(self._design_key(design.id), design.model_dump(mode="json"))
        await self.state.zadd(self._user_index_key(design.user_id), {str(design.id): design.id})

    async def get_design(self, design_id: int) -> Design | None:
        """Retrieve a design by ID."""
        data = await self.state.get(self._design_key(design_id))
        if not data:
            return None
        return Design(**data)

    async def require_design(self, design_id: int) -> Design:
        design = await self.get_design(design_id)
        if design is None:
            raise DesignNotFoundError(design_id)
        return design

    async def list_for_user(self, user_id: int) -> list[Design]:
        ids = await self.state.zrange(self._user_index_key(user_id))
        values = await self.state.get_many([self._design_key(int(i)) for i in ids])
        return [Design(**value) for value in values if value]


class ProductionStore:
    """Manages production record persistence."""

    def __init__(self, state_manager: StateManager):
        self.state = state_manager

    def _production_key(self, production_id: int) -> str:
        return f"production:{production_id}"

    def _design_index_key(self, design_id: int) -> str:
        return f"production:design:{design_id}"

    async def create_production(
        self,
        design_id: int,
        notes: str | None = None,
    ) -> ProductionRecord:
        """Create a pending production record starting now."""
        production_id = await self.state.increment("production:next_id")
        production = ProductionRecord(
            id=production_id,
            design_id=design_id,
            start_date=utcnow(),
            notes=notes,
        )
        await self.save_production(production)
        await self.state.zadd(self._design_index_key(design_id), {str(production_id): production_id})

        logger.info("production_created", production_id=production_id, design_id=design_id)
        return production

    async def save_production(self, production: ProductionRecord) -> None:
        await self.state.set(
            self._production_key(production.id),
            production.model_dump(mode="json"),
        )

    async def require_production(self, production_id: int) -> ProductionRecord:
        data = await self.state.get(self._production_key(production_id))
        if not data:
            raise ProductionNotFoundError(production_id)
        return ProductionRecord(**data)

    async def list_for_design(self, design_id: int) -> list[ProductionRecord]:
        ids = await self.state.zrange(self._design_index_key(design_id))
        values = await self.state.get_many([self._production_key(int(i)) for i in ids])
        return [ProductionRecord(**value) for value in values if value]

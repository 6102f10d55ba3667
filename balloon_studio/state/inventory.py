"""Stock record persistence."""

from typing import Callable

from balloon_studio.errors import StockRecordExistsError, StockRecordNotFoundError
from balloon_studio.models.base import utcnow
from balloon_studio.models.inventory import BalloonColor, BalloonSize, StockRecord
from balloon_studio.state.manager import LinkedWrite, StateManager
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)

StockKey = tuple[BalloonColor, BalloonSize]
StockMutation = Callable[[dict[StockKey, StockRecord | None]], dict[StockKey, StockRecord]]


class InventoryStore:
    """Stock records keyed by (color, size), stored one per Redis key."""

    INDEX_KEY = "inventory:index"

    def __init__(self, state_manager: StateManager):
        self.state = state_manager

    @staticmethod
    def _record_key(color: BalloonColor, size: BalloonSize) -> str:
        """Generate Redis key for a stock record."""
        return f"inventory:{color.value}:{size.value}"

    async def list_items(self) -> list[StockRecord]:
        """Get every stock record, ordered by color then size."""
        keys = await self.state.zrange(self.INDEX_KEY)
        values = await self.state.get_many(keys)
        return [StockRecord(**value) for value in values if value]

    async def list_by_color(self, color: BalloonColor) -> list[StockRecord]:
        return [record for record in await self.list_items() if record.color is color]

    async def list_needing_restock(self) -> list[StockRecord]:
        """Get records that are low or out of stock."""
        return [record for record in await self.list_items() if record.needs_restock]

    async def get_item(self, color: BalloonColor, size: BalloonSize) -> StockRecord | None:
        data = await self.state.get(self._record_key(color, size))
        if not data:
            return None
        return StockRecord(**data)

    async def modify(
        self,
        pairs: list[StockKey],
        mutate: StockMutation,
        linked: LinkedWrite | None = None,
    ) -> dict[StockKey, StockRecord]:
        """
        Atomically read, change and write a set of stock records.

        ``mutate`` receives the current record (or None) for every pair and
        returns the records to write. It may run more than once if another
        writer touches the same records, so it must not have side effects.

        A ``linked`` write (an order, say) is applied before ``mutate`` in
        the same transaction, so both commit or neither does.
        """
        unique_pairs = list(dict.fromkeys(pairs))
        key_to_pair = {self._record_key(color, size): (color, size) for color, size in unique_pairs}
        keys = list(key_to_pair)
        if linked is not None:
            keys.append(linked.key)

        def _mutate(current: dict[str, object]) -> dict[str, object]:
            writes = {}
            if linked is not None:
                writes[linked.key] = linked.apply(current.pop(linked.key))

            records = {
                key_to_pair[key]: StockRecord(**value) if value else None
                for key, value in current.items()
            }
            updated = mutate(records)
            now = utcnow()
            for (color, size), record in updated.items():
                record.updated_at = now
                writes[self._record_key(color, size)] = record.model_dump(mode="json")
            return writes

        def _indexes(written: dict[str, object]) -> dict[str, dict[str, float]]:
            entries = {self.INDEX_KEY: {key: 0 for key in written if key in key_to_pair}}
            if linked is not None:
                entries.update(linked.index)
            return entries

        written = await self.state.transaction(keys, _mutate, indexes=_indexes)
        return {
            key_to_pair[key]: StockRecord(**value)
            for key, value in written.items()
            if key in key_to_pair
        }

    async def create_item(self, record: StockRecord) -> StockRecord:
        """Create a record for a (color, size) pair that has none yet."""
        pair = (record.color, record.size)

        def _create(current: dict[StockKey, StockRecord | None]) -> dict[StockKey, StockRecord]:
            if current[pair] is not None:
                raise StockRecordExistsError(record.color.value, record.size.value)
            return {pair: record.model_copy()}

        written = await self.modify([pair], _create)
        logger.info(
            "stock_record_created",
            color=record.color.value,
            size=record.size.value,
            quantity=record.quantity,
            threshold=record.threshold,
        )
        return written[pair]

    async def update_item(
        self,
        color: BalloonColor,
        size: BalloonSize,
        quantity: int | None = None,
        threshold: int | None = None,
    ) -> StockRecord:
        """Manually set quantity and/or threshold of an existing record."""
        pair = (color, size)

        def _update(current: dict[StockKey, StockRecord | None]) -> dict[StockKey, StockRecord]:
            existing = current[pair]
            if existing is None:
                raise StockRecordNotFoundError(f"{color.value} {size.value}")
            changes = {}
            if quantity is not None:
                changes["quantity"] = quantity
            if threshold is not None:
                changes["threshold"] = threshold
            return {pair: StockRecord(**{**existing.model_dump(), **changes})}

        written = await self.modify([pair], _update)
        logger.info(
            "stock_record_updated",
            color=color.value,
            size=size.value,
            quantity=written[pair].quantity,
            threshold=written[pair].threshold,
        )
        return written[pair]

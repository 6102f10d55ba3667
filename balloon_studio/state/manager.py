"""Redis-based state manager shared by the stores."""

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import redis.asyncio as redis
from redis.exceptions import WatchError

from balloon_studio.config import get_settings
from balloon_studio.errors import ConcurrentUpdateError
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)

# Receives the current value of every watched key (None when absent) and
# returns the values to write. Raising aborts the transaction.
Mutation = Callable[[dict[str, Any]], dict[str, Any]]

# Given the values about to be written, returns sorted set -> {member: score}
# entries to add in the same MULTI/EXEC.
IndexEntries = Callable[[dict[str, Any]], dict[str, dict[str, float]]]


@dataclass
class LinkedWrite:
    """
    A single record written inside another store's transaction.

    ``change`` maps the record's current value (None when absent) to the
    value to write and may raise to abort everything. ``index`` lists
    sorted-set entries added when the write commits.
    """

    key: str
    change: Callable[[Any], Any]
    index: dict[str, dict[str, float]] = field(default_factory=dict)
    result: Any = None

    def apply(self, current: Any) -> Any:
        self.result = self.change(current)
        return self.result


class StateManager:
    """Centralized state management using Redis."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        settings = get_settings()
        self.redis_client = redis_client
        self.redis_url = settings.redis_url
        self.max_retries = settings.transaction_retries

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self.redis_client is None:
            self.redis_client = await redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("redis_connected", url=self.redis_url)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("redis_disconnected")

    @staticmethod
    def _encode(value: Any) -> Any:
        # Serialize complex objects to JSON
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value

    @staticmethod
    def _decode(value: Any) -> Any:
        if value is None:
            return None
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> None:
        """Set a value in Redis with optional TTL."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.set(key, self._encode(value))

        if ttl:
            await self.redis_client.expire(key, ttl)

        logger.debug("state_set", key=key, ttl=ttl)

    async def get(self, key: str) -> Any:
        """Get a value from Redis."""
        if not self.redis_client:
            await self.connect()

        return self._decode(await self.redis_client.get(key))

    async def get_many(self, keys: list[str]) -> list[Any]:
        """Get several values in one round trip, None for missing keys."""
        if not keys:
            return []
        if not self.redis_client:
            await self.connect()

        values = await self.redis_client.mget(keys)
        return [self._decode(value) for value in values]

    async def delete(self, key: str) -> None:
        """Delete a key from Redis."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.delete(key)
        logger.debug("state_deleted", key=key)

    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        if not self.redis_client:
            await self.connect()

        return bool(await self.redis_client.exists(key))

    async def zadd(
        self,
        key: str,
        mapping: dict[str, float],
    ) -> None:
        """Add members to a sorted set."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.zadd(key, mapping)

    async def zrange(
        self,
        key: str,
        start: int = 0,
        end: int = -1,
        withscores: bool = False,
    ) -> list[Any]:
        """Get members from a sorted set."""
        if not self.redis_client:
            await self.connect()

        return await self.redis_client.zrange(key, start, end, withscores=withscores)

    async def zrem(self, key: str, *members: str) -> None:
        """Remove members from a sorted set."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.zrem(key, *members)

    async def increment(self, key: str, amount: int = 1) -> int:
        """Increment a counter."""
        if not self.redis_client:
            await self.connect()

        return await self.redis_client.incrby(key, amount)

    async def transaction(
        self,
        keys: list[str],
        mutate: Mutation,
        indexes: IndexEntries | None = None,
    ) -> dict[str, Any]:
        """
        Apply a read-modify-write over several keys atomically.

        The keys are WATCHed and read, ``mutate`` computes the new values,
        and every value it returns is written in a single MULTI/EXEC. If
        another client writes a watched key in between, the whole attempt
        is discarded and retried against fresh values.

        Args:
            keys: Keys to read and guard
            mutate: Pure function from current values to values to write
            indexes: Optional sorted-set entries to add along with the writes

        Returns:
            The values written
        """
        if not self.redis_client:
            await self.connect()

        for attempt in range(1, self.max_retries + 1):
            async with self.redis_client.pipeline(transaction=True) as pipe:
                try:
                    await pipe.watch(*keys)
                    raw = await pipe.mget(keys)
                    current = {
                        key: self._decode(value) for key, value in zip(keys, raw)
                    }

                    updates = mutate(current)

                    pipe.multi()
                    for key, value in updates.items():
                        pipe.set(key, self._encode(value))
                    if indexes:
                        for index, members in indexes(updates).items():
                            if members:
                                pipe.zadd(index, members)
                    await pipe.execute()

                    logger.debug(
                        "transaction_committed",
                        keys=keys,
                        written=list(updates),
                        attempt=attempt,
                    )
                    return updates

                except WatchError:
                    logger.warning(
                        "transaction_conflict",
                        keys=keys,
                        attempt=attempt,
                        max_retries=self.max_retries,
                    )

        raise ConcurrentUpdateError(keys, self.max_retries)

    async def commit(self, write: LinkedWrite) -> Any:
        """Apply a single linked write on its own and return the value written."""
        written = await self.transaction(
            [write.key],
            lambda current: {write.key: write.apply(current[write.key])},
            indexes=lambda _: write.index,
        )
        return written[write.key]


# Global state manager instance
_state_manager: StateManager | None = None


async def get_state_manager() -> StateManager:
    """Get the global state manager instance."""
    global _state_manager
    if _state_manager is None:
        _state_manager = StateManager()
        await _state_manager.connect()
    return _state_manager

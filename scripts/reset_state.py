"""Reset all balloon studio state in Redis (useful for testing)."""

import asyncio

from balloon_studio.config import get_settings
from balloon_studio.state.manager import StateManager


async def reset_all_state() -> None:
    """Clear all data from the configured Redis database."""
    settings = get_settings()
    print(f"\n⚠️  WARNING: This will delete ALL data from {settings.redis_url}!")
    response = input("Are you sure? (yes/no): ")

    if response.lower() != "yes":
        print("Cancelled.")
        return

    print("\nResetting state...")

    state_manager = StateManager()
    await state_manager.connect()

    # Stock, designs, orders and id counters all live in this DB
    if state_manager.redis_client:
        await state_manager.redis_client.flushdb()

    await state_manager.disconnect()

    print("✓ All state cleared from Redis\n")


if __name__ == "__main__":
    asyncio.run(reset_all_state())

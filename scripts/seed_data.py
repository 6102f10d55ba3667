"""Seed initial stock records and accessories for the balloon studio."""

import asyncio

from balloon_studio.config import get_settings
from balloon_studio.errors import StockRecordExistsError
from balloon_studio.models.accessory import DEFAULT_ACCESSORY_THRESHOLD
from balloon_studio.models.inventory import BalloonColor, BalloonSize, StockRecord
from balloon_studio.services.catalog import COLOR_TABLE
from balloon_studio.state.accessories import AccessoryStore
from balloon_studio.state.inventory import InventoryStore
from balloon_studio.state.manager import StateManager

# Starting quantities per size
STARTING_STOCK = {
    BalloonSize.SMALL: 200,
    BalloonSize.LARGE: 50,
}

# Name, starting quantity
DEFAULT_ACCESSORIES = [
    ("Balloon Pump", 10),
    ("Electric Balloon Inflator", 4),
    ("Balloon Arch Kit", 6),
    ("Balloon Weights", 40),
    ("Curling Ribbon", 25),
]


async def seed_inventory() -> None:
    """Create a stock record for every color and size."""
    print("Seeding inventory...")

    state_manager = StateManager()
    await state_manager.connect()
    store = InventoryStore(state_manager)
    threshold = get_settings().default_stock_threshold

    for color in BalloonColor:
        for size in BalloonSize:
            record = StockRecord(
                color=color,
                size=size,
                quantity=STARTING_STOCK[size],
                threshold=threshold,
            )
            try:
                await store.create_item(record)
            except StockRecordExistsError:
                print(f"  - Skipped {COLOR_TABLE[color].name} {size.value} (already stocked)")
                continue
            print(f"  ✓ Added {COLOR_TABLE[color].name} {size.value} (stock: {record.quantity})")

    await state_manager.disconnect()
    print("✓ Inventory seeded successfully\n")


async def seed_accessories() -> None:
    """Create the default accessories when none exist yet."""
    print("Seeding accessories...")

    state_manager = StateManager()
    await state_manager.connect()
    store = AccessoryStore(state_manager)

    if await store.list_accessories():
        print("  - Skipped (accessories already exist)")
    else:
        for name, quantity in DEFAULT_ACCESSORIES:
            accessory = await store.create_accessory(name, quantity, DEFAULT_ACCESSORY_THRESHOLD)
            print(f"  ✓ Added {accessory.name} (stock: {accessory.quantity})")

    await state_manager.disconnect()
    print("✓ Accessories seeded successfully\n")


async def main() -> None:
    print("\n" + "=" * 50)
    print("  Seeding Balloon Studio Data")
    print("=" * 50 + "\n")

    await seed_inventory()
    await seed_accessories()

    print("=" * 50)
    print("  ✓ All data seeded successfully!")
    print("=" * 50 + "\n")


if __name__ == "__main__":
    asyncio.run(main())

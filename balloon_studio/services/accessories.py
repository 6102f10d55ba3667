"""Accessory stock and the accessories attached to designs."""

from balloon_studio.errors import AccessDeniedError, ValidationError
from balloon_studio.models.accessory import DEFAULT_ACCESSORY_THRESHOLD, Accessory, DesignAccessory
from balloon_studio.models.user import CurrentUser
from balloon_studio.state.accessories import AccessoryStore
from balloon_studio.state.designs import DesignStore


class AccessoryService:
    """Accessory records; edits are limited to admins and inventory managers."""

    def __init__(self, accessories: AccessoryStore, designs: DesignStore):
        self.accessories = accessories
        self.designs = designs

    @staticmethod
    def _require_manager(user: CurrentUser) -> None:
        if not user.can_manage_inventory:
            raise AccessDeniedError("Only admins and inventory managers can edit accessories")

    async def _require_design_access(self, user: CurrentUser, design_id: int) -> None:
        design = await self.designs.require_design(design_id)
        if not user.can_access(design.user_id):
            raise AccessDeniedError(f"Design {design_id} belongs to another user")

    async def list_accessories(self) -> list[Accessory]:
        return await self.accessories.list_accessories()

    async def get_accessory(self, accessory_id: int) -> Accessory:
        return await self.accessories.require_accessory(accessory_id)

    async def create_accessory(
        self,
        user: CurrentUser,
        name: str,
        quantity: int = 0,
        threshold: int = DEFAULT_ACCESSORY_THRESHOLD,
    ) -> Accessory:
        self._require_manager(user)
        if not name.strip():
            raise ValidationError("Accessory name is required", errors=[{"field": "name"}])
        return await self.accessories.create_accessory(name.strip(), quantity, threshold)

    async def update_accessory(
        self,
        user: CurrentUser,
        accessory_id: int,
        name: str | None = None,
        quantity: int | None = None,
        threshold: int | None = None,
    ) -> Accessory:
        """Edit an accessory; its status is recomputed from quantity and threshold."""
        self._require_manager(user)
        changes = {
            field: value
            for field, value in (("name", name), ("quantity", quantity), ("threshold", threshold))
            if value is not None
        }
        if not changes:
            raise ValidationError("No valid update fields provided")
        return await self.accessories.update_accessory(accessory_id, **changes)

    async def add_to_design(
        self,
        user: CurrentUser,
        accessory_id: int,
        design_id: int,
        quantity: int,
    ) -> list[DesignAccessory]:
        """
        Attach an accessory to a design the caller owns.

        Adding an accessory that is already attached increases its quantity.
        Returns the design's accessories after the change.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError(
                "Valid quantity is required", errors=[{"field": "quantity", "value": quantity}]
            )
        await self.accessories.require_accessory(accessory_id)
        await self._require_design_access(user, design_id)

        await self.accessories.add_to_design(design_id, accessory_id, quantity)
        return await self.accessories.list_for_design(design_id)

    async def list_for_design(self, user: CurrentUser, design_id: int) -> list[DesignAccessory]:
        await self._require_design_access(user, design_id)
        return await self.accessories.list_for_design(design_id)

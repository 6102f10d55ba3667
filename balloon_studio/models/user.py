"""Caller identity models."""

from enum import Enum

from pydantic import BaseModel


class UserRole(str, Enum):
    """Roles recognised by the studio."""

    ADMIN = "admin"
    DESIGNER = "designer"
    INVENTORY_MANAGER = "inventory_manager"


class CurrentUser(BaseModel):
    """Authenticated caller, as established by the session layer."""

    id: int
    role: UserRole = UserRole.DESIGNER

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def can_manage_inventory(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.INVENTORY_MANAGER)

    def can_access(self, owner_id: int) -> bool:
        """Check if the caller owns the resource or is an admin."""
        return self.is_admin or self.id == owner_id

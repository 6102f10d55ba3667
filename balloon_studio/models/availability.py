"""Availability report models."""

from enum import Enum

from pydantic import Field, computed_field

from balloon_studio.models.base import CamelModel
from balloon_studio.models.inventory import BalloonSize


class AvailabilityStatus(str, Enum):
    """Classification of one requirement line against stock."""

    AVAILABLE = "available"
    LOW = "low"
    UNAVAILABLE = "unavailable"


class AvailabilityLine(CamelModel):
    """One (color, size) requirement compared with stock."""

    color: str
    size: BalloonSize
    required: int
    in_stock: int
    threshold: int
    difference: int
    status: AvailabilityStatus

    @property
    def shortfall(self) -> int:
        """Balloons missing to cover the requirement."""
        return max(0, -self.difference)

    @property
    def label(self) -> str:
        return f"{self.color} ({self.size.value})"


class AvailabilityReport(CamelModel):
    """Result of checking a set of requirements against stock."""

    lines: list[AvailabilityLine] = Field(default_factory=list)
    status: AvailabilityStatus = AvailabilityStatus.AVAILABLE

    @computed_field
    @property
    def available(self) -> bool:
        return self.status is not AvailabilityStatus.UNAVAILABLE

    @computed_field
    @property
    def missing_items(self) -> list[str]:
        return [line.label for line in self.unavailable_items]

    @computed_field
    @property
    def inventory_status(self) -> dict[str, list[AvailabilityLine]]:
        grouped: dict[str, list[AvailabilityLine]] = {}
        for line in self.lines:
            grouped.setdefault(line.color, []).append(line)
        return grouped

    @property
    def available_items(self) -> list[AvailabilityLine]:
        return [
            line for line in self.lines if line.status is not AvailabilityStatus.UNAVAILABLE
        ]

    @property
    def unavailable_items(self) -> list[AvailabilityLine]:
        return [
            line for line in self.lines if line.status is AvailabilityStatus.UNAVAILABLE
        ]

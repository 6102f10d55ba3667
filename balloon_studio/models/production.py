"""Production scheduling models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from balloon_studio.models.base import CamelModel, utcnow


class ProductionStatus(str, Enum):
    """Production progression."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ProductionRecord(CamelModel):
    """Production run for a design whose materials were taken from stock."""

    id: int
    design_id: int
    status: ProductionStatus = ProductionStatus.PENDING
    start_date: datetime | None = None
    completion_date: datetime | None = None
    actual_time: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def complete(self, actual_time: str | None = None) -> None:
        """Mark the production run as finished."""
        self.status = ProductionStatus.COMPLETED
        self.completion_date = utcnow()
        self.actual_time = actual_time or "Unknown"
        self.updated_at = self.completion_date

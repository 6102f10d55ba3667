"""Design, canvas element and material requirement models."""

from datetime import datetime

from pydantic import Field, computed_field

from balloon_studio.models.base import CamelModel, utcnow

CLUSTER_ELEMENT = "balloon-cluster"


class DesignElement(CamelModel):
    """An element placed on the design canvas."""

    id: str
    type: str = CLUSTER_ELEMENT
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    svg_content: str | None = None
    colors: list[str] = Field(default_factory=list)
    scale: float | None = None

    @property
    def is_cluster(self) -> bool:
        return self.type == CLUSTER_ELEMENT

    @property
    def primary_color(self) -> str | None:
        return self.colors[0] if self.colors else None


class ColorRequirement(CamelModel):
    """Balloons needed in one color, split by size."""

    small: int = Field(default=0, ge=0, strict=True)
    large: int = Field(default=0, ge=0, strict=True)

    @computed_field
    @property
    def total(self) -> int:
        return self.small + self.large

    def add(self, small: int = 0, large: int = 0) -> None:
        """Accumulate counts into this requirement."""
        self.small += small
        self.large += large


MaterialRequirements = dict[str, ColorRequirement]


class Design(CamelModel):
    """A balloon design and the snapshot of what it needs."""

    id: int
    user_id: int
    client_name: str = "Anonymous Client"
    project_name: str = "Untitled Project"
    event_type: str = "Birthday"
    event_date: str | None = None
    notes: str | None = None
    background_url: str | None = None
    elements: list[DesignElement] = Field(default_factory=list)
    material_requirements: MaterialRequirements = Field(default_factory=dict)
    total_balloons: int = 0
    estimated_clusters: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def colors(self) -> list[str]:
        return list(self.material_requirements)

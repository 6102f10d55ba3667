"""Balloon requirement extraction from canvas elements."""

from typing import Iterable

from pydantic import BaseModel

from balloon_studio.config import Settings, get_settings
from balloon_studio.models.design import ColorRequirement, DesignElement, MaterialRequirements
from balloon_studio.services.catalog import resolve_color


class RequirementSummary(BaseModel):
    """Totals derived from a requirement mapping."""

    total_balloons: int
    total_small: int
    total_large: int
    estimated_clusters: int
    colors: list[str]


class RequirementExtractor:
    """
    Turns design elements into per-color balloon counts.

    Each ``balloon-cluster`` element contributes a fixed number of small and
    large balloons, all attributed to the element's primary (first) color.
    Elements of other types and clusters with no colors contribute nothing.
    """

    def __init__(self, small_per_cluster: int = 11, large_per_cluster: int = 2):
        self.small_per_cluster = small_per_cluster
        self.large_per_cluster = large_per_cluster

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RequirementExtractor":
        settings = settings or get_settings()
        return cls(
            small_per_cluster=settings.small_balloons_per_cluster,
            large_per_cluster=settings.large_balloons_per_cluster,
        )

    def extract(self, elements: Iterable[DesignElement]) -> MaterialRequirements:
        requirements: MaterialRequirements = {}

        for element in elements:
            if not element.is_cluster or element.primary_color is None:
                continue

            color = resolve_color(element.primary_color)
            requirement = requirements.setdefault(color, ColorRequirement())
            requirement.add(small=self.small_per_cluster, large=self.large_per_cluster)

        return requirements

    def count_clusters(self, elements: Iterable[DesignElement]) -> int:
        return sum(1 for e in elements if e.is_cluster and e.primary_color is not None)

    @staticmethod
    def summarize(
        requirements: MaterialRequirements,
        estimated_clusters: int = 0,
    ) -> RequirementSummary:
        """Roll a requirement mapping up into totals."""
        total_small = sum(r.small for r in requirements.values())
        total_large = sum(r.large for r in requirements.values())

        return RequirementSummary(
            total_balloons=total_small + total_large,
            total_small=total_small,
            total_large=total_large,
            estimated_clusters=estimated_clusters,
            colors=list(requirements),
        )

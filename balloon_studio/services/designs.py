"""Design workflow: requirements, inventory checks and material consumption."""

from typing import Any, Mapping

from balloon_studio.errors import AccessDeniedError, ValidationError
from balloon_studio.models.availability import AvailabilityReport
from balloon_studio.models.design import Design, DesignElement
from balloon_studio.models.production import ProductionRecord
from balloon_studio.models.user import CurrentUser
from balloon_studio.services.availability import AvailabilityEvaluator
from balloon_studio.services.reconciler import InventoryReconciler
from balloon_studio.services.requirements import RequirementExtractor, RequirementSummary
from balloon_studio.state.designs import DesignStore, ProductionStore
from balloon_studio.state.inventory import InventoryStore
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = (
    "client_name",
    "project_name",
    "event_type",
    "event_date",
    "notes",
    "background_url",
)


class DesignService:
    """
    Design operations that touch inventory.

    Responsibilities:
    - Keep each design's material requirements snapshot in step with its elements
    - Check a design's requirements against live stock
    - Consume a design's materials from stock and open a production record
    """

    def __init__(
        self,
        designs: DesignStore,
        productions: ProductionStore,
        inventory: InventoryStore,
        reconciler: InventoryReconciler,
        extractor: RequirementExtractor,
        evaluator: AvailabilityEvaluator,
    ):
        self.designs = designs
        self.productions = productions
        self.inventory = inventory
        self.reconciler = reconciler
        self.extractor = extractor
        self.evaluator = evaluator

    def _apply_elements(self, design: Design, elements: list[DesignElement]) -> RequirementSummary:
        requirements = self.extractor.extract(elements)
        summary = self.extractor.summarize(
            requirements, self.extractor.count_clusters(elements)
        )
        design.elements = elements
        design.material_requirements = requirements
        design.total_balloons = summary.total_balloons
        design.estimated_clusters = summary.estimated_clusters
        return summary

    async def get_design(self, user: CurrentUser, design_id: int) -> Design:
        """Load a design the caller owns (or any design for admins)."""
        design = await self.designs.require_design(design_id)
        if not user.can_access(design.user_id):
            raise AccessDeniedError(f"Design {design_id} belongs to another user")
        return design

    async def list_designs(self, user: CurrentUser) -> list[Design]:
        return await self.designs.list_for_user(user.id)

    async def create_design(
        self,
        user: CurrentUser,
        elements: list[DesignElement],
        **fields: Any,
    ) -> tuple[Design, RequirementSummary]:
        """Create a design and snapshot its material requirements."""
        design = Design(id=await self.designs.next_id(), user_id=user.id, **fields)
        summary = self._apply_elements(design, elements)
        await self.designs.save_design(design)

        logger.info(
            "design_created",
            design_id=design.id,
            user_id=user.id,
            total_balloons=summary.total_balloons,
            colors=summary.colors,
        )
        return design, summary

    async def update_design(
        self,
        user: CurrentUser,
        design_id: int,
        elements: list[DesignElement] | None = None,
        **fields: Any,
    ) -> Design:
        """Edit a design; new elements re-derive the requirements snapshot."""
        design = await self.get_design(user, design_id)

        for name, value in fields.items():
            if name not in EDITABLE_FIELDS:
                raise ValidationError(f"Field '{name}' cannot be updated")
            setattr(design, name, value)

        if elements is not None:
            self._apply_elements(design, elements)

        await self.designs.save_design(design)
        logger.info("design_updated", design_id=design_id, fields=sorted(fields))
        return design

    async def check_inventory(
        self,
        user: CurrentUser,
        design_id: int,
        material_requirements: Mapping[str, Any] | None = None,
    ) -> AvailabilityReport:
        """Evaluate the design's requirements (or the supplied ones) against stock."""
        design = await self.get_design(user, design_id)
        requirements = (
            material_requirements
            if material_requirements is not None
            else design.material_requirements
        )

        report = self.evaluator.evaluate(requirements, await self.inventory.list_items())

        logger.info(
            "design_inventory_checked",
            design_id=design_id,
            status=report.status.value,
            missing=report.missing_items,
        )
        return report

    async def save_to_inventory(
        self,
        user: CurrentUser,
        design_id: int,
        material_counts: Mapping[str, Any] | None = None,
    ) -> ProductionRecord:
        """
        Take a design's balloons out of stock and start production.

        All lines are consumed together or not at all; a shortfall on any
        line raises InsufficientStockError and leaves stock untouched.
        """
        design = await self.get_design(user, design_id)
        counts = material_counts if material_counts is not None else design.material_requirements
        if not counts:
            raise ValidationError("No material counts provided")

        await self.reconciler.consume_requirements(
            counts,
            reason="design_saved_to_inventory",
            design_id=design_id,
        )

        return await self.productions.create_production(
            design_id,
            notes="Automatically created from inventory save",
        )

    async def list_production(self, user: CurrentUser, design_id: int) -> list[ProductionRecord]:
        await self.get_design(user, design_id)
        return await self.productions.list_for_design(design_id)

    async def complete_production(
        self,
        user: CurrentUser,
        production_id: int,
        actual_time: str | None = None,
    ) -> ProductionRecord:
        """Mark a production run finished."""
        production = await self.productions.require_production(production_id)
        await self.get_design(user, production.design_id)

        production.complete(actual_time)
        await self.productions.save_production(production)

        logger.info("production_completed", production_id=production_id)
        return production

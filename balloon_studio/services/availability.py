"""Availability evaluation of balloon requirements against stock."""

from typing import Any, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from balloon_studio.errors import ValidationError
from balloon_studio.models.availability import (
    AvailabilityLine,
    AvailabilityReport,
    AvailabilityStatus,
)
from balloon_studio.models.design import ColorRequirement, MaterialRequirements
from balloon_studio.models.inventory import DEFAULT_THRESHOLD, BalloonSize, StockRecord
from balloon_studio.services.catalog import resolve_color


def validate_requirements(raw: Mapping[str, Any]) -> MaterialRequirements:
    """
    Validate a color -> {small, large} mapping.

    Counts must be non-negative integers; anything else is rejected rather
    than coerced to zero. A ``total`` key on a color is ignored.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("Requirements must be a mapping of color to counts")

    requirements: MaterialRequirements = {}
    errors: list[dict[str, Any]] = []

    for color, counts in raw.items():
        if not isinstance(color, str) or not color.strip():
            errors.append({"color": color, "msg": "Color must be a non-empty string"})
            continue
        if isinstance(counts, ColorRequirement):
            requirement = counts.model_copy()
        else:
            try:
                requirement = ColorRequirement.model_validate(counts)
            except PydanticValidationError as e:
                for err in e.errors():
                    errors.append(
                        {
                            "color": color,
                            "field": ".".join(str(p) for p in err["loc"]),
                            "msg": err["msg"],
                        }
                    )
                continue

        key = resolve_color(color)
        if key in requirements:
            requirements[key].add(small=requirement.small, large=requirement.large)
        else:
            requirements[key] = requirement

    if errors:
        raise ValidationError("Invalid balloon requirements", errors=errors)

    return requirements


def overall_status(lines: Iterable[AvailabilityLine]) -> AvailabilityStatus:
    """Worst status wins: unavailable, then low, then available."""
    statuses = {line.status for line in lines}
    if AvailabilityStatus.UNAVAILABLE in statuses:
        return AvailabilityStatus.UNAVAILABLE
    if AvailabilityStatus.LOW in statuses:
        return AvailabilityStatus.LOW
    return AvailabilityStatus.AVAILABLE


class AvailabilityEvaluator:
    """Classifies each (color, size) requirement against a stock snapshot."""

    def __init__(self, default_threshold: int = DEFAULT_THRESHOLD):
        self.default_threshold = default_threshold

    def classify(
        self,
        required: int,
        record: StockRecord | None,
    ) -> tuple[int, int, int, AvailabilityStatus]:
        """Return (in_stock, threshold, difference, status) for one line."""
        in_stock = record.quantity if record else 0
        threshold = record.threshold if record else self.default_threshold
        difference = in_stock - required

        if difference < 0:
            status = AvailabilityStatus.UNAVAILABLE
        elif in_stock <= threshold:
            status = AvailabilityStatus.LOW
        else:
            status = AvailabilityStatus.AVAILABLE

        return in_stock, threshold, difference, status

    def evaluate(
        self,
        requirements: Mapping[str, Any],
        stock: Iterable[StockRecord],
    ) -> AvailabilityReport:
        """
        Compare requirements with stock.

        Every color in the requirements yields one line per size, even when
        the count for that size is zero. Colors match case-insensitively;
        a missing record counts as zero in stock.

        Args:
            requirements: color -> {small, large} counts
            stock: Snapshot of stock records

        Returns:
            Report with one line per (color, size) and the overall status
        """
        validated = validate_requirements(requirements)

        by_key: dict[tuple[str, str], StockRecord] = {
            (record.color.value.lower(), record.size.value): record for record in stock
        }

        lines: list[AvailabilityLine] = []
        for color, requirement in validated.items():
            for size in (BalloonSize.SMALL, BalloonSize.LARGE):
                required = getattr(requirement, size.category)
                record = by_key.get((color.lower(), size.value))
                in_stock, threshold, difference, status = self.classify(required, record)

                lines.append(
                    AvailabilityLine(
                        color=color,
                        size=size,
                        required=required,
                        in_stock=in_stock,
                        threshold=threshold,
                        difference=difference,
                        status=status,
                    )
                )

        return AvailabilityReport(lines=lines, status=overall_status(lines))

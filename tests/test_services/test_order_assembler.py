"""Tests for order assembly and pricing."""

import pytest

from balloon_studio.errors import ValidationError
from balloon_studio.models.availability import AvailabilityStatus
from balloon_studio.models.inventory import BalloonColor, BalloonSize, StockRecord
from balloon_studio.services.availability import AvailabilityEvaluator
from balloon_studio.services.catalog import PriceTable, format_cents
from balloon_studio.services.order_assembler import OrderAssembler, OrderLineRequest


@pytest.fixture
def assembler() -> OrderAssembler:
    return OrderAssembler(PriceTable(small_cents=50, large_cents=75))


@pytest.fixture
def short_stock() -> list[StockRecord]:
    return [
        StockRecord(color=BalloonColor.RED, size=BalloonSize.SMALL, quantity=5, threshold=20),
        StockRecord(color=BalloonColor.RED, size=BalloonSize.LARGE, quantity=50, threshold=20),
        StockRecord(color=BalloonColor.BLUE, size=BalloonSize.LARGE, quantity=1, threshold=20),
    ]


REQUIREMENTS = {"red": {"small": 22, "large": 4}, "blue": {"small": 11, "large": 2}}


def test_orders_exactly_the_shortfall(assembler: OrderAssembler, short_stock: list[StockRecord]) -> None:
    report = AvailabilityEvaluator().evaluate(REQUIREMENTS, short_stock)

    draft = assembler.build_order(report.lines)

    ordered = {(item.color, item.size): item.quantity for item in draft.items}
    assert ordered == {
        (BalloonColor.RED, BalloonSize.SMALL): 17,
        (BalloonColor.BLUE, BalloonSize.SMALL): 11,
        (BalloonColor.BLUE, BalloonSize.LARGE): 1,
    }
    assert draft.total_quantity == 29
    assert draft.total_cost == 17 * 50 + 11 * 50 + 1 * 75


def test_ordering_the_shortfall_covers_every_line(
    assembler: OrderAssembler, short_stock: list[StockRecord]
) -> None:
    evaluator = AvailabilityEvaluator()
    report = evaluator.evaluate(REQUIREMENTS, short_stock)
    draft = assembler.build_order(report.unavailable_items)

    restocked = {record.key: record.model_copy() for record in short_stock}
    for item in draft.items:
        key = (item.color.value, item.size.value)
        if key in restocked:
            restocked[key].quantity += item.quantity
        else:
            restocked[key] = StockRecord(color=item.color, size=item.size, quantity=item.quantity)

    after = evaluator.evaluate(REQUIREMENTS, list(restocked.values()))
    assert all(line.difference >= 0 for line in after.lines)
    assert after.status is not AvailabilityStatus.UNAVAILABLE


def test_caller_quantities_are_used_as_given(
    assembler: OrderAssembler, short_stock: list[StockRecord]
) -> None:
    report = AvailabilityEvaluator().evaluate(REQUIREMENTS, short_stock)

    draft = assembler.build_order(
        report.lines,
        quantities={
            ("red", BalloonSize.SMALL): 100,
            ("blue", BalloonSize.SMALL): 0,
        },
    )

    ordered = {(item.color, item.size): item.quantity for item in draft.items}
    assert ordered == {
        (BalloonColor.RED, BalloonSize.SMALL): 100,
        (BalloonColor.BLUE, BalloonSize.LARGE): 1,
    }


@pytest.mark.parametrize("quantity", [-1, 2.5, "3", True])
def test_invalid_caller_quantity_is_rejected(
    assembler: OrderAssembler, short_stock: list[StockRecord], quantity
) -> None:
    report = AvailabilityEvaluator().evaluate(REQUIREMENTS, short_stock)

    with pytest.raises(ValidationError):
        assembler.build_order(report.lines, quantities={("red", BalloonSize.SMALL): quantity})


def test_nothing_unavailable_means_no_order(assembler: OrderAssembler) -> None:
    stock = [StockRecord(color=BalloonColor.RED, size=BalloonSize.SMALL, quantity=100)]
    report = AvailabilityEvaluator().evaluate({"red": {"small": 1}}, stock)

    with pytest.raises(ValidationError, match="at least one item"):
        assembler.build_order(report.lines)


def test_explicit_lines_keep_custom_price(assembler: OrderAssembler) -> None:
    draft = assembler.build_from_lines(
        [
            OrderLineRequest(color="Gold", size=BalloonSize.LARGE, quantity=4),
            OrderLineRequest(color="#FFFFFF", size=BalloonSize.SMALL, quantity=10, unit_price=199),
            OrderLineRequest(color="red", size=BalloonSize.SMALL, quantity=0),
        ]
    )

    assert [(item.color, item.unit_price, item.subtotal) for item in draft.items] == [
        (BalloonColor.GOLD, 75, 300),
        (BalloonColor.WHITE, 199, 1990),
    ]
    assert draft.total_cost == 2290


def test_explicit_lines_reject_unknown_color(assembler: OrderAssembler) -> None:
    with pytest.raises(ValidationError):
        assembler.build_from_lines(
            [OrderLineRequest(color="turquoise", size=BalloonSize.SMALL, quantity=1)]
        )


@pytest.mark.parametrize(
    "cents,expected",
    [(0, "$0.00"), (5, "$0.05"), (199, "$1.99"), (2290, "$22.90"), (-150, "-$1.50")],
)
def test_format_cents(cents: int, expected: str) -> None:
    assert format_cents(cents) == expected

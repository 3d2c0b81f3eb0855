from decimal import ROUND_HALF_UP, Decimal

from backend.invoicer.schemas.line_item import LineItemCreate
from backend.invoicer.services.invoice_totals import (
    TAX_RATE,
    compute_invoice_totals,
    line_item_total,
)


def test_line_item_total_rounds_half_up_to_cents():
    assert line_item_total(Decimal("2"), Decimal("10")) == Decimal("20.00")
    assert line_item_total(Decimal("1.5"), Decimal("33.33")) == Decimal("50.00")
    assert line_item_total(Decimal("0.333"), Decimal("1.5")) == Decimal("0.50")
    assert line_item_total(3, 0.1) == Decimal("0.30")


def test_worked_example_two_items():
    totals = compute_invoice_totals(
        [
            {"description": "A", "quantity": 2, "rate": 10},
            {"description": "B", "quantity": 1, "rate": 5},
        ]
    )
    assert [item.total for item in totals.line_items] == [Decimal("20.00"), Decimal("5.00")]
    assert totals.subtotal == Decimal("25.00")
    assert totals.tax == Decimal("2.13")
    assert totals.total == Decimal("27.13")


def test_accepts_schema_objects_and_preserves_order():
    items = [
        LineItemCreate(description="Design", quantity=Decimal("3"), rate=Decimal("75.50")),
        LineItemCreate(description="Hosting", quantity=Decimal("1"), rate=Decimal("19.99")),
    ]
    totals = compute_invoice_totals(items)
    assert [item.description for item in totals.line_items] == ["Design", "Hosting"]
    assert totals.subtotal == Decimal("246.49")
    assert totals.tax == Decimal("20.95")
    assert totals.total == totals.subtotal + totals.tax


def test_subtotal_is_sum_of_rounded_item_totals():
    items = [{"description": f"item {i}", "quantity": "0.5", "rate": "0.05"} for i in range(3)]
    totals = compute_invoice_totals(items)
    # each item 0.025 -> 0.03, so subtotal 0.09 rather than round(0.075)
    assert totals.subtotal == Decimal("0.09")


def test_totals_invariants_hold_over_a_grid():
    quantities = ["0", "1", "2.5", "7", "12.25"]
    rates = ["0", "0.99", "15", "80", "149.95"]
    items = [
        {"description": f"{q} x {r}", "quantity": q, "rate": r}
        for q in quantities
        for r in rates
    ]
    totals = compute_invoice_totals(items)
    for item in totals.line_items:
        assert item.total == (item.quantity * item.rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    assert totals.subtotal == sum((item.total for item in totals.line_items), Decimal("0"))
    assert totals.tax == (totals.subtotal * TAX_RATE).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    assert totals.total == totals.subtotal + totals.tax


def test_empty_sequence_yields_zeros():
    totals = compute_invoice_totals([])
    assert totals.line_items == ()
    assert totals.subtotal == Decimal("0.00")
    assert totals.tax == Decimal("0.00")
    assert totals.total == Decimal("0.00")


def test_negative_values_propagate():
    totals = compute_invoice_totals([{"description": "Refund", "quantity": -1, "rate": 40}])
    assert totals.subtotal == Decimal("-40.00")
    assert totals.tax == Decimal("-3.40")
    assert totals.total == Decimal("-43.40")


def test_custom_tax_rate():
    totals = compute_invoice_totals([{"description": "A", "quantity": 1, "rate": 100}], tax_rate=Decimal("0"))
    assert totals.tax == Decimal("0.00")
    assert totals.total == Decimal("100.00")

"""Invoice total computation.

Line item totals are ``quantity * rate`` rounded half-up to cents; the invoice
subtotal is the sum of those rounded totals, tax is the subtotal times the tax
rate rounded the same way, and the total is subtotal plus tax. Everything is
``Decimal`` arithmetic; floats are converted through ``str`` first.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Tuple

TAX_RATE = Decimal("0.085")
CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class LineItemTotal:
    description: str
    quantity: Decimal
    rate: Decimal
    total: Decimal

    def as_row(self) -> dict:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "rate": self.rate,
            "total": self.total,
        }


@dataclass(frozen=True)
class InvoiceTotals:
    line_items: Tuple[LineItemTotal, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def as_fields(self) -> dict:
        return {"subtotal": self.subtotal, "tax": self.tax, "total": self.total}


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_item_total(quantity: Decimal | float | int | str, rate: Decimal | float | int | str) -> Decimal:
    """Return ``quantity * rate`` rounded to cents. Negative inputs are not rejected."""
    return round_currency(to_decimal(quantity) * to_decimal(rate))


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item[name]
    return getattr(item, name)


def compute_invoice_totals(items: Iterable[Any], tax_rate: Decimal = TAX_RATE) -> InvoiceTotals:
    """Compute per-item totals and the invoice subtotal, tax and total.

    ``items`` may hold mappings or objects exposing ``description``, ``quantity``
    and ``rate``. Order is preserved. An empty input yields all zeros; rejecting
    empty invoices is up to the caller.
    """
    computed = []
    for item in items:
        quantity = to_decimal(_field(item, "quantity"))
        rate = to_decimal(_field(item, "rate"))
        computed.append(
            LineItemTotal(
                description=_field(item, "description"),
                quantity=quantity,
                rate=rate,
                total=line_item_total(quantity, rate),
            )
        )

    subtotal = round_currency(sum((item.total for item in computed), ZERO))
    tax = round_currency(subtotal * to_decimal(tax_rate))
    return InvoiceTotals(line_items=tuple(computed), subtotal=subtotal, tax=tax, total=subtotal + tax)

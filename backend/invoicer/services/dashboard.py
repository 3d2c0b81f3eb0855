"""Owner dashboard statistics computed fresh from the invoice and client sets."""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from backend.invoicer.services.storage import EntityStore

ACTIVE_CLIENT_WINDOW_DAYS = 90
OUTSTANDING_STATUSES = ("sent", "overdue")


def _money(value: Decimal | None) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def _previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def revenue_growth(current: Decimal, previous: Decimal) -> Decimal | None:
    """Percentage change from ``previous`` to ``current``; ``None`` when there is no baseline."""
    if previous == 0:
        return None
    change = (current - previous) / previous * Decimal("100")
    return change.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def get_dashboard_stats(store: EntityStore, *, owner_id: int, today: date) -> dict:
    invoices = store.list_owner_invoices(owner_id)
    clients = store.get_clients(owner_id)
    client_ids = {client.id for client in clients}

    total_revenue = Decimal("0.00")
    outstanding = Decimal("0.00")
    outstanding_count = 0
    this_month = Decimal("0.00")
    monthly_invoices = 0
    last_month = Decimal("0.00")
    prev_year, prev_month = _previous_month(today)
    window_start = today - timedelta(days=ACTIVE_CLIENT_WINDOW_DAYS - 1)
    active_client_ids = set()

    for invoice in invoices:
        amount = _money(invoice.total)
        if invoice.status == "paid":
            total_revenue += amount
        elif invoice.status in OUTSTANDING_STATUSES:
            outstanding += amount
            outstanding_count += 1

        issued = invoice.issue_date
        if issued.year == today.year and issued.month == today.month:
            this_month += amount
            monthly_invoices += 1
        elif issued.year == prev_year and issued.month == prev_month:
            last_month += amount

        if window_start <= issued <= today and invoice.client_id in client_ids:
            active_client_ids.add(invoice.client_id)

    return {
        "as_of": today.isoformat(),
        "total_revenue": total_revenue,
        "outstanding": outstanding,
        "outstanding_count": outstanding_count,
        "this_month": this_month,
        "monthly_invoices": monthly_invoices,
        "total_clients": len(clients),
        "revenue_growth": revenue_growth(this_month, last_month),
        "active_clients": len(active_client_ids),
    }

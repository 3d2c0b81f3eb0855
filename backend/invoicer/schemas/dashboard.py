"""Dashboard schemas for owner-level summaries."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class DashboardStats(BaseModel):
    as_of: str
    total_revenue: Decimal
    outstanding: Decimal
    outstanding_count: int
    this_month: Decimal
    monthly_invoices: int
    total_clients: int
    revenue_growth: Optional[Decimal] = None
    active_clients: int

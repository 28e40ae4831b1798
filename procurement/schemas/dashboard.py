"""Pydantic schemas for the dashboard summary."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class RecentPurchaseOrder(BaseModel):
    """One of the latest purchase orders shown on the dashboard."""

    no_po: str
    perihal_project: Optional[str] = None
    nama_vendor: Optional[str] = None
    nominal: Decimal


class DashboardStatsResponse(BaseModel):
    """Headline procurement figures."""

    total_po: int
    total_value: Decimal
    paid_invoices: int
    pending_invoices: int
    recent_pos: list[RecentPurchaseOrder]

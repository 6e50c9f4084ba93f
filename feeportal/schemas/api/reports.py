from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class DashboardStats(BaseModel):
    """Aggregates returned by /dashboard/stats."""
    total_students: int = 0
    total_fees: Decimal = Decimal("0")
    collected_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    defaulters_count: int = 0

    model_config = ConfigDict(extra="allow")


class FeeSummary(BaseModel):
    """Per-status totals computed client-side over fee records."""
    total_amount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    overdue_amount: Decimal = Decimal("0")
    total_count: int = 0
    paid_count: int = 0
    pending_count: int = 0
    overdue_count: int = 0


class CollectionSummary(BaseModel):
    """Dashboard headline figures."""
    total_fees: Decimal = Decimal("0")
    collected_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    overdue_amount: Decimal = Decimal("0")
    collection_rate: float = Field(0.0, description="Collected as a percentage of total fees")
    defaulters_count: int = 0

"""Immutable weekly reconciliation snapshots."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import new_id

UNASSIGNED_PROJECT_NAME = "Sin proyecto"
UNASSIGNED_OWNER = "-"


class WeeklyCutLine(BaseModel):
    """Totals for one project bucket inside a weekly cut."""

    model_config = ConfigDict(frozen=True)

    project_id: Optional[str] = None
    name: str
    owner: str
    country: Optional[str] = None
    payment_count: int = Field(..., ge=0)
    total: Decimal
    commission_pct: Decimal
    commission: Decimal
    payable: Decimal

    @property
    def is_unassigned(self) -> bool:
        return self.project_id is None


class WeeklyCutDraft(BaseModel):
    """Computed figures for a Friday-to-Thursday window before saving."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    total_income: Decimal
    total_commission: Decimal
    total_payable: Decimal
    amortized_expenses: Decimal
    net_profit: Decimal
    project_lines: List[WeeklyCutLine] = Field(default_factory=list)


class WeeklyCut(WeeklyCutDraft):
    """A persisted weekly cut. Never recomputed once stored."""

    id: str = Field(default_factory=new_id)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

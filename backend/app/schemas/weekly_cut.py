"""Pydantic schemas for weekly reconciliation cuts."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WeeklyCutLineRead(BaseModel):
    project_id: Optional[str] = None
    name: str
    owner: str
    country: Optional[str] = None
    payment_count: int
    total: Decimal
    commission_pct: Decimal
    commission: Decimal
    payable: Decimal

    model_config = ConfigDict(from_attributes=True)


class WeeklyCutPreview(BaseModel):
    """Unsaved figures for a Friday-to-Thursday window."""

    start_date: date
    end_date: date
    label: str
    is_current: bool
    total_income: Decimal
    total_commission: Decimal
    total_payable: Decimal
    amortized_expenses: Decimal
    net_profit: Decimal
    project_lines: List[WeeklyCutLineRead] = Field(default_factory=list)


class WeeklyCutCreate(BaseModel):
    start_date: Optional[date] = Field(
        default=None, description="Friday opening the window; defaults to the current week"
    )
    notes: Optional[str] = Field(default=None, description="Free-text notes for the cut")


class WeeklyCutRead(BaseModel):
    id: str
    start_date: date
    end_date: date
    total_income: Decimal
    total_commission: Decimal
    total_payable: Decimal
    amortized_expenses: Decimal
    net_profit: Decimal
    project_lines: List[WeeklyCutLineRead] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WeeklyCutShareText(BaseModel):
    text: str

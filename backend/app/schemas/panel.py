"""Pydantic schemas for the panel resources."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.panel import PanelStatus


class PanelBase(BaseModel):
    name: str = Field(..., min_length=1, description="Display name of the panel")
    total_capacity: int = Field(..., ge=0, description="Number of slots the panel offers")
    monthly_cost: Decimal = Field(
        default=Decimal("0"), ge=0, description="Recurring monthly cost of the panel"
    )
    status: PanelStatus = PanelStatus.ACTIVE


class PanelCreate(PanelBase):
    """Schema used to create new panels."""

    pass


class PanelUpdate(BaseModel):
    """Schema used when updating a panel. Used capacity is never edited directly."""

    name: Optional[str] = Field(default=None, min_length=1)
    total_capacity: Optional[int] = Field(default=None, ge=0)
    monthly_cost: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[PanelStatus] = None


class PanelRead(PanelBase):
    """Schema representing stored panels with their occupancy."""

    id: str
    used_capacity: int
    available_capacity: int

    model_config = ConfigDict(from_attributes=True)

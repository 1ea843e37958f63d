"""Record definitions for capacity-limited panels."""

from __future__ import annotations

import enum
from decimal import Decimal

from pydantic import BaseModel, Field

from .identifiers import new_id


class PanelStatus(str, enum.Enum):
    """Lifecycle status options for a panel."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Panel(BaseModel):
    """A resource pool that subscriptions occupy one slot at a time."""

    id: str = Field(default_factory=new_id)
    name: str
    total_capacity: int = Field(..., ge=0)
    used_capacity: int = Field(default=0, ge=0)
    monthly_cost: Decimal = Field(default=Decimal("0"), ge=0)
    status: PanelStatus = PanelStatus.ACTIVE

    @property
    def available_capacity(self) -> int:
        return max(0, self.total_capacity - self.used_capacity)

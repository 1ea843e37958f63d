from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, description="Name of the project")
    owner: str = Field(default="", description="Owner who receives the payable share")
    country: Optional[str] = None
    commission_pct: Decimal = Field(
        default=Decimal("0"), description="Percentage of income kept by the operator"
    )


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    owner: Optional[str] = None
    country: Optional[str] = None
    commission_pct: Optional[Decimal] = None


class ProjectRead(ProjectBase):
    id: str

    model_config = ConfigDict(from_attributes=True)

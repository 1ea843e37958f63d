"""Record definitions for upstream projects that share payment income."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .identifiers import new_id


class Project(BaseModel):
    """An upstream project whose payments are split with its owner."""

    id: str = Field(default_factory=new_id)
    name: str
    owner: str = ""
    country: Optional[str] = None
    commission_pct: Decimal = Field(default=Decimal("0"), ge=0, le=100)

"""Record definitions for clients."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .identifiers import new_id


class Client(BaseModel):
    """Represents a client that may hold subscriptions on several panels."""

    id: str = Field(default_factory=new_id)
    name: str
    phone: str = ""
    country: Optional[str] = None

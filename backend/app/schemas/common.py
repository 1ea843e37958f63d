"""Shared schema definitions."""

from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field, computed_field

ItemT = TypeVar("ItemT")


class PaginatedResponse(BaseModel, Generic[ItemT]):
    """One page of a listing plus the window that produced it."""

    items: List[ItemT] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)
    skip: int = Field(..., ge=0)

    @computed_field  # type: ignore[misc]
    @property
    def has_more(self) -> bool:
        return self.skip + len(self.items) < self.total

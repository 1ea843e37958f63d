"""Pydantic schemas for the client resources."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import PaginatedResponse


class ClientBase(BaseModel):
    """Attributes shared by create and read operations."""

    name: str = Field(..., min_length=1, description="Client name")
    phone: str = Field(default="", description="Contact handle, usually a WhatsApp number")
    country: Optional[str] = None


class ClientCreate(ClientBase):
    """Schema used when creating a client."""

    pass


class ClientUpdate(BaseModel):
    """Schema used when updating an existing client."""

    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    country: Optional[str] = None


class ClientRead(ClientBase):
    """Client representation returned by the API."""

    id: str

    model_config = ConfigDict(from_attributes=True)


class ClientListResponse(PaginatedResponse[ClientRead]):
    """Paginated client listing."""

    pass

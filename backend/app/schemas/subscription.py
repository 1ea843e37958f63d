"""Pydantic schemas for subscription lifecycle operations."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.subscription import SubscriptionStatus


class SubscriptionCreate(BaseModel):
    client_id: str = Field(..., description="Client that owns the subscription")
    panel_id: str = Field(..., description="Panel providing the slot")
    service: str = Field(..., min_length=1, description="Name of the contracted service")
    start_date: date = Field(..., description="First day of the 30-day cycle")
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Charged price")


class SubscriptionRenew(BaseModel):
    from_date: Optional[date] = Field(
        default=None,
        description="Renew from this date when it is later than the current expiration",
    )


class SubscriptionRead(BaseModel):
    id: str
    client_id: str
    panel_id: str
    service: str
    start_date: date
    expiration_date: date
    status: SubscriptionStatus
    price: Decimal
    effective_status: SubscriptionStatus
    expiry_state: str

    model_config = ConfigDict(from_attributes=True)


class ReminderRead(BaseModel):
    subscription_id: str
    client_id: str
    reminder_type: str
    message: str
    url: str

    model_config = ConfigDict(from_attributes=True)

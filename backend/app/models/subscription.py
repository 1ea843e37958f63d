"""Record definitions for client subscriptions."""

from __future__ import annotations

import enum
from datetime import date, timedelta
from decimal import Decimal

from pydantic import BaseModel, Field

from .identifiers import new_id

CYCLE_LENGTH = timedelta(days=30)


class SubscriptionStatus(str, enum.Enum):
    """Stored status values for a subscription."""

    ACTIVE = "active"
    EXPIRED = "expired"


class Subscription(BaseModel):
    """A client's time-boxed access to a service through one panel slot."""

    id: str = Field(default_factory=new_id)
    client_id: str
    panel_id: str
    service: str
    start_date: date
    expiration_date: date
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    price: Decimal = Field(default=Decimal("0"), ge=0)

"""Pydantic schemas for the calendar projection."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .client import ClientRead
from .payment import PaymentRead


class CalendarSubscriptionEvent(BaseModel):
    subscription_id: str
    service: str
    panel_id: str
    start_date: date
    expiration_date: date
    client: ClientRead


class CalendarDayRead(BaseModel):
    day: date
    renewals: List[CalendarSubscriptionEvent] = Field(default_factory=list)
    expirations: List[CalendarSubscriptionEvent] = Field(default_factory=list)
    payments: List[PaymentRead] = Field(default_factory=list)
    new_clients: List[ClientRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class WeekSummaryRead(BaseModel):
    start_date: date
    end_date: date
    payment_count: int
    original_totals: Dict[str, Decimal] = Field(default_factory=dict)
    renewal_count: int
    expiration_count: int

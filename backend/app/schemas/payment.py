from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.payment import PaymentMethod
from .common import PaginatedResponse


class PaymentBase(BaseModel):
    """Shared attributes for payment operations."""

    client_id: str = Field(..., description="Client who paid")
    project_id: Optional[str] = Field(
        default=None, description="Project the income is attributed to"
    )
    paid_on: date = Field(..., description="Date when the payment was received")
    method: PaymentMethod = Field(
        default=PaymentMethod.EFECTIVO, description="Payment method used by the client"
    )
    note: Optional[str] = Field(default=None, description="Optional note for the payment")


class PaymentCreate(PaymentBase):
    """Schema used when recording a payment.

    Either ``amount`` is given in the ledger currency, or ``original_amount``
    with its ``currency`` and an ``exchange_rate`` (units of the foreign
    currency per ledger unit) so the amount can be derived.
    """

    amount: Optional[Decimal] = Field(default=None, gt=0)
    original_amount: Optional[Decimal] = Field(default=None, gt=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    exchange_rate: Optional[Decimal] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def validate_amounts(self):
        if self.original_amount is not None and not self.currency:
            raise ValueError("Debes indicar la moneda del monto original.")
        if self.amount is None and (self.original_amount is None or self.exchange_rate is None):
            raise ValueError(
                "Debes indicar el monto o el monto original con su tipo de cambio."
            )
        if self.currency:
            self.currency = self.currency.upper()
        return self


class PaymentRead(PaymentBase):
    """Schema returned when reading payment data."""

    id: str
    amount: Decimal
    original_amount: Optional[Decimal] = None
    currency: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentListResponse(PaginatedResponse[PaymentRead]):
    """Paginated payment listing."""

    pass

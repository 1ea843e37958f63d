"""Record definitions for client payments."""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import new_id


class PaymentMethod(str, enum.Enum):
    """Supported payment methods."""

    EFECTIVO = "Efectivo"
    TRANSFERENCIA = "Transferencia"
    TARJETA = "Tarjeta"
    OTRO = "Otro"


class Payment(BaseModel):
    """An immutable payment received from a client."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    client_id: str
    project_id: Optional[str] = None
    paid_on: date
    amount: Decimal
    original_amount: Optional[Decimal] = None
    currency: Optional[str] = None
    method: PaymentMethod = PaymentMethod.EFECTIVO
    note: Optional[str] = None

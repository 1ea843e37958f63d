"""Business logic for payment operations."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from .. import models, schemas
from ..errors import NotFoundError, ValidationError
from ..store import PAYMENTS, EntityStore
from .money import to_money

LOGGER = logging.getLogger(__name__)


class PaymentService:
    """Operations for reading and recording payments."""

    @staticmethod
    def list_payments(
        store: EntityStore,
        *,
        client_id: Optional[str] = None,
        project_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        method: Optional[models.PaymentMethod] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.Payment], int]:
        items = list(store.payments.values())
        if client_id:
            items = [item for item in items if item.client_id == client_id]
        if project_id:
            items = [item for item in items if item.project_id == project_id]
        if start_date:
            items = [item for item in items if item.paid_on >= start_date]
        if end_date:
            items = [item for item in items if item.paid_on <= end_date]
        if method:
            items = [item for item in items if item.method == method]

        items.sort(key=lambda item: item.paid_on, reverse=True)
        total = len(items)
        start = max(skip, 0)
        return items[start : start + max(limit, 1)], total

    @staticmethod
    def payments_between(
        store: EntityStore, start_date: date, end_date: date
    ) -> list[models.Payment]:
        """Payments dated inside ``[start_date, end_date]`` in recording order."""

        return [
            payment
            for payment in store.payments.values()
            if start_date <= payment.paid_on <= end_date
        ]

    @staticmethod
    def _resolve_amount(data: schemas.PaymentCreate) -> Decimal:
        if data.amount is not None:
            return to_money(data.amount)
        if data.original_amount is None or not data.exchange_rate:
            raise ValidationError("amount or original_amount with exchange_rate is required")
        return to_money(Decimal(data.original_amount) / Decimal(data.exchange_rate))

    @classmethod
    def record_payment(cls, store: EntityStore, data: schemas.PaymentCreate) -> models.Payment:
        amount = cls._resolve_amount(data)
        if amount <= 0:
            raise ValidationError("amount must be greater than zero")

        payment = models.Payment(
            client_id=data.client_id,
            project_id=data.project_id or None,
            paid_on=data.paid_on,
            amount=amount,
            original_amount=to_money(data.original_amount) if data.original_amount else None,
            currency=data.currency if data.original_amount else None,
            method=data.method,
            note=data.note,
        )
        with store.transaction(PAYMENTS):
            if data.client_id not in store.clients:
                raise ValidationError(f"Unknown client '{data.client_id}'")
            if data.project_id and data.project_id not in store.projects:
                raise ValidationError(f"Unknown project '{data.project_id}'")
            store.payments[payment.id] = payment

        LOGGER.info(
            "Recorded payment %s of %s for client %s", payment.id, payment.amount, payment.client_id
        )
        return payment

    @staticmethod
    def get_payment(store: EntityStore, payment_id: str) -> Optional[models.Payment]:
        return store.payments.get(payment_id)

    @staticmethod
    def delete_payment(store: EntityStore, payment_id: str) -> None:
        with store.transaction(PAYMENTS):
            if payment_id not in store.payments:
                raise NotFoundError("Payment not found")
            del store.payments[payment_id]

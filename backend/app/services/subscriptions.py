"""Lifecycle operations for subscriptions on the 30-day billing cycle."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from .. import models, schemas
from ..errors import CapacityExceeded, NotFoundError, ValidationError
from ..store import PANELS, SUBSCRIPTIONS, EntityStore
from .capacity import CapacityLedger
from .money import to_money

LOGGER = logging.getLogger(__name__)

EXPIRY_OVERDUE = "vencido"
EXPIRY_TODAY = "hoy"
EXPIRY_ACTIVE = "activo"


class SubscriptionLifecycle:
    """Creates, renews and removes subscriptions, keeping panel occupancy in sync.

    A subscription only becomes ``expired`` by observation: comparing its
    expiration date with the current date. The stored status is rewritten
    only by a renewal.
    """

    @staticmethod
    def list_subscriptions(
        store: EntityStore,
        *,
        client_id: Optional[str] = None,
        panel_id: Optional[str] = None,
    ) -> Iterable[models.Subscription]:
        items = list(store.subscriptions.values())
        if client_id:
            items = [item for item in items if item.client_id == client_id]
        if panel_id:
            items = [item for item in items if item.panel_id == panel_id]
        return sorted(items, key=lambda item: (item.expiration_date, item.service))

    @staticmethod
    def get_subscription(store: EntityStore, subscription_id: str) -> Optional[models.Subscription]:
        return store.subscriptions.get(subscription_id)

    @staticmethod
    def _require(store: EntityStore, subscription_id: str) -> models.Subscription:
        subscription = store.subscriptions.get(subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription not found")
        return subscription

    @staticmethod
    def create(
        store: EntityStore,
        client_id: str,
        panel_id: str,
        service: str,
        start_date: date,
        *,
        price: Decimal | int | str = 0,
    ) -> models.Subscription:
        service_name = (service or "").strip()
        if not service_name:
            raise ValidationError("service is required")

        with store.transaction(SUBSCRIPTIONS, PANELS):
            if client_id not in store.clients:
                raise ValidationError(f"Unknown client '{client_id}'")
            panel = store.panels.get(panel_id)
            if panel is None:
                raise ValidationError(f"Unknown panel '{panel_id}'")
            if CapacityLedger.available_capacity(store, panel_id) <= 0:
                raise CapacityExceeded(panel_id, panel.total_capacity, panel.used_capacity)

            subscription = models.Subscription(
                client_id=client_id,
                panel_id=panel_id,
                service=service_name,
                start_date=start_date,
                expiration_date=start_date + models.CYCLE_LENGTH,
                price=to_money(price),
            )
            store.subscriptions[subscription.id] = subscription
            CapacityLedger.reserve(store, panel_id)

        LOGGER.info(
            "Subscription %s created for client %s on panel %s until %s",
            subscription.id,
            client_id,
            panel_id,
            subscription.expiration_date,
        )
        return subscription

    @classmethod
    def create_from_schema(
        cls, store: EntityStore, data: schemas.SubscriptionCreate
    ) -> models.Subscription:
        return cls.create(
            store,
            data.client_id,
            data.panel_id,
            data.service,
            data.start_date,
            price=data.price,
        )

    @classmethod
    def renew(
        cls,
        store: EntityStore,
        subscription_id: str,
        from_date: Optional[date] = None,
    ) -> models.Subscription:
        """Extend by one cycle from the later of the current expiration and ``from_date``."""

        with store.transaction(SUBSCRIPTIONS):
            subscription = cls._require(store, subscription_id)
            anchor = subscription.expiration_date
            if from_date is not None and from_date > anchor:
                anchor = from_date
            subscription.expiration_date = anchor + models.CYCLE_LENGTH
            subscription.status = models.SubscriptionStatus.ACTIVE

        LOGGER.info(
            "Subscription %s renewed until %s", subscription.id, subscription.expiration_date
        )
        return subscription

    @classmethod
    def delete(cls, store: EntityStore, subscription_id: str) -> None:
        with store.transaction(SUBSCRIPTIONS, PANELS):
            subscription = cls._require(store, subscription_id)
            del store.subscriptions[subscription_id]
            CapacityLedger.release(store, subscription.panel_id, 1)

    @staticmethod
    def effective_status(
        subscription: models.Subscription, today: Optional[date] = None
    ) -> models.SubscriptionStatus:
        today = today or date.today()
        if subscription.expiration_date < today:
            return models.SubscriptionStatus.EXPIRED
        return subscription.status

    @staticmethod
    def expiry_state(subscription: models.Subscription, today: Optional[date] = None) -> str:
        today = today or date.today()
        if subscription.expiration_date < today:
            return EXPIRY_OVERDUE
        if subscription.expiration_date == today:
            return EXPIRY_TODAY
        return EXPIRY_ACTIVE

    @classmethod
    def to_read(
        cls, subscription: models.Subscription, today: Optional[date] = None
    ) -> schemas.SubscriptionRead:
        return schemas.SubscriptionRead(
            **subscription.model_dump(),
            effective_status=cls.effective_status(subscription, today),
            expiry_state=cls.expiry_state(subscription, today),
        )

"""Read-only projection of subscription and payment activity onto calendar days."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Tuple

from .. import models
from ..store import EntityStore
from .money import to_money

SubscriptionEvent = Tuple[models.Subscription, models.Client]


@dataclass
class CalendarDay:
    """Events derived for one date. Every category is always a list."""

    day: date
    renewals: List[SubscriptionEvent] = field(default_factory=list)
    expirations: List[SubscriptionEvent] = field(default_factory=list)
    payments: List[models.Payment] = field(default_factory=list)
    new_clients: List[models.Client] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.renewals or self.expirations or self.payments or self.new_clients)


@dataclass
class WeekSummary:
    start_date: date
    end_date: date
    payment_count: int = 0
    original_totals: Dict[str, Decimal] = field(default_factory=dict)
    renewal_count: int = 0
    expiration_count: int = 0


class CalendarProjector:
    """Derives calendar events by scanning the whole store on every query.

    No event index is kept, so each date costs one pass over subscriptions,
    payments and clients. A renewal is approximated as a subscription whose
    start date matches the day while it is still active; the store keeps no
    separate renewal timestamp.
    """

    @staticmethod
    def _first_start_by_client(store: EntityStore) -> Dict[str, date]:
        first_start: Dict[str, date] = {}
        for subscription in store.subscriptions.values():
            current = first_start.get(subscription.client_id)
            if current is None or subscription.start_date < current:
                first_start[subscription.client_id] = subscription.start_date
        return first_start

    @classmethod
    def events_for_date(cls, store: EntityStore, day: date) -> CalendarDay:
        events = CalendarDay(day=day)

        for subscription in store.subscriptions.values():
            client = store.clients.get(subscription.client_id)
            if client is None:
                continue
            if (
                subscription.start_date == day
                and subscription.status == models.SubscriptionStatus.ACTIVE
            ):
                events.renewals.append((subscription, client))
            if subscription.expiration_date == day:
                events.expirations.append((subscription, client))

        events.payments = [
            payment for payment in store.payments.values() if payment.paid_on == day
        ]

        for client_id, first_start in cls._first_start_by_client(store).items():
            client = store.clients.get(client_id)
            if client is not None and first_start == day:
                events.new_clients.append(client)

        return events

    @classmethod
    def events_for_range(cls, store: EntityStore, start_date: date, end_date: date) -> List[CalendarDay]:
        days: List[CalendarDay] = []
        current = start_date
        while current <= end_date:
            days.append(cls.events_for_date(store, current))
            current += timedelta(days=1)
        return days

    @classmethod
    def week_summary(cls, store: EntityStore, day: date) -> WeekSummary:
        """Totals for the Monday-to-Sunday week containing ``day``."""

        start = day - timedelta(days=day.weekday())
        end = start + timedelta(days=6)
        summary = WeekSummary(start_date=start, end_date=end)
        totals: Dict[str, Decimal] = defaultdict(Decimal)

        for events in cls.events_for_range(store, start, end):
            summary.payment_count += len(events.payments)
            summary.renewal_count += len(events.renewals)
            summary.expiration_count += len(events.expirations)
            for payment in events.payments:
                if payment.currency and payment.original_amount is not None:
                    totals[payment.currency] += Decimal(payment.original_amount)

        summary.original_totals = {currency: to_money(amount) for currency, amount in totals.items()}
        return summary

from __future__ import annotations

from datetime import date
from decimal import Decimal

from backend.app import models, schemas
from backend.app.services import CalendarProjector, PaymentService, SubscriptionLifecycle


def test_empty_day_has_every_category(store, seed_basic_data) -> None:
    events = CalendarProjector.events_for_date(store, date(2024, 3, 15))

    assert events.renewals == []
    assert events.expirations == []
    assert events.payments == []
    assert events.new_clients == []
    assert events.is_empty


def test_start_date_counts_as_renewal_and_new_client(store, seed_basic_data) -> None:
    subscription = seed_basic_data["subscription"]
    customer = seed_basic_data["client"]

    events = CalendarProjector.events_for_date(store, date(2024, 1, 1))

    assert events.renewals == [(subscription, customer)]
    assert events.new_clients == [customer]
    assert events.expirations == []


def test_only_earliest_start_marks_a_new_client(store, seed_basic_data) -> None:
    customer = seed_basic_data["client"]
    later = SubscriptionLifecycle.create(
        store, customer.id, seed_basic_data["spare_panel"].id, "Spotify", date(2024, 1, 10)
    )

    events = CalendarProjector.events_for_date(store, date(2024, 1, 10))

    assert events.renewals == [(later, customer)]
    assert events.new_clients == []


def test_expirations_ignore_status(store, seed_basic_data) -> None:
    subscription = seed_basic_data["subscription"]
    subscription.status = models.SubscriptionStatus.EXPIRED

    assert CalendarProjector.events_for_date(store, date(2024, 1, 1)).renewals == []
    expirations = CalendarProjector.events_for_date(store, date(2024, 1, 31)).expirations
    assert [sub.id for sub, _ in expirations] == [subscription.id]


def test_subscriptions_without_client_are_skipped(store, seed_basic_data) -> None:
    del store.clients[seed_basic_data["client"].id]

    events = CalendarProjector.events_for_date(store, date(2024, 1, 1))

    assert events.renewals == []
    assert events.new_clients == []


def test_payments_on_the_day(store, seed_basic_data) -> None:
    payment = PaymentService.record_payment(
        store,
        schemas.PaymentCreate(
            client_id=seed_basic_data["client"].id, paid_on=date(2024, 1, 5), amount=Decimal("30")
        ),
    )

    assert CalendarProjector.events_for_date(store, date(2024, 1, 5)).payments == [payment]
    assert CalendarProjector.events_for_date(store, date(2024, 1, 6)).payments == []


def test_range_returns_one_entry_per_day(store, seed_basic_data) -> None:
    days = CalendarProjector.events_for_range(store, date(2024, 1, 30), date(2024, 2, 2))

    assert [events.day for events in days] == [
        date(2024, 1, 30),
        date(2024, 1, 31),
        date(2024, 2, 1),
        date(2024, 2, 2),
    ]
    assert len(days[1].expirations) == 1


def test_week_summary_covers_monday_to_sunday(store, seed_basic_data) -> None:
    customer_id = seed_basic_data["client"].id
    PaymentService.record_payment(
        store,
        schemas.PaymentCreate(
            client_id=customer_id,
            paid_on=date(2024, 1, 5),
            original_amount=Decimal("170"),
            currency="MXN",
            exchange_rate=Decimal("17"),
        ),
    )
    PaymentService.record_payment(
        store,
        schemas.PaymentCreate(client_id=customer_id, paid_on=date(2024, 1, 7), amount=Decimal("5")),
    )
    PaymentService.record_payment(
        store,
        schemas.PaymentCreate(client_id=customer_id, paid_on=date(2024, 1, 8), amount=Decimal("5")),
    )

    summary = CalendarProjector.week_summary(store, date(2024, 1, 3))

    assert summary.start_date == date(2024, 1, 1)
    assert summary.end_date == date(2024, 1, 7)
    assert summary.payment_count == 2
    assert summary.original_totals == {"MXN": Decimal("170.00")}
    assert summary.renewal_count == 1
    assert summary.expiration_count == 0

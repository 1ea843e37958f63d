"""Router exposing the calendar projection."""

from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .. import schemas
from ..services import CalendarDay, CalendarProjector
from ..store import EntityStore, get_store

router = APIRouter()

MAX_RANGE_DAYS = 62


def _subscription_events(events) -> List[schemas.CalendarSubscriptionEvent]:
    return [
        schemas.CalendarSubscriptionEvent(
            subscription_id=subscription.id,
            service=subscription.service,
            panel_id=subscription.panel_id,
            start_date=subscription.start_date,
            expiration_date=subscription.expiration_date,
            client=schemas.ClientRead.model_validate(client, from_attributes=True),
        )
        for subscription, client in events
    ]


def _day_read(events: CalendarDay) -> schemas.CalendarDayRead:
    return schemas.CalendarDayRead(
        day=events.day,
        renewals=_subscription_events(events.renewals),
        expirations=_subscription_events(events.expirations),
        payments=[
            schemas.PaymentRead.model_validate(payment, from_attributes=True)
            for payment in events.payments
        ],
        new_clients=[
            schemas.ClientRead.model_validate(client, from_attributes=True)
            for client in events.new_clients
        ],
    )


@router.get("/days/{day}", response_model=schemas.CalendarDayRead)
def get_day_events(day: date, store: EntityStore = Depends(get_store)) -> schemas.CalendarDayRead:
    return _day_read(CalendarProjector.events_for_date(store, day))


@router.get("/range", response_model=List[schemas.CalendarDayRead])
def get_range_events(
    start_date: date = Query(..., description="First day of the range"),
    end_date: date = Query(..., description="Last day of the range"),
    store: EntityStore = Depends(get_store),
) -> List[schemas.CalendarDayRead]:
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date cannot be after end_date",
        )
    if (end_date - start_date).days >= MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ranges are limited to {MAX_RANGE_DAYS} days",
        )
    return [
        _day_read(events)
        for events in CalendarProjector.events_for_range(store, start_date, end_date)
    ]


@router.get("/week-summary", response_model=schemas.WeekSummaryRead)
def get_week_summary(
    day: date = Query(..., description="Any day inside the Monday-to-Sunday week"),
    store: EntityStore = Depends(get_store),
) -> schemas.WeekSummaryRead:
    summary = CalendarProjector.week_summary(store, day)
    return schemas.WeekSummaryRead(
        start_date=summary.start_date,
        end_date=summary.end_date,
        payment_count=summary.payment_count,
        original_totals=summary.original_totals,
        renewal_count=summary.renewal_count,
        expiration_count=summary.expiration_count,
    )

"""Router exposing subscription lifecycle operations."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .. import schemas
from ..errors import LedgerError
from ..services import ReminderService, SubscriptionLifecycle
from ..store import EntityStore, get_store
from .errors import to_http_exception

router = APIRouter()


def _reminder_read(reminder) -> schemas.ReminderRead:
    return schemas.ReminderRead(
        subscription_id=reminder.subscription_id,
        client_id=reminder.client_id,
        reminder_type=reminder.reminder_type.value,
        message=reminder.message,
        url=reminder.url,
    )


@router.get("/", response_model=List[schemas.SubscriptionRead])
def list_subscriptions(
    client_id: Optional[str] = Query(None, description="Filter by client"),
    panel_id: Optional[str] = Query(None, description="Filter by panel"),
    reference_date: Optional[date] = Query(
        None, description="Date used to derive the expiration state"
    ),
    store: EntityStore = Depends(get_store),
) -> List[schemas.SubscriptionRead]:
    subscriptions = SubscriptionLifecycle.list_subscriptions(
        store, client_id=client_id, panel_id=panel_id
    )
    return [SubscriptionLifecycle.to_read(item, reference_date) for item in subscriptions]


@router.get("/reminders/due", response_model=List[schemas.ReminderRead])
def list_due_reminders(
    days_ahead: int = Query(3, ge=0, le=60, description="Look-ahead window in days"),
    reference_date: Optional[date] = Query(None, description="Date treated as today"),
    store: EntityStore = Depends(get_store),
) -> List[schemas.ReminderRead]:
    reminders = ReminderService.due_reminders(
        store, today=reference_date, days_ahead=days_ahead
    )
    return [_reminder_read(reminder) for reminder in reminders]


@router.get("/{subscription_id}", response_model=schemas.SubscriptionRead)
def get_subscription(
    subscription_id: str,
    reference_date: Optional[date] = Query(None),
    store: EntityStore = Depends(get_store),
) -> schemas.SubscriptionRead:
    subscription = SubscriptionLifecycle.get_subscription(store, subscription_id)
    if subscription is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")
    return SubscriptionLifecycle.to_read(subscription, reference_date)


@router.post("/", response_model=schemas.SubscriptionRead, status_code=status.HTTP_201_CREATED)
def create_subscription(
    subscription_in: schemas.SubscriptionCreate,
    store: EntityStore = Depends(get_store),
) -> schemas.SubscriptionRead:
    try:
        subscription = SubscriptionLifecycle.create_from_schema(store, subscription_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return SubscriptionLifecycle.to_read(subscription)


@router.post("/{subscription_id}/renew", response_model=schemas.SubscriptionRead)
def renew_subscription(
    subscription_id: str,
    renew_in: Optional[schemas.SubscriptionRenew] = None,
    store: EntityStore = Depends(get_store),
) -> schemas.SubscriptionRead:
    try:
        subscription = SubscriptionLifecycle.renew(
            store, subscription_id, renew_in.from_date if renew_in else None
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return SubscriptionLifecycle.to_read(subscription)


@router.get("/{subscription_id}/reminder", response_model=schemas.ReminderRead)
def get_subscription_reminder(
    subscription_id: str,
    reference_date: Optional[date] = Query(None, description="Date treated as today"),
    store: EntityStore = Depends(get_store),
) -> schemas.ReminderRead:
    try:
        reminder = ReminderService.reminder_for(store, subscription_id, today=reference_date)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _reminder_read(reminder)


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subscription(subscription_id: str, store: EntityStore = Depends(get_store)) -> None:
    try:
        SubscriptionLifecycle.delete(store, subscription_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

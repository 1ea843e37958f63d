from __future__ import annotations

from datetime import date

import pytest

from backend.app.errors import NotFoundError
from backend.app.services import ReminderService, ReminderType


def test_reminder_type_follows_expiration(seed_basic_data) -> None:
    subscription = seed_basic_data["subscription"]

    assert ReminderService.reminder_type(subscription, date(2024, 1, 28)) == ReminderType.UPCOMING
    assert ReminderService.reminder_type(subscription, date(2024, 1, 31)) == ReminderType.TODAY
    assert ReminderService.reminder_type(subscription, date(2024, 2, 3)) == ReminderType.OVERDUE


def test_reminder_message_and_link(store, seed_basic_data) -> None:
    reminder = ReminderService.reminder_for(
        store, seed_basic_data["subscription"].id, today=date(2024, 1, 31)
    )

    assert reminder.reminder_type == ReminderType.TODAY
    assert reminder.message.startswith("Hola Cliente Demo")
    assert "*vence hoy* (31 de enero)" in reminder.message
    assert reminder.url.startswith("https://wa.me/525512345678?text=Hola%20Cliente%20Demo")
    assert "\n" not in reminder.url


def test_overdue_message_mentions_expiration_date(store, seed_basic_data) -> None:
    reminder = ReminderService.reminder_for(
        store, seed_basic_data["subscription"].id, today=date(2024, 2, 10)
    )

    assert "venció el *31 de enero*" in reminder.message


def test_due_reminders_use_look_ahead_window(store, seed_basic_data) -> None:
    subscription_id = seed_basic_data["subscription"].id

    assert ReminderService.due_reminders(store, today=date(2024, 1, 20)) == []
    due = ReminderService.due_reminders(store, today=date(2024, 1, 29), days_ahead=3)
    assert [reminder.subscription_id for reminder in due] == [subscription_id]


def test_reminder_for_unknown_subscription(store) -> None:
    with pytest.raises(NotFoundError):
        ReminderService.reminder_for(store, "missing")

"""Expiration reminder messages for clients, shared through WhatsApp links."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from urllib.parse import quote

from .. import models
from ..errors import NotFoundError
from ..store import EntityStore
from .subscriptions import EXPIRY_OVERDUE, EXPIRY_TODAY, SubscriptionLifecycle

WHATSAPP_BASE_URL = "https://wa.me"
URL_SAFE_CHARACTERS = "!~*'()"

MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


class ReminderType(str, enum.Enum):
    """Classification of reminders by how close the expiration is."""

    UPCOMING = "proximo"
    TODAY = "hoy"
    OVERDUE = "vencido"


@dataclass
class Reminder:
    subscription_id: str
    client_id: str
    reminder_type: ReminderType
    message: str
    url: str


def _long_date(value: date) -> str:
    return f"{value.day:02d} de {MONTH_NAMES[value.month - 1]}"


class ReminderService:
    """Builds the notification text and link for a subscription's expiration."""

    @staticmethod
    def reminder_type(subscription: models.Subscription, today: Optional[date] = None) -> ReminderType:
        state = SubscriptionLifecycle.expiry_state(subscription, today)
        if state == EXPIRY_OVERDUE:
            return ReminderType.OVERDUE
        if state == EXPIRY_TODAY:
            return ReminderType.TODAY
        return ReminderType.UPCOMING

    @staticmethod
    def build_message(
        client: models.Client, expiration_date: date, reminder_type: ReminderType
    ) -> str:
        expires = _long_date(expiration_date)
        if reminder_type == ReminderType.TODAY:
            return (
                f"Hola {client.name} 👋\n\n⚠️ Tu suscripción *vence hoy* ({expires}).\n\n"
                "Para no perder el acceso, renueva ahora. ¡Escríbenos! 💬"
            )
        if reminder_type == ReminderType.OVERDUE:
            return (
                f"Hola {client.name} 👋\n\nTu suscripción venció el *{expires}*.\n\n"
                "¿Te gustaría renovarla? Te ayudamos enseguida. 🚀"
            )
        return (
            f"Hola {client.name} 👋\n\nTe recordamos que tu suscripción vence el *{expires}*.\n\n"
            "¿Deseas renovarla? Estamos para ayudarte. 🙌"
        )

    @staticmethod
    def whatsapp_url(phone: str, message: str) -> str:
        number = re.sub(r"\D", "", phone or "")
        return f"{WHATSAPP_BASE_URL}/{number}?text={quote(message, safe=URL_SAFE_CHARACTERS)}"

    @classmethod
    def reminder_for(
        cls,
        store: EntityStore,
        subscription_id: str,
        *,
        today: Optional[date] = None,
    ) -> Reminder:
        subscription = store.subscriptions.get(subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription not found")
        client = store.clients.get(subscription.client_id)
        if client is None:
            raise NotFoundError("Client not found")

        reminder_type = cls.reminder_type(subscription, today)
        message = cls.build_message(client, subscription.expiration_date, reminder_type)
        return Reminder(
            subscription_id=subscription.id,
            client_id=client.id,
            reminder_type=reminder_type,
            message=message,
            url=cls.whatsapp_url(client.phone, message),
        )

    @classmethod
    def due_reminders(
        cls,
        store: EntityStore,
        *,
        today: Optional[date] = None,
        days_ahead: int = 3,
    ) -> List[Reminder]:
        """Reminders for subscriptions expired or expiring within ``days_ahead`` days."""

        today = today or date.today()
        reminders: List[Reminder] = []
        for subscription in SubscriptionLifecycle.list_subscriptions(store):
            if (subscription.expiration_date - today).days > days_ahead:
                continue
            if subscription.client_id not in store.clients:
                continue
            reminders.append(cls.reminder_for(store, subscription.id, today=today))
        return reminders

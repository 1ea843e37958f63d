"""Service layer encapsulating business logic for API routers."""

from .calendar import CalendarDay, CalendarProjector, WeekSummary
from .capacity import CapacityLedger
from .clients import ClientService
from .legacy_migration import migrate_legacy_data
from .panels import PanelService
from .payments import PaymentService
from .projects import ProjectService
from .reminders import Reminder, ReminderService, ReminderType
from .subscriptions import SubscriptionLifecycle
from .weekly_cuts import WeeklyCutService

__all__ = [
    "CalendarDay",
    "CalendarProjector",
    "CapacityLedger",
    "ClientService",
    "PanelService",
    "PaymentService",
    "ProjectService",
    "Reminder",
    "ReminderService",
    "ReminderType",
    "SubscriptionLifecycle",
    "WeekSummary",
    "WeeklyCutService",
    "migrate_legacy_data",
]

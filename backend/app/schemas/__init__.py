"""Expose Pydantic schemas for convenient imports."""

from .calendar import CalendarDayRead, CalendarSubscriptionEvent, WeekSummaryRead
from .client import ClientBase, ClientCreate, ClientListResponse, ClientRead, ClientUpdate
from .common import PaginatedResponse
from .panel import PanelBase, PanelCreate, PanelRead, PanelUpdate
from .payment import PaymentBase, PaymentCreate, PaymentListResponse, PaymentRead
from .project import ProjectBase, ProjectCreate, ProjectRead, ProjectUpdate
from .subscription import (
    ReminderRead,
    SubscriptionCreate,
    SubscriptionRead,
    SubscriptionRenew,
)
from .weekly_cut import (
    WeeklyCutCreate,
    WeeklyCutLineRead,
    WeeklyCutPreview,
    WeeklyCutRead,
    WeeklyCutShareText,
)

__all__ = [
    "CalendarDayRead",
    "CalendarSubscriptionEvent",
    "ClientBase",
    "ClientCreate",
    "ClientListResponse",
    "ClientRead",
    "ClientUpdate",
    "PaginatedResponse",
    "PanelBase",
    "PanelCreate",
    "PanelRead",
    "PanelUpdate",
    "PaymentBase",
    "PaymentCreate",
    "PaymentListResponse",
    "PaymentRead",
    "ProjectBase",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    "ReminderRead",
    "SubscriptionCreate",
    "SubscriptionRead",
    "SubscriptionRenew",
    "WeekSummaryRead",
    "WeeklyCutCreate",
    "WeeklyCutLineRead",
    "WeeklyCutPreview",
    "WeeklyCutRead",
    "WeeklyCutShareText",
]

"""Expose record models for convenient imports."""

from .client import Client
from .identifiers import new_id
from .kv_entry import KeyValueEntry
from .panel import Panel, PanelStatus
from .payment import Payment, PaymentMethod
from .project import Project
from .subscription import CYCLE_LENGTH, Subscription, SubscriptionStatus
from .weekly_cut import (
    UNASSIGNED_OWNER,
    UNASSIGNED_PROJECT_NAME,
    WeeklyCut,
    WeeklyCutDraft,
    WeeklyCutLine,
)

__all__ = [
    "CYCLE_LENGTH",
    "Client",
    "KeyValueEntry",
    "Panel",
    "PanelStatus",
    "Payment",
    "PaymentMethod",
    "Project",
    "Subscription",
    "SubscriptionStatus",
    "UNASSIGNED_OWNER",
    "UNASSIGNED_PROJECT_NAME",
    "WeeklyCut",
    "WeeklyCutDraft",
    "WeeklyCutLine",
    "new_id",
]

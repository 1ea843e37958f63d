"""Routers package."""

from .calendar import router as calendar_router
from .clients import router as clients_router
from .panels import router as panels_router
from .payments import router as payments_router
from .projects import router as projects_router
from .subscriptions import router as subscriptions_router
from .weekly_cuts import router as weekly_cuts_router

__all__ = [
    "calendar_router",
    "clients_router",
    "panels_router",
    "payments_router",
    "projects_router",
    "subscriptions_router",
    "weekly_cuts_router",
]

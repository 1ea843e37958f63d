"""Business logic for panel catalogue operations."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .. import models, schemas
from ..errors import NotFoundError, ValidationError
from ..store import PANELS, SUBSCRIPTIONS, EntityStore
from .capacity import CapacityLedger
from .money import to_money

LOGGER = logging.getLogger(__name__)


class PanelService:
    """Create, update and remove panels while keeping occupancy consistent."""

    @staticmethod
    def list_panels(
        store: EntityStore, *, status: Optional[models.PanelStatus] = None
    ) -> Iterable[models.Panel]:
        panels = list(store.panels.values())
        if status is not None:
            panels = [panel for panel in panels if panel.status == status]
        return sorted(panels, key=lambda panel: panel.name.lower())

    @staticmethod
    def get_panel(store: EntityStore, panel_id: str) -> Optional[models.Panel]:
        return store.panels.get(panel_id)

    @staticmethod
    def require_panel(store: EntityStore, panel_id: str) -> models.Panel:
        panel = store.panels.get(panel_id)
        if panel is None:
            raise NotFoundError("Panel not found")
        return panel

    @staticmethod
    def list_available(store: EntityStore) -> list[models.Panel]:
        """Panels that can still be offered for a new subscription."""

        return [
            panel
            for panel in PanelService.list_panels(store)
            if CapacityLedger.available_capacity(store, panel.id) > 0
        ]

    @staticmethod
    def create_panel(store: EntityStore, data: schemas.PanelCreate) -> models.Panel:
        name = data.name.strip()
        if not name:
            raise ValidationError("name is required")
        if data.total_capacity < 0:
            raise ValidationError("total_capacity cannot be negative")
        panel = models.Panel(
            name=name,
            total_capacity=data.total_capacity,
            monthly_cost=to_money(data.monthly_cost),
            status=data.status,
        )
        with store.transaction(PANELS):
            store.panels[panel.id] = panel
        LOGGER.info("Created panel %s with %d slots", panel.id, panel.total_capacity)
        return panel

    @classmethod
    def update_panel(
        cls, store: EntityStore, panel_id: str, data: schemas.PanelUpdate
    ) -> models.Panel:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is not None and not changes["name"].strip():
            raise ValidationError("name is required")
        total_capacity = changes.get("total_capacity")
        if total_capacity is not None and total_capacity < 0:
            raise ValidationError("total_capacity cannot be negative")

        with store.transaction(PANELS):
            panel = cls.require_panel(store, panel_id)
            if total_capacity is not None and total_capacity < panel.used_capacity:
                raise ValidationError(
                    f"total_capacity cannot be lower than the {panel.used_capacity} slots in use"
                )
            if changes.get("name"):
                panel.name = changes["name"].strip()
            if total_capacity is not None:
                panel.total_capacity = total_capacity
            if changes.get("monthly_cost") is not None:
                panel.monthly_cost = to_money(changes["monthly_cost"])
            if changes.get("status") is not None:
                panel.status = changes["status"]
        return panel

    @classmethod
    def delete_panel(cls, store: EntityStore, panel_id: str) -> int:
        """Remove a panel and every subscription assigned to it.

        Returns the number of subscriptions removed by the cascade.
        """

        with store.transaction(PANELS, SUBSCRIPTIONS):
            cls.require_panel(store, panel_id)
            orphaned = [
                subscription.id
                for subscription in store.subscriptions.values()
                if subscription.panel_id == panel_id
            ]
            for subscription_id in orphaned:
                del store.subscriptions[subscription_id]
            del store.panels[panel_id]

        LOGGER.info(
            "Deleted panel %s and %d subscriptions assigned to it", panel_id, len(orphaned)
        )
        return len(orphaned)

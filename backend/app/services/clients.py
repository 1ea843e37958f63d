"""Business logic for client records and their cascading removal."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Optional, Tuple

from .. import models, schemas
from ..errors import NotFoundError, ValidationError
from ..store import CLIENTS, PANELS, SUBSCRIPTIONS, EntityStore
from .capacity import CapacityLedger

LOGGER = logging.getLogger(__name__)


class ClientService:
    """Operations for reading and maintaining clients."""

    @staticmethod
    def list_clients(
        store: EntityStore,
        *,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.Client], int]:
        clients = list(store.clients.values())
        if search:
            needle = search.strip().lower()
            clients = [
                client
                for client in clients
                if needle in client.name.lower() or needle in client.phone
            ]
        clients.sort(key=lambda client: client.name.lower())
        total = len(clients)
        start = max(skip, 0)
        return clients[start : start + max(limit, 1)], total

    @staticmethod
    def get_client(store: EntityStore, client_id: str) -> Optional[models.Client]:
        return store.clients.get(client_id)

    @staticmethod
    def require_client(store: EntityStore, client_id: str) -> models.Client:
        client = store.clients.get(client_id)
        if client is None:
            raise NotFoundError("Client not found")
        return client

    @staticmethod
    def create_client(store: EntityStore, data: schemas.ClientCreate) -> models.Client:
        name = data.name.strip()
        if not name:
            raise ValidationError("name is required")
        client = models.Client(name=name, phone=data.phone.strip(), country=data.country)
        with store.transaction(CLIENTS):
            store.clients[client.id] = client
        return client

    @classmethod
    def update_client(
        cls, store: EntityStore, client_id: str, data: schemas.ClientUpdate
    ) -> models.Client:
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("name is required")

        with store.transaction(CLIENTS):
            client = cls.require_client(store, client_id)
            if "name" in changes:
                client.name = changes["name"].strip()
            if changes.get("phone") is not None:
                client.phone = changes["phone"].strip()
            if "country" in changes:
                client.country = changes["country"]
        return client

    @classmethod
    def delete_client(cls, store: EntityStore, client_id: str) -> dict[str, int]:
        """Remove a client with all of its subscriptions.

        Capacity is released once per panel with the combined count of the
        removed subscriptions. Returns the released count per panel.
        """

        with store.transaction(SUBSCRIPTIONS, PANELS, CLIENTS):
            cls.require_client(store, client_id)
            owned = [
                subscription
                for subscription in store.subscriptions.values()
                if subscription.client_id == client_id
            ]
            releases = dict(Counter(subscription.panel_id for subscription in owned))
            for subscription in owned:
                del store.subscriptions[subscription.id]
            CapacityLedger.release_many(store, releases)
            del store.clients[client_id]

        LOGGER.info(
            "Deleted client %s with %d subscriptions across %d panels",
            client_id,
            len(owned),
            len(releases),
        )
        return releases

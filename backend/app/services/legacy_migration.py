"""One-time upgrade of the legacy client shape that embedded a panel assignment.

Legacy installs stored each client with ``panelId``/``fechaInicio`` fields
and had no ``subscriptions`` collection. The upgrade runs when that shape is
detected and subscriptions are still empty, so it never repeats once applied.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Tuple

from .. import models
from ..store import CLIENTS, SUBSCRIPTIONS, KeyValueStore

LOGGER = logging.getLogger(__name__)

LEGACY_MARKERS = ("panelId", "fechaInicio")
LEGACY_SERVICE_NAME = "General"


def _parse_legacy_date(raw: Any) -> date:
    return date.fromisoformat(str(raw)[:10])


def needs_migration(kv: KeyValueStore) -> bool:
    clients = kv.get(CLIENTS)
    if not isinstance(clients, list) or not clients:
        return False
    first = clients[0]
    if not isinstance(first, dict) or not any(marker in first for marker in LEGACY_MARKERS):
        return False
    return not kv.get(SUBSCRIPTIONS)


def _convert(legacy_clients: List[dict]) -> Tuple[List[dict], List[dict]]:
    clients: List[dict] = []
    subscriptions: List[dict] = []
    for legacy in legacy_clients:
        client = models.Client(
            id=str(legacy["id"]),
            name=legacy.get("nombre") or legacy.get("name") or "",
            phone=legacy.get("whatsapp") or legacy.get("phone") or "",
            country=legacy.get("pais") or legacy.get("country"),
        )
        clients.append(client.model_dump(mode="json"))

        panel_id = legacy.get("panelId")
        if not panel_id:
            continue
        start_date = _parse_legacy_date(legacy["fechaInicio"])
        expiration_raw = legacy.get("fechaVencimiento")
        expiration_date = (
            _parse_legacy_date(expiration_raw)
            if expiration_raw
            else start_date + models.CYCLE_LENGTH
        )
        subscription = models.Subscription(
            client_id=client.id,
            panel_id=str(panel_id),
            service=LEGACY_SERVICE_NAME,
            start_date=start_date,
            expiration_date=expiration_date,
        )
        subscriptions.append(subscription.model_dump(mode="json"))
    return clients, subscriptions


def migrate_legacy_data(kv: KeyValueStore) -> int:
    """Rewrite legacy clients and synthesize their subscriptions.

    Returns the number of subscriptions created. Failures are logged and
    swallowed so the application can still start with whatever data loads.
    """

    try:
        if not needs_migration(kv):
            return 0

        legacy_clients = kv.get(CLIENTS)
        clients, subscriptions = _convert(legacy_clients)
        kv.set(CLIENTS, clients)
        try:
            kv.set(SUBSCRIPTIONS, subscriptions)
        except Exception:
            # Put the legacy shape back so the next start retries the upgrade.
            kv.set(CLIENTS, legacy_clients)
            raise
    except Exception:
        LOGGER.exception("Legacy data migration failed; starting with the stored data as-is")
        return 0

    LOGGER.info(
        "Migrated %d legacy clients into %d subscriptions", len(clients), len(subscriptions)
    )
    return len(subscriptions)

"""In-memory entity collections backed by a key-value persistence collaborator."""

from __future__ import annotations

import copy
import json
import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Protocol, Type

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from . import models
from .database import session_scope
from .errors import PersistenceFailure

LOGGER = logging.getLogger(__name__)

PANELS = "panels"
CLIENTS = "clients"
SUBSCRIPTIONS = "subscriptions"
PAYMENTS = "payments"
PROJECTS = "projects"
CUTS = "cuts"

COLLECTION_MODELS: Dict[str, Type[BaseModel]] = {
    PANELS: models.Panel,
    CLIENTS: models.Client,
    SUBSCRIPTIONS: models.Subscription,
    PAYMENTS: models.Payment,
    PROJECTS: models.Project,
    CUTS: models.WeeklyCut,
}


class KeyValueStore(Protocol):
    """Opaque get/set-by-key persistence used for every collection."""

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class InMemoryKeyValueStore:
    """Keeps JSON-compatible values in a dictionary."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self.data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any:
        return copy.deepcopy(self.data.get(key))

    def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)


class SqlKeyValueStore:
    """Stores each key as a JSON document in the ``kv_entries`` table."""

    def __init__(self, session_factory: Optional[sessionmaker] = None) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> Any:
        with session_scope(self._session_factory) as session:
            entry = session.get(models.KeyValueEntry, key)
            if entry is None:
                return None
            return json.loads(entry.value)

    def set(self, key: str, value: Any) -> None:
        try:
            with session_scope(self._session_factory) as session:
                entry = session.get(models.KeyValueEntry, key)
                if entry is None:
                    entry = models.KeyValueEntry(key=key)
                    session.add(entry)
                entry.value = json.dumps(value)
        except SQLAlchemyError as exc:
            LOGGER.exception("Failed to persist key %s", key)
            raise PersistenceFailure(key) from exc


class EntityStore:
    """Authoritative collections of panels, clients, subscriptions and finances.

    Every mutation goes through :meth:`transaction`, which serializes writers
    with a re-entrant lock and writes the touched collections back to the
    key-value store once the in-memory change is complete.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv
        self.panels: Dict[str, models.Panel] = {}
        self.clients: Dict[str, models.Client] = {}
        self.subscriptions: Dict[str, models.Subscription] = {}
        self.payments: Dict[str, models.Payment] = {}
        self.projects: Dict[str, models.Project] = {}
        self.cuts: Dict[str, models.WeeklyCut] = {}
        self._lock = threading.RLock()

    @classmethod
    def load(cls, kv: KeyValueStore) -> "EntityStore":
        store = cls(kv)
        for key, model in COLLECTION_MODELS.items():
            raw_items = kv.get(key) or []
            collection = store.collection(key)
            for raw in raw_items:
                try:
                    record = model.model_validate(raw)
                except PydanticValidationError:
                    LOGGER.warning("Skipping malformed entry in %s: %r", key, raw)
                    continue
                collection[record.id] = record
            LOGGER.debug("Loaded %d %s", len(collection), key)
        return store

    def collection(self, key: str) -> Dict[str, Any]:
        if key not in COLLECTION_MODELS:
            raise KeyError(f"Unknown collection '{key}'")
        return getattr(self, key)

    @contextmanager
    def transaction(self, *keys: str) -> Iterator["EntityStore"]:
        """Apply a mutation atomically and persist the named collections."""

        with self._lock:
            yield self
            self.persist(*keys)

    def persist(self, *keys: str) -> None:
        for key in keys:
            payload = [
                record.model_dump(mode="json") for record in self.collection(key).values()
            ]
            self.kv.set(key, payload)


def get_store(request: Request) -> EntityStore:
    """Return the store owned by the running application."""

    return request.app.state.store

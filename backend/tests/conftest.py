from __future__ import annotations

from datetime import date
from decimal import Decimal
import os
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Ensure the project root (which exposes the ``backend`` package) is on ``sys.path``
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# The SQL-backed store binds its engine at import time, so point it at a
# throwaway SQLite file before anything from ``backend.app`` is imported.
TEST_DATABASE_DIR = Path(tempfile.mkdtemp(prefix="panel-ledger-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{(TEST_DATABASE_DIR / 'ledger.db').as_posix()}"

from backend.app import schemas  # noqa: E402
from backend.app.main import app  # noqa: E402
from backend.app.services import (  # noqa: E402
    ClientService,
    PanelService,
    ProjectService,
    SubscriptionLifecycle,
)
from backend.app.store import EntityStore, InMemoryKeyValueStore, get_store  # noqa: E402


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv: InMemoryKeyValueStore) -> EntityStore:
    return EntityStore(kv)


@pytest.fixture
def client(store: EntityStore) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def seed_basic_data(store: EntityStore) -> dict:
    panel = PanelService.create_panel(
        store,
        schemas.PanelCreate(name="Panel Uno", total_capacity=5, monthly_cost=Decimal("100")),
    )
    spare_panel = PanelService.create_panel(
        store,
        schemas.PanelCreate(name="Panel Dos", total_capacity=3, monthly_cost=Decimal("40")),
    )
    customer = ClientService.create_client(
        store, schemas.ClientCreate(name="Cliente Demo", phone="+52 55 1234 5678", country="MX")
    )
    project = ProjectService.create_project(
        store,
        schemas.ProjectCreate(
            name="Netflix Pro", owner="Ana", country="MX", commission_pct=Decimal("30")
        ),
    )
    subscription = SubscriptionLifecycle.create(
        store, customer.id, panel.id, "Netflix", date(2024, 1, 1)
    )
    return {
        "panel": panel,
        "spare_panel": spare_panel,
        "client": customer,
        "project": project,
        "subscription": subscription,
    }


class _InterleavingLock:
    """Runs one competing writer right before the wrapped lock is first acquired."""

    def __init__(self, inner, writer) -> None:
        self._inner = inner
        self._writer = writer

    def __enter__(self):
        writer, self._writer = self._writer, None
        if writer is not None:
            writer()
        return self._inner.__enter__()

    def __exit__(self, *exc_info):
        return self._inner.__exit__(*exc_info)


@pytest.fixture
def interleave(store: EntityStore):
    """Schedule ``writer`` to run just before the next store transaction locks."""

    original = store._lock

    def schedule(writer) -> None:
        store._lock = _InterleavingLock(original, writer)

    yield schedule
    store._lock = original

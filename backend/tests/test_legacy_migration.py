from __future__ import annotations

from datetime import date

from backend.app.errors import PersistenceFailure
from backend.app.services import migrate_legacy_data
from backend.app.services.legacy_migration import needs_migration
from backend.app.store import EntityStore, InMemoryKeyValueStore

LEGACY_CLIENTS = [
    {
        "id": "c1",
        "nombre": "Ana",
        "whatsapp": "5511111111",
        "panelId": "p1",
        "fechaInicio": "2024-01-01",
    },
    {
        "id": "c2",
        "nombre": "Beto",
        "whatsapp": "5522222222",
        "panelId": "p1",
        "fechaInicio": "2024-01-10",
        "fechaVencimiento": "2024-03-01",
    },
    {"id": "c3", "nombre": "Caro", "whatsapp": "", "panelId": None, "fechaInicio": "2024-01-12"},
]


def test_legacy_clients_become_subscriptions() -> None:
    kv = InMemoryKeyValueStore({"clients": LEGACY_CLIENTS})

    created = migrate_legacy_data(kv)

    assert created == 2
    assert kv.data["clients"] == [
        {"id": "c1", "name": "Ana", "phone": "5511111111", "country": None},
        {"id": "c2", "name": "Beto", "phone": "5522222222", "country": None},
        {"id": "c3", "name": "Caro", "phone": "", "country": None},
    ]
    subscriptions = kv.data["subscriptions"]
    assert [item["client_id"] for item in subscriptions] == ["c1", "c2"]
    assert {item["service"] for item in subscriptions} == {"General"}
    assert subscriptions[0]["expiration_date"] == "2024-01-31"
    assert subscriptions[1]["expiration_date"] == "2024-03-01"


def test_migrated_data_loads_into_the_store() -> None:
    kv = InMemoryKeyValueStore({"clients": LEGACY_CLIENTS})
    migrate_legacy_data(kv)

    store = EntityStore.load(kv)

    assert sorted(store.clients) == ["c1", "c2", "c3"]
    assert {item.start_date for item in store.subscriptions.values()} == {
        date(2024, 1, 1),
        date(2024, 1, 10),
    }


def test_migration_runs_only_once() -> None:
    kv = InMemoryKeyValueStore({"clients": LEGACY_CLIENTS})
    migrate_legacy_data(kv)
    migrated = dict(kv.data)

    assert not needs_migration(kv)
    assert migrate_legacy_data(kv) == 0
    assert kv.data == migrated


def test_existing_subscriptions_block_migration() -> None:
    kv = InMemoryKeyValueStore(
        {"clients": LEGACY_CLIENTS, "subscriptions": [{"id": "s1"}]}
    )

    assert migrate_legacy_data(kv) == 0
    assert kv.data["clients"] == LEGACY_CLIENTS


def test_current_shape_is_left_alone() -> None:
    kv = InMemoryKeyValueStore({"clients": [{"id": "c1", "name": "Ana", "phone": ""}]})

    assert not needs_migration(kv)
    assert migrate_legacy_data(kv) == 0


def test_failures_are_logged_and_swallowed(caplog) -> None:
    broken = [{"nombre": "Sin id", "panelId": "p1", "fechaInicio": "2024-01-01"}]
    kv = InMemoryKeyValueStore({"clients": broken})

    with caplog.at_level("ERROR"):
        assert migrate_legacy_data(kv) == 0

    assert kv.data == {"clients": broken}
    assert "Legacy data migration failed" in caplog.text


class _SubscriptionWriteFails(InMemoryKeyValueStore):
    def __init__(self, initial) -> None:
        super().__init__(initial)
        self.fail = True

    def set(self, key, value) -> None:
        if key == "subscriptions" and self.fail:
            raise PersistenceFailure(key)
        super().set(key, value)


def test_failed_subscription_write_keeps_migration_pending(caplog) -> None:
    kv = _SubscriptionWriteFails({"clients": LEGACY_CLIENTS})

    with caplog.at_level("ERROR"):
        assert migrate_legacy_data(kv) == 0

    assert kv.data == {"clients": LEGACY_CLIENTS}
    assert needs_migration(kv)

    kv.fail = False
    assert migrate_legacy_data(kv) == 2
    assert sorted(EntityStore.load(kv).clients) == ["c1", "c2", "c3"]

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from backend.app import schemas
from backend.app.errors import NotFoundError, ValidationError
from backend.app.services import ClientService, PaymentService, SubscriptionLifecycle


def test_delete_client_releases_capacity_per_panel(store, seed_basic_data) -> None:
    panel_x = seed_basic_data["panel"]
    panel_y = seed_basic_data["spare_panel"]
    customer = seed_basic_data["client"]
    SubscriptionLifecycle.create(store, customer.id, panel_x.id, "Disney", date(2024, 1, 2))
    SubscriptionLifecycle.create(store, customer.id, panel_y.id, "Spotify", date(2024, 1, 3))
    other = ClientService.create_client(store, schemas.ClientCreate(name="Vecino"))
    SubscriptionLifecycle.create(store, other.id, panel_x.id, "Max", date(2024, 1, 4))

    releases = ClientService.delete_client(store, customer.id)

    assert releases == {panel_x.id: 2, panel_y.id: 1}
    assert panel_x.used_capacity == 1
    assert panel_y.used_capacity == 0
    assert customer.id not in store.clients
    assert all(s.client_id == other.id for s in store.subscriptions.values())


def test_delete_client_release_is_clamped_at_zero(store, seed_basic_data) -> None:
    panel_x = seed_basic_data["panel"]
    customer = seed_basic_data["client"]
    SubscriptionLifecycle.create(store, customer.id, panel_x.id, "Disney", date(2024, 1, 2))
    panel_x.used_capacity = 1

    ClientService.delete_client(store, customer.id)

    assert panel_x.used_capacity == 0


def test_delete_client_persists_every_touched_collection(kv, store, seed_basic_data) -> None:
    customer = seed_basic_data["client"]

    ClientService.delete_client(store, customer.id)

    assert kv.data["clients"] == []
    assert kv.data["subscriptions"] == []
    assert kv.data["panels"][0]["used_capacity"] == 0


def test_delete_client_keeps_payment_history(store, seed_basic_data) -> None:
    customer = seed_basic_data["client"]
    payment = PaymentService.record_payment(
        store,
        schemas.PaymentCreate(client_id=customer.id, paid_on=date(2024, 1, 5), amount=Decimal("50")),
    )

    ClientService.delete_client(store, customer.id)

    assert payment.id in store.payments


def test_list_clients_searches_and_paginates(store) -> None:
    for name in ("Carla", "ana", "Bruno"):
        ClientService.create_client(store, schemas.ClientCreate(name=name, phone="555"))

    items, total = ClientService.list_clients(store, skip=1, limit=1)
    assert total == 3
    assert [item.name for item in items] == ["Bruno"]

    items, total = ClientService.list_clients(store, search="AN")
    assert total == 1
    assert items[0].name == "ana"


def test_update_client_validates_name(store, seed_basic_data) -> None:
    customer = seed_basic_data["client"]

    updated = ClientService.update_client(
        store, customer.id, schemas.ClientUpdate(phone=" 5512345678 ")
    )
    assert updated.phone == "5512345678"
    assert updated.name == "Cliente Demo"

    with pytest.raises(ValidationError):
        ClientService.update_client(store, customer.id, schemas.ClientUpdate(name=" "))
    with pytest.raises(NotFoundError):
        ClientService.update_client(store, "missing", schemas.ClientUpdate(name="X"))


def test_delete_client_snapshots_subscriptions_under_the_store_lock(
    store, seed_basic_data, interleave
) -> None:
    panel = seed_basic_data["panel"]
    customer = seed_basic_data["client"]
    extra = SubscriptionLifecycle.create(store, customer.id, panel.id, "Disney", date(2024, 1, 2))
    other = ClientService.create_client(store, schemas.ClientCreate(name="Vecino"))
    SubscriptionLifecycle.create(store, other.id, panel.id, "Max", date(2024, 1, 4))
    interleave(lambda: SubscriptionLifecycle.delete(store, extra.id))

    releases = ClientService.delete_client(store, customer.id)

    remaining = [s for s in store.subscriptions.values() if s.panel_id == panel.id]
    assert releases == {panel.id: 1}
    assert customer.id not in store.clients
    assert panel.used_capacity == len(remaining) == 1


def test_update_client_rejects_a_client_deleted_concurrently(
    store, seed_basic_data, interleave
) -> None:
    customer = seed_basic_data["client"]
    interleave(lambda: ClientService.delete_client(store, customer.id))

    with pytest.raises(NotFoundError):
        ClientService.update_client(store, customer.id, schemas.ClientUpdate(name="Nuevo"))

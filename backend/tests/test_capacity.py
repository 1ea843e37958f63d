from __future__ import annotations

from datetime import date

import pytest

from backend.app import schemas
from backend.app.errors import CapacityExceeded, ValidationError
from backend.app.services import (
    CapacityLedger,
    ClientService,
    PanelService,
    SubscriptionLifecycle,
)


def _fill_panel(store, panel, customer, count: int) -> list:
    return [
        SubscriptionLifecycle.create(store, customer.id, panel.id, f"Servicio {index}", date(2024, 2, 1))
        for index in range(count)
    ]


def test_full_panel_rejects_new_subscription(store, seed_basic_data) -> None:
    panel = seed_basic_data["panel"]
    customer = seed_basic_data["client"]
    _fill_panel(store, panel, customer, 4)

    assert panel.used_capacity == 5
    assert CapacityLedger.available_capacity(store, panel.id) == 0

    with pytest.raises(CapacityExceeded) as excinfo:
        SubscriptionLifecycle.create(store, customer.id, panel.id, "Extra", date(2024, 2, 2))

    assert excinfo.value.panel_id == panel.id
    assert panel.used_capacity == 5
    assert len([s for s in store.subscriptions.values() if s.panel_id == panel.id]) == 5


def test_release_never_goes_below_zero(store, seed_basic_data) -> None:
    panel = seed_basic_data["panel"]

    CapacityLedger.release(store, panel.id, 3)

    assert panel.used_capacity == 0
    assert CapacityLedger.available_capacity(store, panel.id) == 5


def test_reserve_does_not_check_availability(store, seed_basic_data) -> None:
    panel = seed_basic_data["spare_panel"]
    for _ in range(4):
        CapacityLedger.reserve(store, panel.id)

    assert panel.used_capacity == 4
    assert CapacityLedger.available_capacity(store, panel.id) == 0


def test_unknown_panel_has_no_capacity(store) -> None:
    assert CapacityLedger.available_capacity(store, "missing") == 0


def test_used_capacity_stays_within_bounds_across_operations(store, seed_basic_data) -> None:
    panel = seed_basic_data["panel"]
    customer = seed_basic_data["client"]
    other = ClientService.create_client(store, schemas.ClientCreate(name="Otro Cliente"))

    created = _fill_panel(store, panel, customer, 2)
    created += _fill_panel(store, panel, other, 2)
    SubscriptionLifecycle.renew(store, created[0].id)
    SubscriptionLifecycle.delete(store, created[1].id)
    SubscriptionLifecycle.create(store, other.id, panel.id, "Disney", date(2024, 3, 1))
    with pytest.raises(CapacityExceeded):
        SubscriptionLifecycle.create(store, other.id, panel.id, "Max", date(2024, 3, 1))
    ClientService.delete_client(store, other.id)

    for item in store.panels.values():
        assert 0 <= item.used_capacity <= item.total_capacity
    assert panel.used_capacity == len(
        [s for s in store.subscriptions.values() if s.panel_id == panel.id]
    )


def test_panel_capacity_cannot_drop_below_used(store, seed_basic_data) -> None:
    panel = seed_basic_data["panel"]
    _fill_panel(store, panel, seed_basic_data["client"], 2)

    with pytest.raises(ValidationError):
        PanelService.update_panel(store, panel.id, schemas.PanelUpdate(total_capacity=2))

    updated = PanelService.update_panel(store, panel.id, schemas.PanelUpdate(total_capacity=3))
    assert updated.total_capacity == 3
    assert updated.available_capacity == 0


def test_delete_panel_cascades_to_subscriptions(store, seed_basic_data) -> None:
    panel = seed_basic_data["panel"]
    spare = seed_basic_data["spare_panel"]
    customer = seed_basic_data["client"]
    _fill_panel(store, panel, customer, 2)
    kept = SubscriptionLifecycle.create(store, customer.id, spare.id, "Spotify", date(2024, 2, 1))

    removed = PanelService.delete_panel(store, panel.id)

    assert removed == 3
    assert panel.id not in store.panels
    assert list(store.subscriptions) == [kept.id]
    assert spare.used_capacity == 1


def test_list_available_skips_full_panels(store, seed_basic_data) -> None:
    spare = seed_basic_data["spare_panel"]
    _fill_panel(store, spare, seed_basic_data["client"], 3)

    available = PanelService.list_available(store)

    assert [panel.id for panel in available] == [seed_basic_data["panel"].id]


@pytest.mark.parametrize("name", ["   ", "\t"])
def test_panel_names_cannot_be_blank(store, seed_basic_data, name) -> None:
    panel = seed_basic_data["panel"]

    with pytest.raises(ValidationError):
        PanelService.create_panel(store, schemas.PanelCreate(name=name, total_capacity=1))
    with pytest.raises(ValidationError):
        PanelService.update_panel(store, panel.id, schemas.PanelUpdate(name=name))

    assert len(store.panels) == 2
    assert panel.name == "Panel Uno"

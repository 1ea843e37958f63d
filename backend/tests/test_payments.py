from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from backend.app import models, schemas
from backend.app.errors import NotFoundError, ValidationError
from backend.app.services import PaymentService, ProjectService


def _payment(customer_id: str, **overrides) -> schemas.PaymentCreate:
    payload = {"client_id": customer_id, "paid_on": date(2024, 1, 5), "amount": Decimal("100")}
    payload.update(overrides)
    return schemas.PaymentCreate(**payload)


def test_record_payment_rounds_amount(store, kv, seed_basic_data) -> None:
    payment = PaymentService.record_payment(
        store,
        _payment(seed_basic_data["client"].id, amount=Decimal("10.005"), method="Transferencia"),
    )

    assert payment.amount == Decimal("10.01")
    assert payment.method == models.PaymentMethod.TRANSFERENCIA
    assert kv.data["payments"][0]["amount"] == "10.01"


def test_record_payment_converts_foreign_amount(store, seed_basic_data) -> None:
    payment = PaymentService.record_payment(
        store,
        _payment(
            seed_basic_data["client"].id,
            amount=None,
            original_amount=Decimal("170"),
            currency="mxn",
            exchange_rate=Decimal("17"),
        ),
    )

    assert payment.amount == Decimal("10.00")
    assert payment.original_amount == Decimal("170.00")
    assert payment.currency == "MXN"


def test_payment_schema_requires_an_amount() -> None:
    with pytest.raises(SchemaValidationError):
        schemas.PaymentCreate(client_id="c1", paid_on=date(2024, 1, 5))
    with pytest.raises(SchemaValidationError):
        schemas.PaymentCreate(
            client_id="c1", paid_on=date(2024, 1, 5), original_amount=Decimal("5")
        )


def test_record_payment_rejects_unknown_references(store, seed_basic_data) -> None:
    with pytest.raises(ValidationError):
        PaymentService.record_payment(store, _payment("missing"))
    with pytest.raises(ValidationError):
        PaymentService.record_payment(
            store, _payment(seed_basic_data["client"].id, project_id="missing")
        )
    assert store.payments == {}


def test_list_payments_filters_and_sorts(store, seed_basic_data) -> None:
    customer_id = seed_basic_data["client"].id
    project_id = seed_basic_data["project"].id
    PaymentService.record_payment(store, _payment(customer_id, paid_on=date(2024, 1, 1)))
    PaymentService.record_payment(
        store, _payment(customer_id, paid_on=date(2024, 1, 9), project_id=project_id)
    )
    PaymentService.record_payment(store, _payment(customer_id, paid_on=date(2024, 1, 20)))

    items, total = PaymentService.list_payments(store, start_date=date(2024, 1, 2))
    assert total == 2
    assert [item.paid_on for item in items] == [date(2024, 1, 20), date(2024, 1, 9)]

    items, total = PaymentService.list_payments(store, project_id=project_id)
    assert total == 1
    assert items[0].project_id == project_id


def test_deleting_project_detaches_payments(store, seed_basic_data) -> None:
    project = seed_basic_data["project"]
    payment = PaymentService.record_payment(
        store, _payment(seed_basic_data["client"].id, project_id=project.id)
    )

    detached = ProjectService.delete_project(store, project.id)

    assert detached == 1
    assert store.payments[payment.id].project_id is None
    assert store.payments[payment.id].amount == payment.amount


def test_project_commission_must_be_a_percentage(store) -> None:
    with pytest.raises(ValidationError):
        ProjectService.create_project(
            store, schemas.ProjectCreate(name="Caro", commission_pct=Decimal("120"))
        )
    assert store.projects == {}


def test_delete_payment(store, seed_basic_data) -> None:
    payment = PaymentService.record_payment(store, _payment(seed_basic_data["client"].id))

    PaymentService.delete_payment(store, payment.id)

    assert PaymentService.get_payment(store, payment.id) is None
    with pytest.raises(NotFoundError):
        PaymentService.delete_payment(store, payment.id)


def test_project_names_cannot_be_blank(store, seed_basic_data) -> None:
    project = seed_basic_data["project"]

    with pytest.raises(ValidationError):
        ProjectService.create_project(store, schemas.ProjectCreate(name="  "))
    with pytest.raises(ValidationError):
        ProjectService.update_project(store, project.id, schemas.ProjectUpdate(name=" "))

    assert list(store.projects) == [project.id]
    assert project.name == "Netflix Pro"

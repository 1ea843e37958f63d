"""Router exposing payment related operations."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .. import schemas
from ..errors import LedgerError
from ..models.payment import PaymentMethod
from ..services import PaymentService
from ..store import EntityStore, get_store
from .errors import to_http_exception

router = APIRouter()


@router.get("/", response_model=schemas.PaymentListResponse)
def list_payments(
    store: EntityStore = Depends(get_store),
    skip: int = Query(0, ge=0, description="Number of payments to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of payments to return"),
    client_id: Optional[str] = Query(None, description="Filter by client"),
    project_id: Optional[str] = Query(None, description="Filter by project"),
    start_date: Optional[date] = Query(None, description="Return payments on or after this date"),
    end_date: Optional[date] = Query(None, description="Return payments on or before this date"),
    method: Optional[PaymentMethod] = Query(None, description="Filter by payment method"),
) -> schemas.PaymentListResponse:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date cannot be after end_date",
        )

    items, total = PaymentService.list_payments(
        store,
        client_id=client_id,
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        method=method,
        skip=skip,
        limit=limit,
    )
    return schemas.PaymentListResponse(
        items=[schemas.PaymentRead.model_validate(item, from_attributes=True) for item in items],
        total=total,
        limit=limit,
        skip=skip,
    )


@router.post("/", response_model=schemas.PaymentRead, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_in: schemas.PaymentCreate, store: EntityStore = Depends(get_store)
) -> schemas.PaymentRead:
    try:
        payment = PaymentService.record_payment(store, payment_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return schemas.PaymentRead.model_validate(payment, from_attributes=True)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: str, store: EntityStore = Depends(get_store)) -> None:
    try:
        PaymentService.delete_payment(store, payment_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

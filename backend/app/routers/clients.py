"""Router containing CRUD operations for clients."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .. import schemas
from ..errors import LedgerError
from ..services import ClientService, SubscriptionLifecycle
from ..store import EntityStore, get_store
from .errors import to_http_exception

router = APIRouter()


@router.get("/", response_model=schemas.ClientListResponse)
def list_clients(
    skip: int = Query(0, ge=0, description="Number of clients to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of clients to return"),
    search: Optional[str] = Query(None, description="Case-insensitive search by name or phone"),
    store: EntityStore = Depends(get_store),
) -> schemas.ClientListResponse:
    """Return clients with pagination and optional search."""
    items, total = ClientService.list_clients(store, search=search, skip=skip, limit=limit)
    return schemas.ClientListResponse(
        items=[schemas.ClientRead.model_validate(item, from_attributes=True) for item in items],
        total=total,
        limit=limit,
        skip=skip,
    )


@router.get("/{client_id}", response_model=schemas.ClientRead)
def get_client(client_id: str, store: EntityStore = Depends(get_store)) -> schemas.ClientRead:
    """Retrieve a single client by its identifier."""
    client = ClientService.get_client(store, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return schemas.ClientRead.model_validate(client, from_attributes=True)


@router.get("/{client_id}/subscriptions", response_model=List[schemas.SubscriptionRead])
def list_client_subscriptions(
    client_id: str,
    reference_date: Optional[date] = Query(
        None, description="Date used to derive the expiration state"
    ),
    store: EntityStore = Depends(get_store),
) -> List[schemas.SubscriptionRead]:
    if ClientService.get_client(store, client_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return [
        SubscriptionLifecycle.to_read(subscription, reference_date)
        for subscription in SubscriptionLifecycle.list_subscriptions(store, client_id=client_id)
    ]


@router.post("/", response_model=schemas.ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    client_in: schemas.ClientCreate, store: EntityStore = Depends(get_store)
) -> schemas.ClientRead:
    """Create a new client record."""
    try:
        client = ClientService.create_client(store, client_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return schemas.ClientRead.model_validate(client, from_attributes=True)


@router.put("/{client_id}", response_model=schemas.ClientRead)
def update_client(
    client_id: str,
    client_in: schemas.ClientUpdate,
    store: EntityStore = Depends(get_store),
) -> schemas.ClientRead:
    """Update an existing client."""
    try:
        client = ClientService.update_client(store, client_id, client_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return schemas.ClientRead.model_validate(client, from_attributes=True)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: str, store: EntityStore = Depends(get_store)) -> None:
    """Delete a client together with its subscriptions."""
    try:
        ClientService.delete_client(store, client_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

"""Router exposing panel catalogue operations."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .. import models, schemas
from ..errors import LedgerError
from ..services import PanelService
from ..store import EntityStore, get_store
from .errors import to_http_exception

router = APIRouter()


def _to_read(panel: models.Panel) -> schemas.PanelRead:
    return schemas.PanelRead.model_validate(panel, from_attributes=True)


@router.get("/", response_model=List[schemas.PanelRead])
def list_panels(
    store: EntityStore = Depends(get_store),
    status_filter: Optional[models.PanelStatus] = Query(
        None, alias="status", description="Filter by panel status"
    ),
    available_only: bool = Query(
        False, description="Only panels that still have free slots"
    ),
) -> List[schemas.PanelRead]:
    if available_only:
        panels = PanelService.list_available(store)
        if status_filter is not None:
            panels = [panel for panel in panels if panel.status == status_filter]
    else:
        panels = PanelService.list_panels(store, status=status_filter)
    return [_to_read(panel) for panel in panels]


@router.get("/{panel_id}", response_model=schemas.PanelRead)
def get_panel(panel_id: str, store: EntityStore = Depends(get_store)) -> schemas.PanelRead:
    panel = PanelService.get_panel(store, panel_id)
    if panel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Panel not found")
    return _to_read(panel)


@router.post("/", response_model=schemas.PanelRead, status_code=status.HTTP_201_CREATED)
def create_panel(
    panel_in: schemas.PanelCreate, store: EntityStore = Depends(get_store)
) -> schemas.PanelRead:
    try:
        panel = PanelService.create_panel(store, panel_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_read(panel)


@router.put("/{panel_id}", response_model=schemas.PanelRead)
def update_panel(
    panel_id: str,
    panel_in: schemas.PanelUpdate,
    store: EntityStore = Depends(get_store),
) -> schemas.PanelRead:
    try:
        panel = PanelService.update_panel(store, panel_id, panel_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_read(panel)


@router.delete("/{panel_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_panel(panel_id: str, store: EntityStore = Depends(get_store)) -> None:
    try:
        PanelService.delete_panel(store, panel_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

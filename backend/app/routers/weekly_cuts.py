"""Router exposing the weekly reconciliation ("corte semanal")."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .. import models, schemas
from ..errors import LedgerError
from ..services import WeeklyCutService
from ..services.weekly_cuts import FRIDAY
from ..store import EntityStore, get_store
from .errors import to_http_exception

router = APIRouter()


def _to_read(cut: models.WeeklyCut) -> schemas.WeeklyCutRead:
    return schemas.WeeklyCutRead.model_validate(cut.model_dump())


@router.get("/preview", response_model=schemas.WeeklyCutPreview)
def preview_weekly_cut(
    start_date: Optional[date] = Query(
        None, description="Friday opening the window; defaults to the current week"
    ),
    weeks_offset: int = Query(0, description="Move the window by this many weeks"),
    reference_date: Optional[date] = Query(None, description="Date treated as today"),
    store: EntityStore = Depends(get_store),
) -> schemas.WeeklyCutPreview:
    start = start_date or WeeklyCutService.current_window(reference_date)[0]
    if start.weekday() != FRIDAY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be a Friday",
        )
    if weeks_offset:
        start, _ = WeeklyCutService.shift_window(start, weeks_offset)
    try:
        return WeeklyCutService.preview(store, start, today=reference_date)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get("/", response_model=List[schemas.WeeklyCutRead])
def list_weekly_cuts(
    month: Optional[str] = Query(None, description="Only cuts starting in this YYYY-MM month"),
    store: EntityStore = Depends(get_store),
) -> List[schemas.WeeklyCutRead]:
    try:
        cuts = WeeklyCutService.list_cuts(store, month=month)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return [_to_read(cut) for cut in cuts]


@router.post("/", response_model=schemas.WeeklyCutRead, status_code=status.HTTP_201_CREATED)
def save_weekly_cut(
    cut_in: schemas.WeeklyCutCreate,
    reference_date: Optional[date] = Query(None, description="Date treated as today"),
    store: EntityStore = Depends(get_store),
) -> schemas.WeeklyCutRead:
    try:
        cut = WeeklyCutService.save(
            store, cut_in.start_date, notes=cut_in.notes, today=reference_date
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_read(cut)


@router.get("/{cut_id}", response_model=schemas.WeeklyCutRead)
def get_weekly_cut(cut_id: str, store: EntityStore = Depends(get_store)) -> schemas.WeeklyCutRead:
    cut = WeeklyCutService.get_cut(store, cut_id)
    if cut is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Weekly cut not found")
    return _to_read(cut)


@router.get("/{cut_id}/share-text", response_model=schemas.WeeklyCutShareText)
def get_weekly_cut_share_text(
    cut_id: str, store: EntityStore = Depends(get_store)
) -> schemas.WeeklyCutShareText:
    cut = WeeklyCutService.get_cut(store, cut_id)
    if cut is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Weekly cut not found")
    return schemas.WeeklyCutShareText(text=WeeklyCutService.format_summary(cut))


@router.delete("/{cut_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_weekly_cut(cut_id: str, store: EntityStore = Depends(get_store)) -> None:
    try:
        WeeklyCutService.delete_cut(store, cut_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

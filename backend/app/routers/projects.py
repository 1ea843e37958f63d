"""Router exposing project operations."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from .. import schemas
from ..errors import LedgerError
from ..services import ProjectService
from ..store import EntityStore, get_store
from .errors import to_http_exception

router = APIRouter()


@router.get("/", response_model=List[schemas.ProjectRead])
def list_projects(store: EntityStore = Depends(get_store)) -> List[schemas.ProjectRead]:
    return [
        schemas.ProjectRead.model_validate(project, from_attributes=True)
        for project in ProjectService.list_projects(store)
    ]


@router.get("/{project_id}", response_model=schemas.ProjectRead)
def get_project(project_id: str, store: EntityStore = Depends(get_store)) -> schemas.ProjectRead:
    project = ProjectService.get_project(store, project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return schemas.ProjectRead.model_validate(project, from_attributes=True)


@router.post("/", response_model=schemas.ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: schemas.ProjectCreate, store: EntityStore = Depends(get_store)
) -> schemas.ProjectRead:
    try:
        project = ProjectService.create_project(store, project_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return schemas.ProjectRead.model_validate(project, from_attributes=True)


@router.put("/{project_id}", response_model=schemas.ProjectRead)
def update_project(
    project_id: str,
    project_in: schemas.ProjectUpdate,
    store: EntityStore = Depends(get_store),
) -> schemas.ProjectRead:
    try:
        project = ProjectService.update_project(store, project_id, project_in)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return schemas.ProjectRead.model_validate(project, from_attributes=True)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: str, store: EntityStore = Depends(get_store)) -> None:
    try:
        ProjectService.delete_project(store, project_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

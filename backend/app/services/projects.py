"""Business logic for upstream projects and their commission split."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from .. import models, schemas
from ..errors import NotFoundError, ValidationError
from ..store import PAYMENTS, PROJECTS, EntityStore

LOGGER = logging.getLogger(__name__)


class ProjectService:
    """Create and maintain projects referenced by payments."""

    @staticmethod
    def _validate_commission(value: Decimal) -> Decimal:
        commission = Decimal(str(value))
        if commission < 0 or commission > 100:
            raise ValidationError("commission_pct must be between 0 and 100")
        return commission

    @staticmethod
    def list_projects(store: EntityStore) -> Iterable[models.Project]:
        return sorted(store.projects.values(), key=lambda project: project.name.lower())

    @staticmethod
    def get_project(store: EntityStore, project_id: str) -> Optional[models.Project]:
        return store.projects.get(project_id)

    @staticmethod
    def require_project(store: EntityStore, project_id: str) -> models.Project:
        project = store.projects.get(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    @classmethod
    def create_project(cls, store: EntityStore, data: schemas.ProjectCreate) -> models.Project:
        name = data.name.strip()
        if not name:
            raise ValidationError("name is required")
        project = models.Project(
            name=name,
            owner=data.owner.strip(),
            country=data.country,
            commission_pct=cls._validate_commission(data.commission_pct),
        )
        with store.transaction(PROJECTS):
            store.projects[project.id] = project
        return project

    @classmethod
    def update_project(
        cls, store: EntityStore, project_id: str, data: schemas.ProjectUpdate
    ) -> models.Project:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is not None and not changes["name"].strip():
            raise ValidationError("name is required")
        commission = None
        if changes.get("commission_pct") is not None:
            commission = cls._validate_commission(changes["commission_pct"])

        with store.transaction(PROJECTS):
            project = cls.require_project(store, project_id)
            if changes.get("name"):
                project.name = changes["name"].strip()
            if changes.get("owner") is not None:
                project.owner = changes["owner"].strip()
            if "country" in changes:
                project.country = changes["country"]
            if commission is not None:
                project.commission_pct = commission
        return project

    @classmethod
    def delete_project(cls, store: EntityStore, project_id: str) -> int:
        """Delete a project and detach its payments.

        Detached payments become unassigned income. Returns how many were
        detached.
        """

        with store.transaction(PROJECTS, PAYMENTS):
            cls.require_project(store, project_id)
            attributed = [
                payment
                for payment in store.payments.values()
                if payment.project_id == project_id
            ]
            for payment in attributed:
                store.payments[payment.id] = payment.model_copy(update={"project_id": None})
            del store.projects[project_id]

        LOGGER.info("Deleted project %s and detached %d payments", project_id, len(attributed))
        return len(attributed)

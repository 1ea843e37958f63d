"""Translate service-layer failures into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..errors import (
    CapacityExceeded,
    LedgerError,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)

LOGGER = logging.getLogger(__name__)


def to_http_exception(exc: LedgerError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, CapacityExceeded):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, PersistenceFailure):
        LOGGER.error("Change applied in memory but not persisted: %s", exc)
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No se pudieron guardar los cambios. Inténtalo de nuevo más tarde.",
        )
    LOGGER.exception("Unexpected ledger error", exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

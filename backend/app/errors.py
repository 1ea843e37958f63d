"""Exceptions raised by the ledger services."""

from __future__ import annotations


class LedgerError(RuntimeError):
    """Base class for failures surfaced by the service layer."""


class ValidationError(LedgerError):
    """Raised before any mutation when an input or reference is invalid."""


class NotFoundError(LedgerError):
    """Raised when the requested record does not exist."""


class CapacityExceeded(LedgerError):
    """Raised when a panel has no free slot for a new subscription."""

    def __init__(self, panel_id: str, total_capacity: int, used_capacity: int) -> None:
        super().__init__(
            f"Panel {panel_id} has no available capacity ({used_capacity}/{total_capacity})"
        )
        self.panel_id = panel_id
        self.total_capacity = total_capacity
        self.used_capacity = used_capacity


class PersistenceFailure(LedgerError):
    """Raised when a collection could not be written to the key-value store.

    The in-memory mutation that triggered the write is kept.
    """

    def __init__(self, key: str, message: str | None = None) -> None:
        super().__init__(message or f"Could not persist collection '{key}'")
        self.key = key

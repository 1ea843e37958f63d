"""Panel occupancy bookkeeping."""

from __future__ import annotations

from typing import Mapping

from ..store import EntityStore


class CapacityLedger:
    """Maintains ``used_capacity`` on panels as subscriptions come and go.

    Callers are expected to hold the store transaction; these helpers only
    adjust counters and never persist on their own.
    """

    @staticmethod
    def available_capacity(store: EntityStore, panel_id: str) -> int:
        panel = store.panels.get(panel_id)
        if panel is None:
            return 0
        return panel.available_capacity

    @staticmethod
    def reserve(store: EntityStore, panel_id: str) -> None:
        # Availability is checked by the caller before offering the panel.
        panel = store.panels.get(panel_id)
        if panel is None:
            return
        panel.used_capacity += 1

    @staticmethod
    def release(store: EntityStore, panel_id: str, count: int = 1) -> None:
        panel = store.panels.get(panel_id)
        if panel is None or count <= 0:
            return
        panel.used_capacity = max(0, panel.used_capacity - count)

    @classmethod
    def release_many(cls, store: EntityStore, counts: Mapping[str, int]) -> None:
        """Release several slots with one combined decrement per panel."""

        for panel_id, count in counts.items():
            cls.release(store, panel_id, count)

"""Bounded, chronologically ordered log of stored recommendations."""

import bisect
import logging
import time
from collections.abc import Callable

from tactical_engine.analyzer.constants import HISTORY_CAPACITY
from tactical_engine.types import Recommendation

logger = logging.getLogger(__name__)


class RecommendationHistory:
    """FIFO buffer of recommendations, oldest evicted first.

    Entries are ordered by the analysis pass that stored them. Appends from
    an older pass that finish late are slotted in before entries from newer
    passes, so the log stays in pass-start order.
    """

    def __init__(
        self,
        capacity: int = HISTORY_CAPACITY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._clock = clock
        self._keys: list[int] = []
        self._entries: list[Recommendation] = []

    def __len__(self) -> int:
        return len(self._entries)

    def _unique_id(self, source_id: str) -> str:
        taken = {entry.id for entry in self._entries}
        stamp = int(self._clock() * 1000)
        candidate = f"{source_id}-{stamp}"
        while candidate in taken:
            stamp += 1
            candidate = f"{source_id}-{stamp}"
        return candidate

    def store(
        self, recommendation: Recommendation, sequence: int | None = None
    ) -> Recommendation:
        """Re-id and record a recommendation; returns the stored copy."""
        stored = recommendation.model_copy(
            update={"id": self._unique_id(recommendation.id)}
        )
        key = sequence if sequence is not None else (self._keys[-1] if self._keys else 0)

        index = bisect.bisect_right(self._keys, key)
        self._keys.insert(index, key)
        self._entries.insert(index, stored)

        while len(self._entries) > self.capacity:
            self._keys.pop(0)
            evicted = self._entries.pop(0)
            logger.debug("History full, evicted %s", evicted.id)

        return stored

    def entries(self) -> list[Recommendation]:
        """Copy of the history, oldest first."""
        return list(self._entries)

    def clear(self) -> None:
        self._keys.clear()
        self._entries.clear()


__all__ = ["RecommendationHistory"]

"""Bounded, newest-first history of rendered notifications."""

from collections import deque
from typing import Dict, Iterable, Tuple, Union

from .events.envelope import EventCategory


DEFAULT_HISTORY_SIZE = 5


class HistoryRing:
    """Fixed-capacity sequence of messages, newest first.

    Pushing onto a full ring evicts the oldest entry. Readers get an
    immutable snapshot, never the live buffer.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE):
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: deque = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, message: str) -> None:
        """Insert a message at the front, evicting the oldest if full."""
        self._entries.appendleft(message)

    def snapshot(self) -> Tuple[str, ...]:
        """Current contents, newest first."""
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.snapshot())


class HistoryStore:
    """One history ring per event category."""

    def __init__(
        self,
        capacity: int = DEFAULT_HISTORY_SIZE,
        categories: Iterable[Union[str, EventCategory]] = tuple(EventCategory)
    ):
        self._capacity = capacity
        self._rings: Dict[str, HistoryRing] = {}
        for category in categories:
            self.ring(category)

    @property
    def capacity(self) -> int:
        return self._capacity

    def ring(self, category: Union[str, EventCategory]) -> HistoryRing:
        """Get the ring for a category, creating it on first use."""
        key = _category_key(category)
        if key not in self._rings:
            self._rings[key] = HistoryRing(self._capacity)
        return self._rings[key]

    def push(self, category: Union[str, EventCategory], message: str) -> None:
        self.ring(category).push(message)

    def snapshot(self, category: Union[str, EventCategory]) -> Tuple[str, ...]:
        key = _category_key(category)
        if key not in self._rings:
            return ()
        return self._rings[key].snapshot()

    def snapshot_all(self) -> Dict[str, Tuple[str, ...]]:
        return {key: ring.snapshot() for key, ring in self._rings.items()}

    def get_stats(self) -> Dict[str, int]:
        return {key: len(ring) for key, ring in self._rings.items()}


def _category_key(category: Union[str, EventCategory]) -> str:
    if isinstance(category, EventCategory):
        return category.value
    return category

"""Fixed-capacity FIFO of samples that records overflows."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Bounded FIFO; writes to a full buffer are dropped and flagged."""

    def __init__(self, length: int) -> None:
        if length < 1:
            raise ValueError("length must be at least 1")
        self._capacity = length
        self._items: deque[T] = deque()
        self._overflow = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def space(self) -> int:
        """Number of free slots."""
        return self._capacity - len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def put(self, sample: T) -> bool:
        """Append ``sample``; return False and flag an overflow if full."""
        if len(self._items) >= self._capacity:
            self._overflow = True
            return False
        self._items.append(sample)
        return True

    def get(self) -> T | None:
        """Remove and return the oldest sample, or None when empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def has_overflowed(self) -> bool:
        """Return whether an overflow happened since the last call, and clear it."""
        overflow = self._overflow
        self._overflow = False
        return overflow

    def reset(self) -> None:
        self._items.clear()
        self._overflow = False
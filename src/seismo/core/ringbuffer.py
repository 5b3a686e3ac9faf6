from __future__ import annotations

from collections.abc import Iterator

import numpy as np


class RollingChannelBuffer:
    """
    Fixed-capacity sample history for one channel.

    The buffer is always full: it starts zero-filled, and every push
    overwrites the oldest slot. Resizing trims or zero-pads at the oldest
    end, so the newest samples keep their relative order and a live trace
    does not jump when the display is resized.
    """

    __slots__ = ("_capacity", "_data", "_start")

    def __init__(self, capacity: int) -> None:
        self._capacity = 0
        self._data: list[float] = []
        self._start = 0
        self.reset(capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, value: float) -> None:
        """Drop the oldest sample and append ``value`` at the newest end."""
        if self._capacity == 0:
            return
        self._data[self._start] = float(value)
        self._start = (self._start + 1) % self._capacity

    def resize(self, new_capacity: int) -> None:
        new_capacity = int(new_capacity)
        if new_capacity < 1:
            raise ValueError("new_capacity must be at least 1")
        ordered = self._ordered()
        if len(ordered) > new_capacity:
            ordered = ordered[len(ordered) - new_capacity :]
        elif len(ordered) < new_capacity:
            ordered = [0.0] * (new_capacity - len(ordered)) + ordered
        self._data = ordered
        self._capacity = new_capacity
        self._start = 0

    def reset(self, capacity: int) -> None:
        """Replace the contents with ``capacity`` zeros."""
        capacity = int(capacity)
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._data = [0.0] * capacity
        self._capacity = capacity
        self._start = 0

    def snapshot(self) -> np.ndarray:
        """Return a float64 copy of the contents, oldest first."""
        return np.asarray(self._ordered(), dtype=np.float64)

    def latest(self) -> float | None:
        if self._capacity == 0:
            return None
        return self[-1]

    def _ordered(self) -> list[float]:
        return self._data[self._start :] + self._data[: self._start]

    def __len__(self) -> int:
        return self._capacity

    def __getitem__(self, index: int) -> float:
        """Index over the logical contents (0 is oldest, -1 is newest)."""
        size = self._capacity
        if index < 0:
            index += size
        if index < 0 or index >= size:
            raise IndexError("RollingChannelBuffer index out of range")
        return self._data[(self._start + index) % size]

    def __iter__(self) -> Iterator[float]:
        for i in range(self._capacity):
            yield self._data[(self._start + i) % self._capacity]

    def __repr__(self) -> str:
        return f"RollingChannelBuffer(capacity={self._capacity}, data={self._ordered()!r})"

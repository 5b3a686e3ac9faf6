"""The four aligned channel histories of a seismograph session."""

from __future__ import annotations

import threading
from typing import Dict

import numpy as np

from .models import CHANNEL_ORDER, Channel, ConditionedSample, sample_value
from .ringbuffer import RollingChannelBuffer


class ChannelSet:
    """Magnitude, X, Y and Z buffers kept at one shared capacity.

    Every operation runs under a single RLock and visits the channels in
    ``CHANNEL_ORDER``, so index ``i`` of each buffer always refers to the
    same reading and readers never see a half-applied update.
    """

    def __init__(self, capacity: int) -> None:
        self._lock = threading.RLock()
        self._buffers: Dict[Channel, RollingChannelBuffer] = {
            channel: RollingChannelBuffer(capacity) for channel in CHANNEL_ORDER
        }
        self._capacity = int(capacity)

    @property
    def capacity(self) -> int:
        with self._lock:
            return self._capacity

    def buffer(self, channel: Channel) -> RollingChannelBuffer:
        return self._buffers[channel]

    def push_all(self, sample: ConditionedSample) -> None:
        with self._lock:
            for channel in CHANNEL_ORDER:
                self._buffers[channel].push(sample_value(sample, channel))

    def resize_all(self, capacity: int) -> None:
        with self._lock:
            # Validate up front so a bad capacity cannot leave buffers mismatched.
            if int(capacity) < 1:
                raise ValueError("capacity must be at least 1")
            for channel in CHANNEL_ORDER:
                self._buffers[channel].resize(capacity)
            self._capacity = int(capacity)

    def reset_all(self, capacity: int) -> None:
        with self._lock:
            if int(capacity) < 0:
                raise ValueError("capacity must not be negative")
            for channel in CHANNEL_ORDER:
                self._buffers[channel].reset(capacity)
            self._capacity = int(capacity)

    def snapshot(self, channel: Channel) -> np.ndarray:
        with self._lock:
            return self._buffers[channel].snapshot()

    def snapshot_all(self) -> Dict[Channel, np.ndarray]:
        """Return a consistent copy of all four histories."""
        with self._lock:
            return {channel: self._buffers[channel].snapshot() for channel in CHANNEL_ORDER}

    def __len__(self) -> int:
        return self.capacity

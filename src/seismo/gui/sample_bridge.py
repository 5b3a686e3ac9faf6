"""Thread bridge that moves conditioned samples onto the Qt GUI thread."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, List

from PySide6.QtCore import QObject, QTimer, Qt, Signal, Slot

from ..core.models import ConditionedSample

logger = logging.getLogger(__name__)

BatchSink = Callable[[List[ConditionedSample]], object]


class SampleBridge(QObject):
    """Bounded inbox filled from sensor threads and drained by a GUI timer.

    ``offer`` may be called from any thread. The timer runs on the thread
    that owns this object and hands everything queued since the previous
    tick to ``sink`` as one batch, so redraws follow the refresh rate
    rather than the sensor rate. When the inbox is full the oldest samples
    are dropped.
    """

    batch_delivered = Signal(int)

    def __init__(
        self,
        sink: BatchSink,
        *,
        interval_ms: int = 16,
        max_pending: int = 4096,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._sink = sink
        self._pending: Deque[ConditionedSample] = deque(maxlen=max(1, int(max_pending)))
        self._lock = threading.Lock()
        self._dropped = 0

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self.drain)

    @property
    def dropped(self) -> int:
        return self._dropped

    def offer(self, sample: ConditionedSample) -> None:
        with self._lock:
            if len(self._pending) == self._pending.maxlen:
                self._dropped += 1
            self._pending.append(sample)

    def start(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self.clear()

    def clear(self) -> None:
        with self._lock:
            self._pending.clear()

    @Slot()
    def drain(self) -> int:
        with self._lock:
            if not self._pending:
                return 0
            batch = list(self._pending)
            self._pending.clear()
        self._sink(batch)
        self.batch_delivered.emit(len(batch))
        return len(batch)

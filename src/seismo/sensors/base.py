"""Base class for threaded accelerometer drivers."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..core.models import RawMotionVector

logger = logging.getLogger(__name__)

ReadingCallback = Callable[[RawMotionVector], None]


class MotionDriver:
    """
    A source of raw accelerometer readings delivered on a background thread.

    Subclasses implement :meth:`_run`, calling :meth:`_emit` for each
    reading and returning when ``stop_event`` is set or the source is
    exhausted. ``attach``/``detach`` start and stop that thread; both are
    idempotent. Each thread gets its own stop event, so a reader still
    blocked in I/O after ``detach`` can never deliver to a later
    subscriber.
    """

    #: Fastest interval the hardware can report at, in milliseconds.
    minimum_report_interval_ms: int = 1

    def __init__(self, *, thread_name: Optional[str] = None) -> None:
        self._callback: Optional[ReadingCallback] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._thread_name = thread_name or type(self).__name__
        self.report_interval_ms: int = max(1, int(self.minimum_report_interval_ms))

    @property
    def is_available(self) -> bool:
        return True

    @property
    def is_attached(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def attach(self, callback: ReadingCallback) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._callback = callback
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._thread_main,
                args=(self._stop_event,),
                name=self._thread_name,
                daemon=True,
            )
            self._thread.start()
        logger.debug("%s attached", self._thread_name)

    def detach(self, *, timeout: Optional[float] = 1.0) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._callback = None
            self._stop_event.set()
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("%s detached", self._thread_name)

    def _thread_main(self, stop_event: threading.Event) -> None:
        try:
            self._run(stop_event)
        except Exception:
            logger.exception("%s stopped on an unexpected error", self._thread_name)

    def _run(self, stop_event: threading.Event) -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    def _emit(self, reading: RawMotionVector, stop_event: threading.Event) -> None:
        callback = self._callback
        if callback is None or stop_event.is_set():
            return
        try:
            callback(reading)
        except Exception as exc:  # pragma: no cover - defensive guard
            logger.exception("Error in reading callback for %r: %s", reading, exc)


class NullMotionDriver(MotionDriver):
    """Stands in for a machine without an accelerometer."""

    @property
    def is_available(self) -> bool:
        return False

    def attach(self, callback: ReadingCallback) -> None:
        return

    def detach(self, *, timeout: Optional[float] = 1.0) -> None:
        return

"""Accelerometer service: availability, report interval, and conditioning."""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..config.app_config import MIN_REPORT_INTERVAL_MS
from ..core.conditioning import condition
from ..core.models import ConditionedSample, RawMotionVector
from .base import MotionDriver

logger = logging.getLogger(__name__)

SampleListener = Callable[[ConditionedSample], None]


class AccelerometerService:
    """
    Wraps a :class:`MotionDriver` and publishes conditioned samples.

    Availability is decided once, at construction. When available, the
    driver's report interval is set to its minimum supported interval but
    never faster than ``min_report_interval_ms``, which can only raise the
    20 ms floor. :meth:`start` and :meth:`stop` attach/detach the driver
    under one lock and are no-ops when repeated.

    Listeners are called on the driver's thread; GUI code must marshal the
    samples onto its own thread (see :class:`seismo.gui.sample_bridge.SampleBridge`).
    """

    def __init__(
        self,
        driver: Optional[MotionDriver],
        *,
        min_report_interval_ms: int = MIN_REPORT_INTERVAL_MS,
    ) -> None:
        self._driver = driver if driver is not None and driver.is_available else None
        self._lock = threading.Lock()
        self._running = False
        self._listeners: List[SampleListener] = []
        self._listeners_lock = threading.Lock()

        if self._driver is not None:
            interval = max(
                int(self._driver.minimum_report_interval_ms),
                int(min_report_interval_ms),
                MIN_REPORT_INTERVAL_MS,
            )
            self._driver.report_interval_ms = interval
            logger.info(
                "Accelerometer available (%s, report interval %d ms)",
                type(self._driver).__name__,
                interval,
            )
        else:
            logger.warning("No accelerometer available")

    @property
    def is_available(self) -> bool:
        return self._driver is not None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def report_interval_ms(self) -> int | None:
        if self._driver is None:
            return None
        return self._driver.report_interval_ms

    def add_listener(self, listener: SampleListener) -> None:
        with self._listeners_lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: SampleListener) -> None:
        with self._listeners_lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def start(self) -> None:
        if self._driver is None:
            return
        with self._lock:
            if self._running:
                return
            self._driver.attach(self._on_reading)
            self._running = True

    def stop(self) -> None:
        if self._driver is None:
            return
        with self._lock:
            if not self._running:
                return
            self._driver.detach()
            self._running = False

    def close(self) -> None:
        self.stop()

    def _on_reading(self, reading: RawMotionVector) -> None:
        sample = condition(reading)
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(sample)
            except Exception as exc:  # pragma: no cover - defensive guard
                logger.exception("Error in sample listener for %r: %s", sample, exc)

    def __enter__(self) -> AccelerometerService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

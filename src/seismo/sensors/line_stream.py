"""
Accelerometer driver that reads one reading per text line.

Two line formats are understood:

  - JSON objects with (at least) ``ax``, ``ay``, ``az``; other keys such as
    ``timestamp_ns`` or ``sensor_id`` are ignored and a missing axis is
    reported as NaN.
  - Comma-separated ``ax,ay,az`` or the legacy ``timestamp,ax,ay,az,...``
    layout (four or more columns, first column is the timestamp).

Values are in g by default; pass ``units="m/s2"`` for loggers that report
SI units.
"""

from __future__ import annotations

import json
import logging
import math
import threading
from collections.abc import Iterable
from typing import Callable, Optional, Sequence, Union

from ..config.app_config import UNITS_G, UNITS_MS2
from ..core.models import RawMotionVector
from .base import MotionDriver, ReadingCallback

logger = logging.getLogger(__name__)

STANDARD_GRAVITY_MS2 = 9.80665

LineSource = Union[Iterable[str], Callable[[], Iterable[str]]]


def _unit_scale(units: str) -> float:
    if units == UNITS_G:
        return 1.0
    if units == UNITS_MS2:
        return 1.0 / STANDARD_GRAVITY_MS2
    raise ValueError(f"Unknown units {units!r}")


def _parse_json_line(text: str, scale: float) -> RawMotionVector | None:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Bad JSON from sensor stream: %r (%s)", text, exc)
        return None
    if not isinstance(obj, dict):
        logger.warning("Skipping non-object JSON payload: %r", obj)
        return None

    def _get_axis(name: str) -> float:
        val = obj.get(name)
        if val is None:
            # NaN marks "not present" while keeping a float type.
            return math.nan
        return float(val) * scale

    try:
        return RawMotionVector(x=_get_axis("ax"), y=_get_axis("ay"), z=_get_axis("az"))
    except (TypeError, ValueError) as exc:
        logger.warning("Bad field value in sensor line %r (%s)", obj, exc)
        return None


def _parse_csv_line(text: str, scale: float) -> RawMotionVector | None:
    parts: Sequence[str] = text.split(",")
    if len(parts) == 3:
        fields = parts
    elif len(parts) >= 4:
        fields = parts[1:4]
    else:
        logger.warning(
            "Expected 3 or more comma-separated values for accelerometer CSV, got %d: %r",
            len(parts),
            text,
        )
        return None
    try:
        ax, ay, az = (float(part) * scale for part in fields)
    except ValueError as exc:
        logger.warning("Bad CSV field in sensor line %r (%s)", text, exc)
        return None
    return RawMotionVector(x=ax, y=ay, z=az)


def parse_line(line: str, *, units: str = UNITS_G) -> RawMotionVector | None:
    """
    Parse a single text line into a :class:`RawMotionVector` in g.

    Invalid and empty lines return ``None`` so callers can skip them without
    raising exceptions.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    scale = _unit_scale(units)
    if text[0] == "{":
        return _parse_json_line(text, scale)
    return _parse_csv_line(text, scale)


class LineStreamMotionDriver(MotionDriver):
    """Feeds readings parsed from ``source`` (stdin, a file, a subprocess pipe).

    Live sources deliver readings as they arrive. With ``paced=True`` (used
    to replay a recorded file) the driver waits ``report_interval_ms``
    between readings instead of flooding the display.

    With ``persistent=True`` (used for stdin, which cannot be reopened) one
    reader thread consumes ``source`` for the life of the driver and
    ``attach``/``detach`` only switch delivery on and off. Lines read while
    detached are discarded.
    """

    def __init__(
        self,
        source: LineSource,
        *,
        units: str = UNITS_G,
        paced: bool = False,
        persistent: bool = False,
        minimum_report_interval_ms: int = 1,
        thread_name: Optional[str] = None,
    ) -> None:
        self.minimum_report_interval_ms = max(1, int(minimum_report_interval_ms))
        super().__init__(thread_name=thread_name or "SeismoLineStreamDriver")
        _unit_scale(units)
        self._source = source
        self._units = units
        self._paced = bool(paced)
        self._persistent = bool(persistent)
        self._delivering = False

    @property
    def is_persistent(self) -> bool:
        return self._persistent

    @property
    def is_attached(self) -> bool:
        if not self._persistent:
            return super().is_attached
        with self._lock:
            return self._delivering and self._thread is not None and self._thread.is_alive()

    def attach(self, callback: ReadingCallback) -> None:
        if not self._persistent:
            super().attach(callback)
            return
        with self._lock:
            self._callback = callback
            self._delivering = True
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._thread_main,
                    args=(self._stop_event,),
                    name=self._thread_name,
                    daemon=True,
                )
                self._thread.start()
        logger.debug("%s attached", self._thread_name)

    def detach(self, *, timeout: Optional[float] = 1.0) -> None:
        if not self._persistent:
            super().detach(timeout=timeout)
            return
        with self._lock:
            self._delivering = False
            self._callback = None
        logger.debug("%s detached (reader kept alive)", self._thread_name)

    def _open(self) -> Iterable[str]:
        if callable(self._source):
            return self._source()
        return self._source

    def _run(self, stop_event: threading.Event) -> None:
        interval_s = max(0.001, self.report_interval_ms / 1000.0)
        for raw_line in self._open():
            if stop_event.is_set():
                return
            reading = parse_line(raw_line, units=self._units)
            if reading is None:
                continue
            self._emit(reading, stop_event)
            if self._paced and stop_event.wait(interval_s):
                return
        logger.info("Sensor line stream ended")

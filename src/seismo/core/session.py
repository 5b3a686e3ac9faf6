"""Seismograph session: sensor feed, channel buffers, and redraw triggers."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Callable, Optional, Protocol

from .channels import ChannelSet
from .models import (
    CanvasGeometry,
    ConditionedSample,
    DisplayMode,
    SessionState,
    WaveformFrame,
)
from .projection import (
    MIN_CAPACITY,
    PIXELS_PER_SAMPLE,
    WaveformProjector,
    capacity_for_width,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 256

StatusCallback = Callable[[str], None]


class SensorFeed(Protocol):
    """What the session needs from the sensor side."""

    @property
    def is_available(self) -> bool:  # pragma: no cover - protocol
        ...

    def start(self) -> None:  # pragma: no cover - protocol
        ...

    def stop(self) -> None:  # pragma: no cover - protocol
        ...


class Renderer(Protocol):
    def draw_frame(self, frame: WaveformFrame) -> None:  # pragma: no cover - protocol
        ...


def format_magnitude(value: float) -> str:
    """Readout text for the latest magnitude delta."""
    return f"Magnitude: {value:.3f} g"


class SeismographSession:
    """
    Owns the live state of one seismograph display.

    States move ``IDLE -> RUNNING <-> PAUSED``. All buffer mutation and
    projection is expected to happen on one thread (the Qt GUI thread in
    the desktop app); only :meth:`start` and :meth:`stop` are additionally
    guarded by a lock so the sensor subscription cannot end up half
    attached.
    """

    def __init__(
        self,
        feed: SensorFeed,
        *,
        renderer: Optional[Renderer] = None,
        status: Optional[StatusCallback] = None,
        initial_capacity: int = DEFAULT_CAPACITY,
        min_capacity: int = MIN_CAPACITY,
        pixels_per_sample: float = PIXELS_PER_SAMPLE,
        sensitivity: float = 1.0,
        mode: DisplayMode = DisplayMode.MAGNITUDE,
        projector: Optional[WaveformProjector] = None,
    ) -> None:
        self._feed = feed
        self._renderer = renderer
        self._status = status
        self._projector = projector or WaveformProjector()
        self._min_capacity = int(min_capacity)
        self._pixels_per_sample = float(pixels_per_sample)

        # Availability is a property of the hardware; checked once.
        self._sensor_available = bool(feed.is_available)
        self._state = SessionState.IDLE
        self._transition_lock = threading.Lock()

        self._capacity = max(1, int(initial_capacity))
        self._channels = ChannelSet(self._capacity)
        self._geometry = CanvasGeometry()
        self._baseline_y: float | None = None
        self._mode = mode
        self._sensitivity = float(sensitivity)
        self._last_magnitude = 0.0
        self._last_frame: WaveformFrame | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SessionState.RUNNING

    @property
    def sensor_available(self) -> bool:
        return self._sensor_available

    @property
    def mode(self) -> DisplayMode:
        return self._mode

    @property
    def sensitivity(self) -> float:
        return self._sensitivity

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def geometry(self) -> CanvasGeometry:
        return self._geometry

    @property
    def baseline_y(self) -> float | None:
        return self._baseline_y

    @property
    def channels(self) -> ChannelSet:
        return self._channels

    @property
    def last_magnitude(self) -> float:
        return self._last_magnitude

    @property
    def last_frame(self) -> WaveformFrame | None:
        return self._last_frame

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def start(self) -> bool:
        """
        Begin streaming from a zeroed history.

        Returns ``True`` only when the session actually moved to RUNNING;
        starting while running or without a sensor does nothing.
        """
        with self._transition_lock:
            if self._state is SessionState.RUNNING:
                return False
            if not self._sensor_available:
                logger.info("Start ignored: no motion sensor available")
                return False

            self._channels.reset_all(self._capacity)
            self._publish_magnitude(0.0)
            self.redraw()

            self._feed.start()
            self._state = SessionState.RUNNING
            logger.info("Seismograph running (capacity=%d)", self._capacity)
            return True

    def stop(self) -> bool:
        """Pause streaming; returns ``True`` if the session was running."""
        with self._transition_lock:
            if self._state is not SessionState.RUNNING:
                return False
            self._feed.stop()
            self._state = SessionState.PAUSED
            logger.info("Seismograph paused")
            return True

    def close(self) -> None:
        """Detach from the sensor feed for shutdown."""
        with self._transition_lock:
            self._feed.stop()
            if self._state is SessionState.RUNNING:
                self._state = SessionState.PAUSED

    # ------------------------------------------------------------------
    # Sample ingest
    # ------------------------------------------------------------------
    def on_sample_arrived(self, sample: ConditionedSample) -> bool:
        """Push one sample and redraw; samples arriving while not running are dropped."""
        if self._state is not SessionState.RUNNING:
            return False
        self._channels.push_all(sample)
        self._publish_magnitude(sample.magnitude_delta)
        self.redraw()
        return True

    def on_samples_arrived(self, samples: Iterable[ConditionedSample]) -> int:
        """
        Push a batch of samples in arrival order and redraw once.

        Returns the number of samples accepted.
        """
        if self._state is not SessionState.RUNNING:
            return 0
        accepted = 0
        last: ConditionedSample | None = None
        for sample in samples:
            self._channels.push_all(sample)
            last = sample
            accepted += 1
        if last is None:
            return 0
        self._publish_magnitude(last.magnitude_delta)
        self.redraw()
        return accepted

    # ------------------------------------------------------------------
    # Display state
    # ------------------------------------------------------------------
    def on_geometry_changed(self, width: float, height: float) -> None:
        geometry = CanvasGeometry(float(width), float(height))
        self._geometry = geometry

        if geometry.width > 0:
            capacity = capacity_for_width(
                geometry.width,
                pixels_per_sample=self._pixels_per_sample,
                min_capacity=self._min_capacity,
            )
            if capacity != self._capacity:
                logger.debug(
                    "Canvas width %.1f px: capacity %d -> %d",
                    geometry.width,
                    self._capacity,
                    capacity,
                )
                self._channels.resize_all(capacity)
                self._capacity = capacity

        if geometry.height > 0:
            self._baseline_y = geometry.height / 2.0

        self.redraw()

    def set_mode(self, mode: DisplayMode) -> None:
        self._mode = DisplayMode(mode)
        self.redraw()

    def set_sensitivity(self, gain: float) -> None:
        self._sensitivity = float(gain)
        self.redraw()

    def redraw(self) -> WaveformFrame | None:
        """Re-project the current histories and hand the frame to the renderer."""
        frame = self._projector.project_frame(
            self._channels.snapshot_all(),
            self._mode,
            self._geometry,
            self._sensitivity,
        )
        if frame is None:
            return None
        self._last_frame = frame
        if self._renderer is not None:
            self._renderer.draw_frame(frame)
        return frame

    def _publish_magnitude(self, value: float) -> None:
        self._last_magnitude = float(value)
        if self._status is not None:
            self._status(format_magnitude(value))


__all__ = [
    "DEFAULT_CAPACITY",
    "Renderer",
    "SensorFeed",
    "SeismographSession",
    "format_magnitude",
]

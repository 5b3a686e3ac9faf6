"""Synthetic accelerometer used for demos and when no hardware is attached."""

from __future__ import annotations

import math
import threading
import time
from typing import Optional

import numpy as np

from ..core.models import RawMotionVector
from .base import MotionDriver


class SyntheticMotionDriver(MotionDriver):
    """
    Emits a device-at-rest signal (``z ≈ 1 g``) with sensor noise and a
    decaying tremor burst every ``burst_every_s`` seconds.
    """

    def __init__(
        self,
        rate_hz: float = 50.0,
        *,
        noise_g: float = 0.004,
        burst_every_s: float = 6.0,
        burst_peak_g: float = 0.6,
        burst_freq_hz: float = 4.0,
        seed: Optional[int] = None,
    ) -> None:
        self.minimum_report_interval_ms = max(1, int(round(1000.0 / max(1.0, rate_hz))))
        super().__init__(thread_name="SeismoSyntheticDriver")
        self._noise_g = float(noise_g)
        self._burst_every_s = max(0.5, float(burst_every_s))
        self._burst_peak_g = float(burst_peak_g)
        self._burst_freq_hz = float(burst_freq_hz)
        self._rng = np.random.default_rng(seed)

    def reading_at(self, t_s: float) -> RawMotionVector:
        """Return the synthetic reading ``t_s`` seconds into the run."""
        phase_t = t_s % self._burst_every_s
        envelope = self._burst_peak_g * math.exp(-1.5 * phase_t)
        wave = envelope * math.sin(2.0 * math.pi * self._burst_freq_hz * phase_t)
        nx, ny, nz = self._rng.normal(0.0, self._noise_g, size=3)
        return RawMotionVector(
            x=float(0.6 * wave + nx),
            y=float(0.3 * wave + ny),
            z=float(1.0 + wave + nz),
        )

    def _run(self, stop_event: threading.Event) -> None:
        interval_s = max(0.001, self.report_interval_ms / 1000.0)
        start = time.monotonic()
        while not stop_event.wait(interval_s):
            self._emit(self.reading_at(time.monotonic() - start), stop_event)

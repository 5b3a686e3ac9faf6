"""Mapping of channel histories onto pixel-space polylines."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Mapping

import numpy as np

from .models import (
    AXIS_CHANNELS,
    CanvasGeometry,
    Channel,
    DisplayMode,
    ProjectionMode,
    WaveformFrame,
)

logger = logging.getLogger(__name__)

# Display saturates inside the conditioning clamp (4 g) so large but
# sub-maximal readings stay distinguishable from the clamp limit.
DISPLAY_CEILING_G = 3.0

MIN_CAPACITY = 64
PIXELS_PER_SAMPLE = 1.5
AMPLITUDE_MARGIN_PX = 12.0
MIN_AMPLITUDE_PX = 8.0


def capacity_for_width(
    width: float,
    *,
    pixels_per_sample: float = PIXELS_PER_SAMPLE,
    min_capacity: int = MIN_CAPACITY,
) -> int:
    """Return how many samples fit across ``width`` pixels."""
    return max(int(min_capacity), int(round(float(width) / pixels_per_sample)))


def step_for(width: float, capacity: int) -> float:
    """Horizontal distance in pixels between consecutive samples."""
    if capacity > 1:
        return float(width) / (capacity - 1)
    return float(width)


def baseline_for_height(height: float) -> float:
    return float(height) / 2.0


def amplitude_for_height(height: float) -> float:
    """Pixels available above (and below) the baseline for a full-scale trace."""
    return max(float(height) / 2.0 - AMPLITUDE_MARGIN_PX, MIN_AMPLITUDE_PX)


def project(
    samples: Sequence[float] | np.ndarray,
    mode: ProjectionMode,
    step: float,
    baseline_y: float,
    amplitude_pixels: float,
    sensitivity: float,
) -> np.ndarray:
    """
    Turn a sample history into an ``(N, 2)`` array of ``(x, y)`` points.

    Parameters
    ----------
    samples:
        Channel history, oldest first. Index ``i`` lands at ``x = i * step``.
    mode:
        ``UNIPOLAR`` draws values in ``[0, DISPLAY_CEILING_G]`` above the
        baseline only; ``BIPOLAR`` draws ``±DISPLAY_CEILING_G`` around it.
    sensitivity:
        Gain applied before clamping to the display ceiling.

    A one-sample history gets a synthetic trailing point at
    ``(step, baseline_y)`` so it still draws as a segment.
    """
    values = np.asarray(samples, dtype=np.float64).reshape(-1)
    if values.size == 0:
        return np.empty((0, 2), dtype=np.float64)

    scaled = values * float(sensitivity)
    if mode is ProjectionMode.UNIPOLAR:
        scaled = np.minimum(scaled, DISPLAY_CEILING_G)
        normalized = np.clip(scaled / DISPLAY_CEILING_G, 0.0, 1.0)
    else:
        scaled = np.clip(scaled, -DISPLAY_CEILING_G, DISPLAY_CEILING_G)
        normalized = scaled / DISPLAY_CEILING_G

    points = np.empty((values.size, 2), dtype=np.float64)
    points[:, 0] = np.arange(values.size, dtype=np.float64) * float(step)
    points[:, 1] = float(baseline_y) - normalized * float(amplitude_pixels)

    if values.size == 1:
        tail = np.array([[float(step), float(baseline_y)]], dtype=np.float64)
        points = np.vstack([points, tail])
    return points


class WaveformProjector:
    """Builds a :class:`WaveformFrame` for the active display mode.

    ``last_duration_ms`` holds the wall time of the most recent projection;
    it is also logged at DEBUG level.
    """

    def __init__(self) -> None:
        self.last_duration_ms = 0.0

    def project_frame(
        self,
        histories: Mapping[Channel, np.ndarray],
        mode: DisplayMode,
        geometry: CanvasGeometry,
        sensitivity: float,
    ) -> WaveformFrame | None:
        """
        Project the channels ``mode`` shows, or return ``None`` when there is
        nothing sensible to draw (zero-sized canvas or empty history).
        """
        if geometry.is_degenerate:
            logger.debug("Skipping projection for degenerate canvas %s", geometry)
            return None

        magnitude = histories.get(Channel.MAGNITUDE)
        if magnitude is None or len(magnitude) == 0:
            logger.debug("Skipping projection: no samples buffered")
            return None

        capacity = len(magnitude)
        step = step_for(geometry.width, capacity)
        baseline_y = baseline_for_height(geometry.height)
        amplitude = amplitude_for_height(geometry.height)

        started = time.perf_counter()
        if mode is DisplayMode.AXES:
            traces = tuple(
                (
                    channel,
                    project(
                        histories[channel],
                        ProjectionMode.BIPOLAR,
                        step,
                        baseline_y,
                        amplitude,
                        sensitivity,
                    ),
                )
                for channel in AXIS_CHANNELS
            )
        else:
            traces = (
                (
                    Channel.MAGNITUDE,
                    project(
                        magnitude,
                        ProjectionMode.UNIPOLAR,
                        step,
                        baseline_y,
                        amplitude,
                        sensitivity,
                    ),
                ),
            )
        self.last_duration_ms = (time.perf_counter() - started) * 1000.0
        logger.debug(
            "Projected %d trace(s) of %d samples in %.3f ms",
            len(traces),
            capacity,
            self.last_duration_ms,
        )

        return WaveformFrame(
            mode=mode,
            traces=traces,
            baseline_y=baseline_y,
            width=float(geometry.width),
        )


__all__ = [
    "DISPLAY_CEILING_G",
    "MIN_CAPACITY",
    "PIXELS_PER_SAMPLE",
    "WaveformProjector",
    "amplitude_for_height",
    "baseline_for_height",
    "capacity_for_width",
    "project",
    "step_for",
]

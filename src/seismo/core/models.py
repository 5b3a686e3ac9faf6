"""Shared dataclasses and enums for motion samples and waveform frames."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


@dataclass(frozen=True, slots=True)
class RawMotionVector:
    """Instantaneous acceleration along three axes, in g."""

    x: float
    y: float
    z: float


@dataclass(frozen=True, slots=True)
class ConditionedSample:
    """A motion reading after gravity compensation and clamping."""

    axis_x: float
    axis_y: float
    axis_z: float
    magnitude_delta: float


class Channel(Enum):
    MAGNITUDE = "magnitude"
    AXIS_X = "x"
    AXIS_Y = "y"
    AXIS_Z = "z"


# Order in which every multi-channel operation is applied.
CHANNEL_ORDER: tuple[Channel, ...] = (
    Channel.MAGNITUDE,
    Channel.AXIS_X,
    Channel.AXIS_Y,
    Channel.AXIS_Z,
)

AXIS_CHANNELS: tuple[Channel, ...] = (Channel.AXIS_X, Channel.AXIS_Y, Channel.AXIS_Z)


def sample_value(sample: ConditionedSample, channel: Channel) -> float:
    """Return the value ``sample`` carries for ``channel``."""
    if channel is Channel.MAGNITUDE:
        return sample.magnitude_delta
    if channel is Channel.AXIS_X:
        return sample.axis_x
    if channel is Channel.AXIS_Y:
        return sample.axis_y
    return sample.axis_z


class DisplayMode(Enum):
    """Which traces the render surface shows."""

    MAGNITUDE = "magnitude"
    AXES = "axes"


class ProjectionMode(Enum):
    """How a single channel is mapped onto the vertical axis."""

    UNIPOLAR = "unipolar"
    BIPOLAR = "bipolar"


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class CanvasGeometry:
    width: float = 0.0
    height: float = 0.0

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0.0 or self.height <= 0.0


@dataclass(frozen=True)
class WaveformFrame:
    """
    Everything a renderer needs for one redraw.

    ``traces`` holds one ``(channel, points)`` pair in magnitude mode and
    three in axes mode; ``points`` is an ``(N, 2)`` float64 array of pixel
    coordinates, oldest sample first.
    """

    mode: DisplayMode
    traces: tuple[tuple[Channel, np.ndarray], ...]
    baseline_y: float
    width: float

    def channels(self) -> tuple[Channel, ...]:
        return tuple(channel for channel, _ in self.traces)

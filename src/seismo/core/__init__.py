"""Core signal pipeline: conditioning, channel buffers, projection, session.

This package sits between the sensor drivers and the GUI. Raw vectors are
conditioned into bounded samples, kept in aligned rolling histories, and
projected into pixel-space polylines whenever the data or the display
geometry changes.
"""

from .channels import ChannelSet
from .conditioning import condition
from .models import (
    Channel,
    ConditionedSample,
    DisplayMode,
    ProjectionMode,
    RawMotionVector,
    SessionState,
    WaveformFrame,
)
from .projection import WaveformProjector, project
from .ringbuffer import RollingChannelBuffer
from .session import SeismographSession, format_magnitude

__all__ = [
    "Channel",
    "ChannelSet",
    "ConditionedSample",
    "DisplayMode",
    "ProjectionMode",
    "RawMotionVector",
    "RollingChannelBuffer",
    "SeismographSession",
    "SessionState",
    "WaveformFrame",
    "WaveformProjector",
    "condition",
    "format_magnitude",
    "project",
]

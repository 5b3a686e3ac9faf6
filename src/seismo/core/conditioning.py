"""Gravity compensation and clamping of raw accelerometer readings."""

from __future__ import annotations

import math

from .models import ConditionedSample, RawMotionVector

GRAVITY_G = 1.0
CONDITIONING_LIMIT_G = 4.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _finite_or_zero(value: float) -> float:
    # Parsers report a missing axis as NaN; treat it as no acceleration.
    value = float(value)
    if math.isnan(value):
        return 0.0
    return value


def condition(raw: RawMotionVector) -> ConditionedSample:
    """
    Convert a raw 3-axis reading (in g) into a bounded display sample.

    The magnitude channel keeps only the deviation from 1 g, so a device at
    rest reads zero whatever its orientation. The Z axis has gravity
    subtracted because the rest orientation reports about +1 g there.
    Every field is clamped to ``±CONDITIONING_LIMIT_G`` (the magnitude to
    ``[0, CONDITIONING_LIMIT_G]``), which also absorbs infinities.
    """
    x = _finite_or_zero(raw.x)
    y = _finite_or_zero(raw.y)
    z = _finite_or_zero(raw.z)

    magnitude = math.hypot(x, y, z)
    delta = abs(magnitude - GRAVITY_G)
    magnitude_delta = min(delta, CONDITIONING_LIMIT_G)

    limit = CONDITIONING_LIMIT_G
    return ConditionedSample(
        axis_x=_clamp(x, -limit, limit),
        axis_y=_clamp(y, -limit, limit),
        axis_z=_clamp(z - GRAVITY_G, -limit, limit),
        magnitude_delta=magnitude_delta,
    )


__all__ = ["CONDITIONING_LIMIT_G", "GRAVITY_G", "condition"]

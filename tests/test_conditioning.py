from __future__ import annotations

import math

import pytest

from seismo.core.conditioning import condition
from seismo.core.models import ConditionedSample, RawMotionVector


def _in_bounds(sample: ConditionedSample) -> bool:
    values = (sample.axis_x, sample.axis_y, sample.axis_z, sample.magnitude_delta)
    return (
        all(math.isfinite(v) for v in values)
        and 0.0 <= sample.magnitude_delta <= 4.0
        and -4.0 <= sample.axis_x <= 4.0
        and -4.0 <= sample.axis_y <= 4.0
        and -4.0 <= sample.axis_z <= 4.0
    )


def test_stationary_device_reads_zero() -> None:
    sample = condition(RawMotionVector(0.0, 0.0, 1.0))
    assert sample == ConditionedSample(0.0, 0.0, 0.0, 0.0)


def test_two_g_on_z() -> None:
    sample = condition(RawMotionVector(0.0, 0.0, 2.0))
    assert sample.magnitude_delta == pytest.approx(1.0)
    assert sample.axis_z == pytest.approx(1.0)
    assert sample.axis_x == 0.0
    assert sample.axis_y == 0.0


def test_free_fall_reports_one_g_delta() -> None:
    sample = condition(RawMotionVector(0.0, 0.0, 0.0))
    assert sample.magnitude_delta == pytest.approx(1.0)
    assert sample.axis_z == pytest.approx(-1.0)


def test_spikes_are_clamped() -> None:
    sample = condition(RawMotionVector(12.0, -9.0, 20.0))
    assert sample.magnitude_delta == 4.0
    assert sample.axis_x == 4.0
    assert sample.axis_y == -4.0
    assert sample.axis_z == 4.0


@pytest.mark.parametrize(
    "raw",
    [
        RawMotionVector(0.3, -0.2, 0.9),
        RawMotionVector(-5.0, 5.0, -5.0),
        RawMotionVector(1e9, -1e9, 1e-9),
        RawMotionVector(math.inf, -math.inf, math.inf),
        RawMotionVector(math.nan, 0.5, math.nan),
    ],
)
def test_output_is_always_finite_and_bounded(raw: RawMotionVector) -> None:
    assert _in_bounds(condition(raw))


def test_missing_axis_counts_as_zero() -> None:
    sample = condition(RawMotionVector(math.nan, 0.0, 1.0))
    assert sample.axis_x == 0.0
    assert sample.magnitude_delta == 0.0

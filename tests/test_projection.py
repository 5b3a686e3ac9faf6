from __future__ import annotations

import numpy as np
import pytest

from seismo.core.models import CanvasGeometry, Channel, DisplayMode, ProjectionMode
from seismo.core.projection import (
    WaveformProjector,
    amplitude_for_height,
    baseline_for_height,
    capacity_for_width,
    project,
    step_for,
)


def test_single_sample_gets_trailing_baseline_point() -> None:
    points = project([2.0], ProjectionMode.UNIPOLAR, step=10.0, baseline_y=50.0, amplitude_pixels=40.0, sensitivity=1.0)
    assert points.shape == (2, 2)
    assert points[0, 0] == 0.0
    assert points[0, 1] == pytest.approx(50.0 - (2.0 / 3.0) * 40.0)
    assert points[1].tolist() == [10.0, 50.0]


@pytest.mark.parametrize("mode", list(ProjectionMode))
def test_all_zero_history_sits_on_baseline(mode: ProjectionMode) -> None:
    points = project(np.zeros(16), mode, step=2.0, baseline_y=33.0, amplitude_pixels=20.0, sensitivity=5.0)
    assert points.shape == (16, 2)
    assert np.all(points[:, 1] == 33.0)
    np.testing.assert_allclose(points[:, 0], np.arange(16) * 2.0)


def test_unipolar_never_dips_below_baseline() -> None:
    samples = [-2.0, 0.0, 1.5, 3.0, 4.0]
    points = project(samples, ProjectionMode.UNIPOLAR, step=1.0, baseline_y=100.0, amplitude_pixels=60.0, sensitivity=1.0)
    ys = points[:, 1]
    assert np.all(ys <= 100.0)
    assert np.all(ys >= 40.0)
    np.testing.assert_allclose(ys, [100.0, 100.0, 70.0, 40.0, 40.0])


def test_bipolar_maps_symmetric_range() -> None:
    samples = [-4.0, -1.5, 0.0, 1.5, 4.0]
    points = project(samples, ProjectionMode.BIPOLAR, step=1.0, baseline_y=100.0, amplitude_pixels=60.0, sensitivity=1.0)
    np.testing.assert_allclose(points[:, 1], [160.0, 130.0, 100.0, 70.0, 40.0])


def test_sensitivity_scales_before_clamping() -> None:
    low = project([0.5], ProjectionMode.BIPOLAR, 1.0, 0.0, 30.0, sensitivity=1.0)
    high = project([0.5], ProjectionMode.BIPOLAR, 1.0, 0.0, 30.0, sensitivity=4.0)
    saturated = project([0.5], ProjectionMode.BIPOLAR, 1.0, 0.0, 30.0, sensitivity=100.0)
    assert low[0, 1] == pytest.approx(-5.0)
    assert high[0, 1] == pytest.approx(-20.0)
    assert saturated[0, 1] == pytest.approx(-30.0)


def test_projection_is_idempotent() -> None:
    rng = np.random.default_rng(7)
    samples = rng.normal(0.0, 1.0, size=128)
    first = project(samples, ProjectionMode.BIPOLAR, 1.5, 80.0, 60.0, 2.0)
    second = project(samples, ProjectionMode.BIPOLAR, 1.5, 80.0, 60.0, 2.0)
    np.testing.assert_array_equal(first, second)


def test_empty_history_projects_to_nothing() -> None:
    points = project([], ProjectionMode.UNIPOLAR, 1.0, 0.0, 10.0, 1.0)
    assert points.shape == (0, 2)


def test_geometry_helpers() -> None:
    assert capacity_for_width(900) == 600
    assert capacity_for_width(30) == 64
    assert capacity_for_width(0) == 64
    assert step_for(100.0, 101) == pytest.approx(1.0)
    assert step_for(100.0, 1) == 100.0
    assert baseline_for_height(300.0) == 150.0
    assert amplitude_for_height(300.0) == 138.0
    assert amplitude_for_height(10.0) == 8.0


def _histories(capacity: int) -> dict[Channel, np.ndarray]:
    return {
        Channel.MAGNITUDE: np.full(capacity, 0.3),
        Channel.AXIS_X: np.full(capacity, 0.1),
        Channel.AXIS_Y: np.full(capacity, -0.1),
        Channel.AXIS_Z: np.full(capacity, 0.2),
    }


def test_projector_magnitude_frame() -> None:
    frame = WaveformProjector().project_frame(
        _histories(101), DisplayMode.MAGNITUDE, CanvasGeometry(200.0, 100.0), 1.0
    )
    assert frame is not None
    assert frame.channels() == (Channel.MAGNITUDE,)
    assert frame.baseline_y == 50.0
    assert frame.width == 200.0
    points = frame.traces[0][1]
    assert points.shape == (101, 2)
    assert points[-1, 0] == pytest.approx(200.0)
    assert points[0, 1] == pytest.approx(50.0 - 0.1 * 38.0)


def test_projector_axes_frame() -> None:
    frame = WaveformProjector().project_frame(
        _histories(64), DisplayMode.AXES, CanvasGeometry(126.0, 100.0), 1.0
    )
    assert frame is not None
    assert frame.channels() == (Channel.AXIS_X, Channel.AXIS_Y, Channel.AXIS_Z)
    y_trace = dict(frame.traces)[Channel.AXIS_Y]
    assert np.all(y_trace[:, 1] > 50.0)


@pytest.mark.parametrize(
    "geometry",
    [CanvasGeometry(0.0, 100.0), CanvasGeometry(100.0, 0.0), CanvasGeometry(-5.0, -5.0)],
)
def test_projector_skips_degenerate_geometry(geometry: CanvasGeometry) -> None:
    assert WaveformProjector().project_frame(_histories(64), DisplayMode.MAGNITUDE, geometry, 1.0) is None


def test_projector_skips_empty_history() -> None:
    frame = WaveformProjector().project_frame(
        _histories(0), DisplayMode.MAGNITUDE, CanvasGeometry(100.0, 100.0), 1.0
    )
    assert frame is None


def test_projector_logs_projection_time(caplog: pytest.LogCaptureFixture) -> None:
    projector = WaveformProjector()
    with caplog.at_level("DEBUG", logger="seismo.core.projection"):
        projector.project_frame(
            _histories(64), DisplayMode.AXES, CanvasGeometry(126.0, 100.0), 1.0
        )
    assert projector.last_duration_ms >= 0.0
    assert any("Projected 3 trace(s) of 64 samples" in r.getMessage() for r in caplog.records)

from __future__ import annotations

import threading
import time
from typing import Optional

import pytest

from seismo.config.app_config import config_from_mapping
from seismo.core.models import ConditionedSample, RawMotionVector
from seismo.core.session import SeismographSession
from seismo.sensors.accelerometer import AccelerometerService
from seismo.sensors.base import MotionDriver, NullMotionDriver, ReadingCallback
from seismo.sensors.line_stream import LineStreamMotionDriver
from seismo.sensors.synthetic import SyntheticMotionDriver


class ManualDriver(MotionDriver):
    """Driver whose readings are injected by the test on the calling thread."""

    minimum_report_interval_ms = 5

    def __init__(self) -> None:
        super().__init__()
        self.attach_calls = 0
        self.detach_calls = 0
        self.callback: Optional[ReadingCallback] = None

    def attach(self, callback: ReadingCallback) -> None:
        self.attach_calls += 1
        self.callback = callback

    def detach(self, *, timeout: Optional[float] = 1.0) -> None:
        self.detach_calls += 1
        self.callback = None

    def feed(self, reading: RawMotionVector) -> None:
        if self.callback is not None:
            self.callback(reading)


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_report_interval_is_floored_at_20ms() -> None:
    driver = ManualDriver()
    service = AccelerometerService(driver)
    assert service.report_interval_ms == 20
    assert driver.report_interval_ms == 20


def test_configured_interval_cannot_lower_the_floor() -> None:
    config = config_from_mapping({"min_report_interval_ms": 5, "synthetic_rate_hz": 500})
    assert config.min_report_interval_ms == 20

    service = AccelerometerService(
        SyntheticMotionDriver(rate_hz=config.synthetic_rate_hz),
        min_report_interval_ms=5,
    )
    assert service.report_interval_ms == 20


def test_configured_interval_can_raise_the_floor() -> None:
    service = AccelerometerService(ManualDriver(), min_report_interval_ms=50)
    assert service.report_interval_ms == 50


def test_report_interval_keeps_slower_minimum() -> None:
    driver = SyntheticMotionDriver(rate_hz=10.0)
    service = AccelerometerService(driver)
    assert service.report_interval_ms == 100


def test_unavailable_driver() -> None:
    service = AccelerometerService(NullMotionDriver())
    assert service.is_available is False
    assert service.report_interval_ms is None
    service.start()
    assert service.is_running is False

    assert AccelerometerService(None).is_available is False


def test_start_stop_are_idempotent() -> None:
    driver = ManualDriver()
    service = AccelerometerService(driver)

    service.start()
    service.start()
    assert driver.attach_calls == 1
    assert service.is_running

    service.stop()
    service.stop()
    assert driver.detach_calls == 1
    assert not service.is_running


def test_listeners_receive_conditioned_samples() -> None:
    driver = ManualDriver()
    service = AccelerometerService(driver)
    received: list[ConditionedSample] = []
    service.add_listener(received.append)
    service.add_listener(received.append)
    service.start()

    driver.feed(RawMotionVector(0.0, 0.0, 2.0))
    assert received == [ConditionedSample(0.0, 0.0, 1.0, 1.0)]

    service.remove_listener(received.append)
    driver.feed(RawMotionVector(0.0, 0.0, 2.0))
    assert len(received) == 1


def test_failing_listener_does_not_block_others() -> None:
    driver = ManualDriver()
    service = AccelerometerService(driver)
    received: list[ConditionedSample] = []

    def broken(_sample: ConditionedSample) -> None:
        raise RuntimeError("boom")

    service.add_listener(broken)
    service.add_listener(received.append)
    service.start()
    driver.feed(RawMotionVector(0.0, 0.0, 1.0))
    assert len(received) == 1


def test_session_end_to_end_with_manual_driver() -> None:
    driver = ManualDriver()
    service = AccelerometerService(driver)
    session = SeismographSession(service)
    service.add_listener(session.on_sample_arrived)

    driver.feed(RawMotionVector(0.0, 0.0, 3.0))
    assert session.last_magnitude == 0.0

    session.start()
    driver.feed(RawMotionVector(0.0, 0.0, 3.0))
    assert session.last_magnitude == pytest.approx(2.0)

    session.stop()
    assert driver.callback is None


def test_line_stream_driver_delivers_on_background_thread() -> None:
    lines = [
        '{"ax": 0.0, "ay": 0.0, "az": 1.0}',
        "garbage",
        "0.0,0.0,2.0",
    ]
    driver = LineStreamMotionDriver(lines)
    service = AccelerometerService(driver)
    received: list[ConditionedSample] = []
    threads: set[str] = set()

    def listener(sample: ConditionedSample) -> None:
        threads.add(threading.current_thread().name)
        received.append(sample)

    service.add_listener(listener)
    service.start()
    try:
        assert _wait_for(lambda: len(received) == 2)
    finally:
        service.stop()

    assert received[0] == ConditionedSample(0.0, 0.0, 0.0, 0.0)
    assert received[1].magnitude_delta == pytest.approx(1.0)
    assert threading.current_thread().name not in threads


def test_synthetic_driver_streams_until_stopped() -> None:
    driver = SyntheticMotionDriver(rate_hz=200.0, seed=1)
    service = AccelerometerService(driver)
    received: list[ConditionedSample] = []
    service.add_listener(received.append)

    service.start()
    try:
        assert _wait_for(lambda: len(received) >= 3)
    finally:
        service.stop()

    assert not driver.is_attached
    count = len(received)
    time.sleep(0.05)
    assert len(received) == count


def test_synthetic_reading_rests_near_one_g() -> None:
    driver = SyntheticMotionDriver(noise_g=0.0, burst_peak_g=0.0, seed=3)
    reading = driver.reading_at(1.0)
    assert reading.x == pytest.approx(0.0)
    assert reading.y == pytest.approx(0.0)
    assert reading.z == pytest.approx(1.0)

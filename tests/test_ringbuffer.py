from __future__ import annotations

import pytest

from seismo.core.ringbuffer import RollingChannelBuffer


def test_new_buffer_is_zero_filled() -> None:
    buf = RollingChannelBuffer(4)
    assert len(buf) == 4
    assert buf.snapshot().tolist() == [0.0, 0.0, 0.0, 0.0]


def test_push_resize_scenario() -> None:
    buf = RollingChannelBuffer(4)
    buf.push(1.0)
    assert buf.snapshot().tolist() == [0.0, 0.0, 0.0, 1.0]

    buf.resize(2)
    assert buf.snapshot().tolist() == [0.0, 1.0]

    buf.resize(5)
    assert buf.snapshot().tolist() == [0.0, 0.0, 0.0, 0.0, 1.0]


def test_push_at_capacity_drops_oldest() -> None:
    buf = RollingChannelBuffer(3)
    for value in (1.0, 2.0, 3.0, 4.0, 5.0):
        buf.push(value)
        assert len(buf) == 3
    assert buf.snapshot().tolist() == [3.0, 4.0, 5.0]
    assert buf[0] == 3.0
    assert buf[-1] == 5.0
    assert buf.latest() == 5.0
    assert list(buf) == [3.0, 4.0, 5.0]


def test_shrink_keeps_newest_in_order_after_wraparound() -> None:
    buf = RollingChannelBuffer(5)
    for value in range(1, 8):
        buf.push(float(value))
    assert buf.snapshot().tolist() == [3.0, 4.0, 5.0, 6.0, 7.0]

    buf.resize(3)
    assert buf.snapshot().tolist() == [5.0, 6.0, 7.0]

    buf.push(8.0)
    assert buf.snapshot().tolist() == [6.0, 7.0, 8.0]


def test_grow_pads_oldest_end_with_zeros() -> None:
    buf = RollingChannelBuffer(3)
    for value in (1.0, 2.0, 3.0, 4.0):
        buf.push(value)
    buf.resize(6)
    assert buf.snapshot().tolist() == [0.0, 0.0, 0.0, 2.0, 3.0, 4.0]
    assert buf.capacity == 6


def test_resize_to_same_capacity_is_unchanged() -> None:
    buf = RollingChannelBuffer(3)
    buf.push(7.0)
    buf.resize(3)
    assert buf.snapshot().tolist() == [0.0, 0.0, 7.0]


def test_resize_below_one_is_rejected() -> None:
    buf = RollingChannelBuffer(3)
    with pytest.raises(ValueError):
        buf.resize(0)
    assert len(buf) == 3


def test_reset_replaces_contents_with_zeros() -> None:
    buf = RollingChannelBuffer(3)
    buf.push(1.0)
    buf.reset(5)
    assert buf.snapshot().tolist() == [0.0] * 5


def test_zero_capacity_push_is_noop() -> None:
    buf = RollingChannelBuffer(0)
    buf.push(1.0)
    assert len(buf) == 0
    assert buf.snapshot().size == 0
    assert buf.latest() is None


def test_negative_capacity_is_rejected() -> None:
    with pytest.raises(ValueError):
        RollingChannelBuffer(-1)


def test_snapshot_is_a_copy() -> None:
    buf = RollingChannelBuffer(2)
    snap = buf.snapshot()
    snap[0] = 99.0
    assert buf.snapshot().tolist() == [0.0, 0.0]

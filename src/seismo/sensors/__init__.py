"""Accelerometer drivers and the conditioning service in front of them.

Each driver produces :class:`~seismo.core.models.RawMotionVector` readings on
its own thread; :class:`~seismo.sensors.accelerometer.AccelerometerService`
turns them into conditioned samples for the session.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

from ..config.app_config import SOURCE_STDIN, SOURCE_SYNTHETIC, SeismoConfig
from .accelerometer import AccelerometerService
from .base import MotionDriver, NullMotionDriver
from .line_stream import LineStreamMotionDriver, parse_line
from .synthetic import SyntheticMotionDriver


def _file_lines(path: Path) -> Iterator[str]:
    with path.open("r", encoding="utf-8") as fh:
        yield from fh


def create_driver(config: SeismoConfig) -> MotionDriver:
    """
    Build the driver selected by ``config.source``.

    ``synthetic`` and ``stdin`` are keywords, ``none`` simulates a machine
    without a sensor, and anything else is a path to a recorded log that is
    replayed at the report interval. A missing file yields an unavailable
    driver rather than an error.
    """
    source = config.source.strip()
    key = source.lower()
    if key == SOURCE_SYNTHETIC:
        return SyntheticMotionDriver(rate_hz=config.synthetic_rate_hz)
    if key == SOURCE_STDIN:
        return LineStreamMotionDriver(sys.stdin, units=config.units, persistent=True)
    if key in {"none", "null", ""}:
        return NullMotionDriver()

    path = Path(source).expanduser()
    if not path.is_file():
        return NullMotionDriver()
    return LineStreamMotionDriver(
        lambda: _file_lines(path),
        units=config.units,
        paced=True,
        thread_name=f"SeismoReplay({path.name})",
    )


__all__ = [
    "AccelerometerService",
    "LineStreamMotionDriver",
    "MotionDriver",
    "NullMotionDriver",
    "SyntheticMotionDriver",
    "create_driver",
    "parse_line",
]

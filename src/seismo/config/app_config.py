"""Runtime configuration for the seismograph display and sensor feed."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

CONFIG_ENV_VAR = "SEISMO_CONFIG"

SOURCE_SYNTHETIC = "synthetic"
SOURCE_STDIN = "stdin"
UNITS_G = "g"
UNITS_MS2 = "m/s2"

# Sensor polling is never faster than this, whatever the config says.
MIN_REPORT_INTERVAL_MS = 20


def _finite(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return number


@dataclass(slots=True)
class SeismoConfig:
    """
    Tuning knobs for buffering, redraw cadence, and the sensor source.

    The defaults reproduce a laptop accelerometer at ~50 Hz drawn at roughly
    1.5 pixels per sample.
    """

    initial_capacity: int = 256
    min_capacity: int = 64
    pixels_per_sample: float = 1.5
    min_report_interval_ms: int = MIN_REPORT_INTERVAL_MS

    refresh_hz: float = 60.0
    inbox_size: int = 4096

    sensitivity: float = 1.0
    sensitivity_min: float = 0.1
    sensitivity_max: float = 10.0
    axis_mode: bool = False

    source: str = SOURCE_SYNTHETIC
    units: str = UNITS_G
    synthetic_rate_hz: float = 50.0

    def sanitized(self) -> SeismoConfig:
        """Return a copy with derived limits applied."""
        sens_min = max(1e-3, _finite(self.sensitivity_min, 0.1))
        sens_max = max(sens_min, _finite(self.sensitivity_max, 10.0))
        sensitivity = min(sens_max, max(sens_min, _finite(self.sensitivity, 1.0)))
        min_capacity = max(2, int(self.min_capacity))

        units = str(self.units or UNITS_G).strip().lower().replace("²", "2")
        if units in {"ms2", "m/s^2", "mps2"}:
            units = UNITS_MS2
        if units not in {UNITS_G, UNITS_MS2}:
            raise ValueError(f"Unknown units {self.units!r}; expected 'g' or 'm/s2'")

        return replace(
            self,
            initial_capacity=max(min_capacity, int(self.initial_capacity)),
            min_capacity=min_capacity,
            pixels_per_sample=max(0.1, _finite(self.pixels_per_sample, 1.5)),
            min_report_interval_ms=max(MIN_REPORT_INTERVAL_MS, int(self.min_report_interval_ms)),
            refresh_hz=min(240.0, max(1.0, _finite(self.refresh_hz, 60.0))),
            inbox_size=max(1, int(self.inbox_size)),
            sensitivity=sensitivity,
            sensitivity_min=sens_min,
            sensitivity_max=sens_max,
            axis_mode=bool(self.axis_mode),
            source=str(self.source or SOURCE_SYNTHETIC).strip(),
            units=units,
            synthetic_rate_hz=max(1.0, _finite(self.synthetic_rate_hz, 50.0)),
        )

    def refresh_interval_ms(self) -> int:
        """Return the redraw timer interval that corresponds to ``refresh_hz``."""
        return max(1, int(round(1000.0 / self.refresh_hz)))


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`SeismoConfig`."""
    return {f.name for f in fields(SeismoConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``seismograph`` block into the root mapping."""
    if "seismograph" in data and isinstance(data["seismograph"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "seismograph":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> SeismoConfig:
    """Build :class:`SeismoConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return SeismoConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return SeismoConfig(**payload).sanitized()


def default_config_path() -> Path | None:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return None


def load_config(path: str | Path | None = None) -> SeismoConfig:
    """
    Load configuration from ``path`` (or ``$SEISMO_CONFIG`` when omitted).

    Missing files fall back to default :class:`SeismoConfig`.
    """
    if path is None:
        path = default_config_path()
    if path is None:
        return SeismoConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return SeismoConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = [
    "CONFIG_ENV_VAR",
    "MIN_REPORT_INTERVAL_MS",
    "SOURCE_STDIN",
    "SOURCE_SYNTHETIC",
    "SeismoConfig",
    "UNITS_G",
    "UNITS_MS2",
    "config_from_mapping",
    "load_config",
]

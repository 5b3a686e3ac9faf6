"""PyQtGraph render surface for projected waveform frames."""

from __future__ import annotations

from typing import Dict, Optional

import pyqtgraph as pg
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QVBoxLayout, QWidget

from ..core.models import Channel, WaveformFrame

TRACE_COLORS: Dict[Channel, str] = {
    Channel.MAGNITUDE: "#4fc3f7",
    Channel.AXIS_X: "#ef5350",
    Channel.AXIS_Y: "#66bb6a",
    Channel.AXIS_Z: "#42a5f5",
}


class WaveformView(QWidget):
    """Draws frames whose coordinates are already in canvas pixels.

    The view box is pinned to ``[0, width] x [0, height]`` with the y axis
    pointing down, so a point's coordinates map one-to-one onto the
    widget. ``geometry_changed`` reports the canvas size whenever it
    changes.
    """

    geometry_changed = Signal(float, float)

    def __init__(self, parent: Optional[QWidget] = None, line_width: float = 1.5) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._glw = pg.GraphicsLayoutWidget(self)
        self._glw.ci.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._glw)

        self._view = self._glw.addViewBox(row=0, col=0)
        self._view.setMenuEnabled(False)
        self._view.setMouseEnabled(x=False, y=False)
        self._view.enableAutoRange(x=False, y=False)
        self._view.invertY(True)

        self._baseline = pg.InfiniteLine(
            pos=0.0,
            angle=0,
            movable=False,
            pen=pg.mkPen("#888888", width=1, style=Qt.DashLine),
        )
        self._view.addItem(self._baseline)

        self._curves: Dict[Channel, pg.PlotCurveItem] = {}
        for channel, color in TRACE_COLORS.items():
            curve = pg.PlotCurveItem(pen=pg.mkPen(color, width=line_width))
            curve.setVisible(False)
            self._view.addItem(curve)
            self._curves[channel] = curve

        self._size = (0.0, 0.0)
        self._view.sigResized.connect(self._on_view_resized)

    def canvas_size(self) -> tuple[float, float]:
        return self._size

    def draw_frame(self, frame: WaveformFrame) -> None:
        shown = set()
        for channel, points in frame.traces:
            curve = self._curves[channel]
            curve.setData(points[:, 0], points[:, 1])
            curve.setVisible(True)
            shown.add(channel)
        for channel, curve in self._curves.items():
            if channel not in shown:
                curve.setVisible(False)
        self._baseline.setPos(frame.baseline_y)

    def _on_view_resized(self, *_args: object) -> None:
        rect = self._view.boundingRect()
        width = float(rect.width())
        height = float(rect.height())
        if (width, height) == self._size:
            return
        self._size = (width, height)
        if width > 0 and height > 0:
            self._view.setRange(xRange=(0.0, width), yRange=(0.0, height), padding=0.0)
        self.geometry_changed.emit(width, height)

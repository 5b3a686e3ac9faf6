"""Main window for the seismograph GUI."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QTimer, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..config.app_config import SeismoConfig
from ..core.models import DisplayMode
from ..core.session import SeismographSession, format_magnitude
from ..sensors.accelerometer import AccelerometerService
from .sample_bridge import SampleBridge
from .waveform_view import WaveformView

# Slider positions per unit of sensitivity gain.
SLIDER_STEPS_PER_UNIT = 10


def slider_positions(config: SeismoConfig) -> tuple[int, int, int]:
    """Return the slider (minimum, maximum, value) for the configured gain range."""
    # Position 0 would mean zero gain.
    minimum = max(1, int(round(config.sensitivity_min * SLIDER_STEPS_PER_UNIT)))
    maximum = max(minimum, int(round(config.sensitivity_max * SLIDER_STEPS_PER_UNIT)))
    value = min(maximum, max(minimum, int(round(config.sensitivity * SLIDER_STEPS_PER_UNIT))))
    return minimum, maximum, value


STATUS_READY = "Accelerometer connected - ready to start."
STATUS_NO_SENSOR = "No sensor detected. Check device permissions or hardware."
STATUS_CANNOT_START = "Cannot start - no accelerometer available."
STATUS_STREAMING = "Streaming live accelerometer data..."
STATUS_PAUSED = "Paused. Click Start to resume capture."


class MainWindow(QMainWindow):
    """Seismograph window: waveform, start/stop, sensitivity, and axis toggle."""

    def __init__(
        self,
        service: AccelerometerService,
        config: SeismoConfig | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("SeismoPi")
        self.resize(900, 480)

        self._config = (config or SeismoConfig()).sanitized()
        self._service = service
        self._logger = logging.getLogger(__name__)

        self._build_ui()

        mode = DisplayMode.AXES if self._config.axis_mode else DisplayMode.MAGNITUDE
        self.session = SeismographSession(
            service,
            renderer=self.waveform_view,
            status=self.magnitude_label.setText,
            initial_capacity=self._config.initial_capacity,
            min_capacity=self._config.min_capacity,
            pixels_per_sample=self._config.pixels_per_sample,
            sensitivity=self._config.sensitivity,
            mode=mode,
        )
        self.bridge = SampleBridge(
            self.session.on_samples_arrived,
            interval_ms=self._config.refresh_interval_ms(),
            max_pending=self._config.inbox_size,
            parent=self,
        )
        self._service.add_listener(self.bridge.offer)

        self.waveform_view.geometry_changed.connect(self._on_geometry_changed)
        self.start_button.clicked.connect(self.on_start_clicked)
        self.stop_button.clicked.connect(self.on_stop_clicked)
        self.sensitivity_slider.valueChanged.connect(self._on_sensitivity_changed)
        self.axis_toggle.toggled.connect(self._on_axis_toggled)

        self._apply_initial_state()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        self.waveform_view = WaveformView(self)

        self.start_button = QPushButton(self.tr("Start"))
        self.stop_button = QPushButton(self.tr("Stop"))

        self.sensitivity_slider = QSlider(Qt.Horizontal)
        minimum, maximum, value = slider_positions(self._config)
        self.sensitivity_slider.setRange(minimum, maximum)
        self.sensitivity_slider.setValue(value)
        self.sensitivity_label = QLabel()
        self._update_sensitivity_label(self._config.sensitivity)

        self.axis_toggle = QCheckBox(self.tr("Show X/Y/Z axes"))
        self.axis_toggle.setChecked(self._config.axis_mode)

        self.status_label = QLabel()
        self.magnitude_label = QLabel(format_magnitude(0.0))

        controls = QHBoxLayout()
        controls.addWidget(self.start_button)
        controls.addWidget(self.stop_button)
        controls.addSpacing(16)
        controls.addWidget(QLabel(self.tr("Sensitivity")))
        controls.addWidget(self.sensitivity_slider, stretch=1)
        controls.addWidget(self.sensitivity_label)
        controls.addSpacing(16)
        controls.addWidget(self.axis_toggle)

        readouts = QHBoxLayout()
        readouts.addWidget(self.status_label, stretch=1)
        readouts.addWidget(self.magnitude_label)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.addLayout(controls)
        layout.addWidget(self.waveform_view, stretch=1)
        layout.addLayout(readouts)
        self.setCentralWidget(container)

    def _apply_initial_state(self) -> None:
        available = self.session.sensor_available
        self.stop_button.setEnabled(False)
        self.start_button.setEnabled(available)
        self.axis_toggle.setEnabled(available)
        self.status_label.setText(self.tr(STATUS_READY if available else STATUS_NO_SENSOR))
        # Geometry is only meaningful once the layout has run.
        QTimer.singleShot(0, self._sync_geometry)

    def _sync_geometry(self) -> None:
        width, height = self.waveform_view.canvas_size()
        self.session.on_geometry_changed(width, height)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    @Slot()
    def on_start_clicked(self) -> None:
        if self.session.is_running:
            return
        if not self.session.sensor_available:
            self.status_label.setText(self.tr(STATUS_CANNOT_START))
            return
        self.bridge.clear()
        if not self.session.start():
            return
        self.bridge.start()
        self.start_button.setEnabled(False)
        self.stop_button.setEnabled(True)
        self.status_label.setText(self.tr(STATUS_STREAMING))

    @Slot()
    def on_stop_clicked(self) -> None:
        if not self.session.stop():
            return
        self.bridge.stop()
        self.start_button.setEnabled(self.session.sensor_available)
        self.stop_button.setEnabled(False)
        self.status_label.setText(self.tr(STATUS_PAUSED))

    @Slot(int)
    def _on_sensitivity_changed(self, position: int) -> None:
        gain = position / SLIDER_STEPS_PER_UNIT
        self._update_sensitivity_label(gain)
        self.session.set_sensitivity(gain)

    @Slot(bool)
    def _on_axis_toggled(self, checked: bool) -> None:
        self.session.set_mode(DisplayMode.AXES if checked else DisplayMode.MAGNITUDE)

    @Slot(float, float)
    def _on_geometry_changed(self, width: float, height: float) -> None:
        self.session.on_geometry_changed(width, height)

    def _update_sensitivity_label(self, gain: float) -> None:
        self.sensitivity_label.setText(f"{gain:.1f}x")

    def closeEvent(self, event: QCloseEvent) -> None:
        try:
            self.bridge.stop()
            self.session.close()
            self._service.remove_listener(self.bridge.offer)
        except Exception:  # pragma: no cover - best-effort shutdown
            self._logger.exception("Failed to detach from the sensor on close")
        super().closeEvent(event)

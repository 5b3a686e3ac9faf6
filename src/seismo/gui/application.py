"""Qt application entry point for the seismograph GUI.

This module wires up argument parsing and logging, loads the YAML
configuration, picks the accelerometer driver, builds the
:class:`~seismo.gui.main_window.MainWindow`, and starts the Qt event loop.
All GUI launches (``python main.py``, ``python -m seismo.gui.application``
or the ``seismopi`` console script) flow through ``main()`` here.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Tuple

import pyqtgraph as pg
from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication, QMainWindow

from ..config.app_config import SeismoConfig, load_config
from ..sensors import AccelerometerService, create_driver
from .main_window import MainWindow

logger = logging.getLogger(__name__)


def configure_pyqtgraph() -> None:
    """Global pyqtgraph options for a dark, antialiased live display."""
    pg.setConfigOptions(antialias=True, background="#121212", foreground="#dddddd")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SeismoPi live accelerometer seismograph")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML configuration file (default: $SEISMO_CONFIG if set)",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="Sensor source: 'synthetic', 'stdin', 'none', or a log file to replay",
    )
    parser.add_argument(
        "--units",
        choices=("g", "m/s2"),
        default=None,
        help="Units of values read from stdin or a log file (default: g)",
    )
    parser.add_argument(
        "--sensitivity",
        type=float,
        default=None,
        help="Initial sensitivity gain (default: 1.0)",
    )
    parser.add_argument(
        "--axes",
        action="store_true",
        help="Start in X/Y/Z axis mode instead of the magnitude trace",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Logging verbosity (default: INFO)",
    )
    return parser


def _parse_cli_args(
    argv: list[str],
) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def config_from_args(args: argparse.Namespace) -> SeismoConfig:
    """Load the config file and apply command-line overrides on top."""
    config = load_config(args.config)
    overrides = {}
    if args.source is not None:
        overrides["source"] = args.source
    if args.units is not None:
        overrides["units"] = args.units
    if args.sensitivity is not None:
        overrides["sensitivity"] = args.sensitivity
    if args.axes:
        overrides["axis_mode"] = True
    return dataclasses.replace(config, **overrides).sanitized()


def create_app(
    argv: list[str] | None = None,
    *,
    config: SeismoConfig | None = None,
) -> Tuple[QApplication, QMainWindow]:
    """
    Create the QApplication and the seismograph window.

    Returns
    -------
    app:
        The QApplication instance (owned by caller).
    window:
        The main window, wired to an accelerometer service.
    """
    qt_args = argv if argv is not None else sys.argv
    config = (config or SeismoConfig()).sanitized()
    configure_pyqtgraph()
    app = QApplication.instance() or QApplication(qt_args)

    # Suppress noisy QObject::connect warnings from QStyleHints and similar internals
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")

    service = AccelerometerService(
        create_driver(config),
        min_report_interval_ms=config.min_report_interval_ms,
    )
    window = MainWindow(service, config=config)
    app.aboutToQuit.connect(service.close)
    return app, window


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    config = config_from_args(args)
    logger.info("Starting SeismoPi (source=%s, units=%s)", config.source, config.units)

    app, win = create_app(qt_argv, config=config)
    win.show()
    raise SystemExit(app.exec())


if __name__ == "__main__":
    main()

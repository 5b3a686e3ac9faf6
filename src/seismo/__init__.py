"""SeismoPi: a live accelerometer seismograph for the desktop."""

__version__ = "0.1.0"

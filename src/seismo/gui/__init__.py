"""Desktop GUI implementation built with PySide6/Qt and pyqtgraph.

:mod:`main_window` hosts the controls and readouts, :mod:`waveform_view` is
the pyqtgraph render surface, and :mod:`sample_bridge` moves samples from
sensor threads onto the Qt event loop. All signal processing is delegated to
:mod:`seismo.core`.
"""

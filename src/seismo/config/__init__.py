"""Configuration objects and helpers for the seismograph.

Settings live in an optional YAML file (``--config`` or ``$SEISMO_CONFIG``)
and are loaded into the typed :class:`~seismo.config.app_config.SeismoConfig`
dataclass used by the GUI, the sensor drivers, and the session.
"""

from .app_config import SeismoConfig, config_from_mapping, load_config

__all__ = ["SeismoConfig", "config_from_mapping", "load_config"]

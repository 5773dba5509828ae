"""Service-level plugin contracts for network_api."""

from .datasource_plugin import DataSourcePlugin
from .visualizer_plugin import VisualizerPlugin

__all__ = ["DataSourcePlugin", "VisualizerPlugin"]

"""Public API exports for network_api plugin contracts and analysis."""

from .model import Node, Edge, Graph
from .services import DataSourcePlugin, VisualizerPlugin

__all__ = [
    "Node",
    "Edge",
    "Graph",
    "DataSourcePlugin",
    "VisualizerPlugin",
]

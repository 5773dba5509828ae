import logging
from importlib.metadata import entry_points
from typing import Dict, Optional, Type

from api.network_api.services import DataSourcePlugin, VisualizerPlugin

LOGGER = logging.getLogger(__name__)

DATASOURCE_GROUP = "network_platform.datasource"
VISUALIZER_GROUP = "network_platform.visualizer"


class PluginRegistry:
    """Process-wide table of reader and renderer plugins.

    Installed plugins are discovered once through entry points; tests and
    embedding code can add more with ``register_datasource`` and
    ``register_visualizer``.
    """

    _instance = None
    _datasources: Dict[str, Type[DataSourcePlugin]]
    _visualizers: Dict[str, Type[VisualizerPlugin]]

    def __new__(cls):
        if cls._instance is None:
            registry = super().__new__(cls)
            registry._datasources = registry._discover(DATASOURCE_GROUP)
            registry._visualizers = registry._discover(VISUALIZER_GROUP)
            cls._instance = registry
        return cls._instance

    @staticmethod
    def _discover(group: str) -> dict:
        found = {ep.name: ep.load() for ep in entry_points().select(group=group)}
        LOGGER.debug("Plugins in '%s': %s", group, ", ".join(found) or "none")
        return found

    def register_datasource(self, name: str, plugin_cls: Type[DataSourcePlugin]) -> None:
        self._datasources[name] = plugin_cls

    def register_visualizer(self, name: str, plugin_cls: Type[VisualizerPlugin]) -> None:
        self._visualizers[name] = plugin_cls

    def get_datasource(self, name: str) -> Optional[Type[DataSourcePlugin]]:
        return self._datasources.get(name)

    def get_visualizer(self, name: str) -> Optional[Type[VisualizerPlugin]]:
        return self._visualizers.get(name)

    def datasource_for_extension(self, extension: str) -> Optional[str]:
        """Name of the first registered reader for ``extension`` (e.g. ``".gml"``)."""
        extension = extension.lower()
        for name, plugin_cls in self._datasources.items():
            if extension in plugin_cls().file_extensions:
                return name
        return None

    def list_datasources(self) -> list:
        return sorted(self._datasources)

    def list_visualizers(self) -> list:
        return sorted(self._visualizers)

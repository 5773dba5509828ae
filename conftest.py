import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "explorer_site.settings")


def pytest_configure():
    django.setup()


@pytest.fixture(autouse=True)
def registered_plugins():
    """Make the bundled plugins available even without installed entry points."""
    from core.network_platform.registry import PluginRegistry
    from datasource_gml.datasource_gml_plugin.plugin import GmlDatasourcePlugin
    from visualizer_force.visualizer_force_plugin.plugin import ForceVisualizer

    registry = PluginRegistry()
    registry.register_datasource("gml", GmlDatasourcePlugin)
    registry.register_visualizer("force", ForceVisualizer)
    return registry


PATH_GRAPH = """
node [ id 1 ]
node [ id 2 ]
node [ id 3 ]
edge [ source 1 target 2 ]
edge [ source 2 target 3 ]
"""


@pytest.fixture
def path_graph_text():
    return PATH_GRAPH


@pytest.fixture
def power_law_degrees():
    """Degrees whose frequencies follow round(1000 * k^-2)."""
    degrees = []
    for k in (1, 2, 3, 4, 5, 6, 8, 10):
        degrees.extend([k] * round(1000 * k ** -2))
    return degrees

import logging
from typing import Optional

from api.network_api.analysis import analyze, annotate, summarize
from api.network_api.model import Graph
from api.network_api.services import DataSourcePlugin, VisualizerPlugin
from .context import PipelineContext
from .registry import PluginRegistry
from .workspace import Workspace

LOGGER = logging.getLogger(__name__)


def run_pipeline(graph: Graph, source_name: str = "", datasource: str = "") -> PipelineContext:
    """Annotate, summarize and analyze one graph. Pure apart from node degrees."""
    context = PipelineContext(graph=graph, source_name=source_name, datasource=datasource)
    context.annotation = annotate(graph)
    context.metrics = summarize(graph, context.annotation.degree_of)
    context.distribution = analyze(context.annotation.degrees())
    LOGGER.info(
        "Analysed '%s': %d nodes, %d edges, exponent=%s",
        source_name or "<text>", context.metrics.node_count,
        context.metrics.edge_count, context.distribution.exponent,
    )
    return context


class GraphEngine:
    """
    High-level orchestration layer.

    Responsibilities:
    - Plugin execution
    - One full pipeline pass per selection
    - Delegation to Workspace
    """

    def __init__(self, registry: Optional[PluginRegistry] = None):
        self.registry = registry or PluginRegistry()
        self.workspace = Workspace()

    # ==========================================================
    # MAIN ORCHESTRATION
    # ==========================================================

    def load(self, datasource_name: str, source, source_name: str = "", **options) -> PipelineContext:
        datasource_cls = self.registry.get_datasource(datasource_name)
        if not datasource_cls:
            raise ValueError(f"Datasource '{datasource_name}' not found.")

        datasource: DataSourcePlugin = datasource_cls()
        graph = datasource.load_graph(source, **options)

        context = run_pipeline(graph, source_name=source_name or str(source or ""), datasource=datasource_name)
        # A new selection discards the previous analysis
        self.workspace.set_context(context)
        return context

    def render(self, visualizer_name: str, context: Optional[PipelineContext] = None, **options) -> str:
        visualizer_cls = self.registry.get_visualizer(visualizer_name)
        if not visualizer_cls:
            raise ValueError(f"Visualizer '{visualizer_name}' not found.")

        context = context or self.workspace.get_context()
        if context is None:
            raise ValueError("No network has been loaded.")

        visualizer: VisualizerPlugin = visualizer_cls()
        return visualizer.render(context, **options)

    def process(
        self,
        datasource_name: str,
        visualizer_name: str,
        source,
        **options,
    ) -> str:
        if not self.registry.get_visualizer(visualizer_name):
            raise ValueError(f"Visualizer '{visualizer_name}' not found.")

        context = self.load(datasource_name, source, **options)
        return self.render(visualizer_name, context)

    # ==========================================================
    # WORKSPACE DELEGATION API
    # ==========================================================

    def get_current_context(self) -> Optional[PipelineContext]:
        return self.workspace.get_context()

    def find_node(self, node_id: str):
        return self.workspace.find_node_by_id(node_id)

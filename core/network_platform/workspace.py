from typing import Callable, List, Optional, Set

from api.network_api.model import Edge, Graph, Node
from .context import PipelineContext


class Workspace:
    """
    Holds the network currently being explored.

    Responsibilities:
    - Own the current pipeline context; a new selection replaces it
    - Answer node/edge lookups for the web layer
    - Provide neighbor lookups for click highlighting
    """

    def __init__(self):
        self._context: Optional[PipelineContext] = None

    # ==========================================================
    # STATE MANAGEMENT
    # ==========================================================

    def set_context(self, context: PipelineContext) -> None:
        self._context = context

    def get_context(self) -> Optional[PipelineContext]:
        return self._context

    def get_graph(self) -> Optional[Graph]:
        return self._context.graph if self._context else None

    def has_graph(self) -> bool:
        return self._context is not None

    def clear(self) -> None:
        self._context = None

    # ==========================================================
    # NODE OPERATIONS
    # ==========================================================

    def list_nodes(self) -> List[Node]:
        graph = self.get_graph()
        return graph.nodes if graph else []

    def find_node_by_id(self, node_id: str) -> Optional[Node]:
        graph = self.get_graph()
        return graph.get_node(node_id) if graph else None

    def filter_nodes(self, predicate: Callable[[Node], bool]) -> List[Node]:
        return [node for node in self.list_nodes() if predicate(node)]

    def knows_id(self, node_id: str) -> bool:
        """True for declared nodes and for ids only seen as edge endpoints."""
        if self._context is None or self._context.annotation is None:
            return False
        return node_id in self._context.annotation.degree_of

    # ==========================================================
    # EDGE OPERATIONS
    # ==========================================================

    def list_edges(self) -> List[Edge]:
        graph = self.get_graph()
        return graph.edges if graph else []

    def filter_edges(self, predicate: Callable[[Edge], bool]) -> List[Edge]:
        return [edge for edge in self.list_edges() if predicate(edge)]

    # -----------------
    # HIGHLIGHTING
    # -----------------
    def neighbors(self, node_id: str) -> Set[str]:
        """Ids adjacent to ``node_id``, including the node itself."""
        if not self.knows_id(node_id):
            return set()
        return self._context.annotation.neighbors(node_id)

    def incident_edges(self, node_id: str) -> List[Edge]:
        return self.filter_edges(lambda e: node_id in (e.source, e.target))

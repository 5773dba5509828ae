from typing import Dict, List, Optional
from .node import Node
from .edge import Edge


class Graph:
    def __init__(self, directed: bool = False):
        self.directed = directed
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self._index: Dict[str, Node] = {}
        self._edge_counter = 0

    # -----------------
    # NODE OPERATIONS
    # -----------------

    def add_node(self, node: Node):
        if not node.node_id:
            raise ValueError("Node id is required.")

        if node.node_id in self._index:
            raise ValueError(f"Node '{node.node_id}' already exists.")

        self._index[node.node_id] = node
        self.nodes.append(node)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._index.get(node_id)

    # -----------------
    # EDGE OPERATIONS
    # -----------------

    def add_edge(self, edge: Edge):
        # Endpoints are not checked against the node list: markup files may
        # reference ids they never declare, and the degree builder decides
        # what to do with those.
        if not edge.source or not edge.target:
            raise ValueError("Edge source and target are required.")

        if not edge.edge_id:
            self._edge_counter += 1
            edge.edge_id = str(self._edge_counter)

        self.edges.append(edge)

    def dangling_ids(self) -> List[str]:
        """Return endpoint ids that no declared node carries, in first-seen order."""
        seen: Dict[str, None] = {}
        for edge in self.edges:
            for endpoint in edge.endpoints():
                if endpoint not in self._index:
                    seen.setdefault(endpoint)
        return list(seen)

    def structure(self) -> tuple:
        """Node order and edge endpoint order, for structural comparison."""
        return (
            tuple(n.node_id for n in self.nodes),
            tuple(e.endpoints() for e in self.edges),
        )

    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

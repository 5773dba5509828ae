"""Degree and adjacency builder.

Edges are undirected here whatever the markup declares: each endpoint of an
edge gains one degree, so a self-loop adds two to its node.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from api.network_api.errors import DANGLING_EDGE_REFERENCE
from api.network_api.model import Graph

LOGGER = logging.getLogger(__name__)


@dataclass
class Annotation:
    degree_of: Dict[str, int] = field(default_factory=dict)
    adjacency: Set[Tuple[str, str]] = field(default_factory=set)
    implicit_ids: List[str] = field(default_factory=list)
    _neighbors: Dict[str, Set[str]] = field(default_factory=dict, repr=False)

    def is_adjacent(self, a: str, b: str) -> bool:
        # Every id counts as adjacent to itself for highlighting
        return a == b or (a, b) in self.adjacency

    def neighbors(self, node_id: str) -> Set[str]:
        """Ids directly connected to ``node_id``, the id itself included."""
        return {node_id} | self._neighbors.get(node_id, set())

    def degrees(self) -> List[int]:
        return list(self.degree_of.values())

    def to_dict(self) -> dict:
        return {
            "degree_of": dict(self.degree_of),
            "implicit_ids": list(self.implicit_ids),
        }


def annotate(graph: Graph) -> Annotation:
    annotation = Annotation()
    degree_of = annotation.degree_of

    for node in graph.nodes:
        degree_of[node.node_id] = 0

    for edge in graph.edges:
        for endpoint in edge.endpoints():
            if endpoint not in degree_of:
                LOGGER.warning(
                    "%s: edge %s references undeclared node '%s'; tracking it from degree 0.",
                    DANGLING_EDGE_REFERENCE, edge.edge_id, endpoint,
                )
                degree_of[endpoint] = 0
                annotation.implicit_ids.append(endpoint)
            degree_of[endpoint] += 1

        annotation.adjacency.add((edge.source, edge.target))
        annotation.adjacency.add((edge.target, edge.source))
        annotation._neighbors.setdefault(edge.source, set()).add(edge.target)
        annotation._neighbors.setdefault(edge.target, set()).add(edge.source)

    for node in graph.nodes:
        node.degree = degree_of[node.node_id]

    return annotation

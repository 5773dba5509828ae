"""Per-run pipeline state, passed explicitly from stage to stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from api.network_api.analysis import Annotation, DegreeDistribution, Metrics
from api.network_api.model import Graph


@dataclass
class PipelineContext:
    graph: Graph
    source_name: str = ""
    datasource: str = ""
    annotation: Optional[Annotation] = None
    metrics: Optional[Metrics] = None
    distribution: Optional[DegreeDistribution] = None

    @property
    def analysed(self) -> bool:
        return self.distribution is not None

    def node_payload(self) -> list:
        nodes = [node.to_dict() for node in self.graph.nodes]
        if self.annotation is None:
            return nodes
        # Implicit ids come from dangling edge endpoints; the layout still
        # needs a node for every edge endpoint.
        for node_id in self.annotation.implicit_ids:
            nodes.append({
                "id": node_id,
                "label": node_id,
                "degree": self.annotation.degree_of[node_id],
                "attributes": {},
                "implicit": True,
            })
        return nodes

    def to_dict(self) -> dict:
        return {
            "source": self.source_name,
            "datasource": self.datasource,
            "graph": {
                "directed": self.graph.directed,
                "nodes": self.node_payload(),
                "edges": [edge.to_dict() for edge in self.graph.edges],
            },
            "implicit_ids": list(self.annotation.implicit_ids) if self.annotation else [],
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "distribution": self.distribution.to_dict() if self.distribution else None,
        }

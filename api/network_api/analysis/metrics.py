"""Summary statistics for a loaded network."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from api.network_api.errors import DegenerateGraphError
from api.network_api.model import Graph

UNDEFINED = "undefined"

# Display precision per metric; anything absent is shown as-is
DISPLAY_DECIMALS = {
    "average_degree": 2,
    "density": 4,
}

METRIC_LABELS = (
    ("node_count", "Nodes"),
    ("edge_count", "Edges"),
    ("average_degree", "Average Degree"),
    ("density", "Density"),
    ("max_degree", "Max Degree"),
    ("min_degree", "Min Degree"),
)


def average_degree(degrees: Sequence[int]) -> float:
    if not degrees:
        raise DegenerateGraphError("Average degree is undefined for a graph with no nodes.")
    return sum(degrees) / len(degrees)


def density(node_count: int, edge_count: int) -> float:
    # Simple-graph convention; multigraphs can exceed 1
    if node_count <= 1:
        raise DegenerateGraphError(
            f"Density is undefined for a graph with {node_count} node(s).",
            node_count=node_count,
        )
    return (2 * edge_count) / (node_count * (node_count - 1))


def degree_extremes(degrees: Sequence[int]) -> Tuple[int, int]:
    if not degrees:
        raise DegenerateGraphError("Degree extremes are undefined for a graph with no nodes.")
    return max(degrees), min(degrees)


def format_metric(name: str, value) -> str:
    if value is None:
        return UNDEFINED
    decimals = DISPLAY_DECIMALS.get(name)
    if decimals is not None:
        return f"{value:.{decimals}f}"
    return str(value)


@dataclass
class Metrics:
    node_count: int
    edge_count: int
    average_degree: Optional[float] = None
    density: Optional[float] = None
    max_degree: Optional[int] = None
    min_degree: Optional[int] = None
    # metric name -> "<error code>: <reason>"
    undefined: Dict[str, str] = field(default_factory=dict)

    def is_defined(self, name: str) -> bool:
        return name not in self.undefined

    def display(self, name: str) -> str:
        return format_metric(name, getattr(self, name))

    def rows(self) -> List[Tuple[str, str]]:
        return [(label, self.display(name)) for name, label in METRIC_LABELS]

    def to_dict(self) -> dict:
        values = {name: getattr(self, name) for name, _ in METRIC_LABELS}
        return {
            "values": values,
            "display": {name: self.display(name) for name, _ in METRIC_LABELS},
            "rows": [{"metric": label, "value": value} for label, value in self.rows()],
            "undefined": dict(self.undefined),
        }


def summarize(graph: Graph, degree_of: Dict[str, int]) -> Metrics:
    degrees = list(degree_of.values())
    node_count = len(graph.nodes)
    metrics = Metrics(node_count=node_count, edge_count=len(graph.edges))

    def record(names, exc):
        for name in names:
            metrics.undefined[name] = f"{exc.code}: {exc}"

    # N counts declared nodes only; implicit ids from dangling edges still
    # carry degree, so an empty node list with dangling edges stays degenerate.
    if node_count == 0:
        degrees = []

    try:
        metrics.average_degree = average_degree(degrees)
    except DegenerateGraphError as exc:
        record(["average_degree"], exc)

    try:
        metrics.density = density(metrics.node_count, metrics.edge_count)
    except DegenerateGraphError as exc:
        record(["density"], exc)

    try:
        metrics.max_degree, metrics.min_degree = degree_extremes(degrees)
    except DegenerateGraphError as exc:
        record(["max_degree", "min_degree"], exc)

    return metrics

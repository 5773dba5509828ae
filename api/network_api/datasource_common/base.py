from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import Any

from api.network_api.errors import RetrievalFailure
from api.network_api.model import Graph, Node, Edge
from api.network_api.services.datasource_plugin import DataSourcePlugin

LOGGER = logging.getLogger(__name__)

RESERVED_NODE_KEYS = {"id", "label", "name"}
RESERVED_EDGE_KEYS = {"id", "source", "target", "weight"}


def infer_type(value: Any) -> Any:
    # Markup values arrive as strings; numbers are recovered where possible
    if not isinstance(value, str):
        return value

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def infer_attributes(raw_dict: dict) -> dict:
    return {key: infer_type(value) for key, value in raw_dict.items()}


class BaseDatasourcePlugin(DataSourcePlugin):
    # Base class for defining the flow of creating a Graph object
    # The flow is always to first parse the source (this is different based on plugin)
    # Secondly, we build the nodes and the edges (which is the same for all)

    def load_graph(self, source: Any, **options: Any) -> Graph:
        text = options.pop("text", None)
        if text is None:
            text = self._read_source(source, options)

        raw_data = self._parse_source(text, **options)

        graph = Graph(directed=bool(raw_data.get("directed", False)))
        self._build_nodes(raw_data, graph)
        self._build_edges(raw_data, graph)
        return graph

    @staticmethod
    def _resolve_path(source: Any, options: dict[str, Any]) -> str:
        if isinstance(source, (str, Path)) and str(source).strip():
            return str(source)
        fp = options.get("file_path")
        if isinstance(fp, str) and fp.strip():
            return fp
        raise RetrievalFailure("Missing file path. Provide it as 'source' or as option 'file_path'.")

    def _read_source(self, source: Any, options: dict[str, Any]) -> str:
        path = self._resolve_path(source, options)
        encoding = options.get("encoding", "utf-8")
        try:
            with open(path, "r", encoding=encoding, errors="replace") as f:
                return f.read()
        except OSError as exc:
            raise RetrievalFailure(f"Unable to read '{path}': {exc}", path=path) from exc

    @abstractmethod
    def _parse_source(self, text: str, **options: Any) -> dict:
        # Return {"nodes": [...], "edges": [...], "directed": bool}
        pass

    def _build_nodes(self, raw_data: dict, graph: Graph) -> None:
        for node_dict in raw_data.get("nodes", []) or []:
            node_id = node_dict.get("id")
            if not node_id:
                continue
            node_id = str(node_id)
            label = node_dict.get("label") or node_dict.get("name") or node_id
            raw_attributes = {k: v for k, v in node_dict.items() if k not in RESERVED_NODE_KEYS}

            graph.add_node(Node(node_id=node_id, label=str(label), attributes=infer_attributes(raw_attributes)))

    def _build_edges(self, raw_data: dict, graph: Graph) -> None:
        for edge_dict in raw_data.get("edges", []) or []:
            source = edge_dict.get("source")
            target = edge_dict.get("target")
            if not source or not target:
                LOGGER.debug("Edge skipped - missing source or target: %s", edge_dict)
                continue

            weight = infer_type(edge_dict.get("weight", 1.0))
            raw_attributes = {k: v for k, v in edge_dict.items() if k not in RESERVED_EDGE_KEYS}

            graph.add_edge(
                Edge(
                    source=str(source),
                    target=str(target),
                    edge_id=None,
                    weight=float(weight) if isinstance(weight, (int, float)) else 1.0,
                    directed=graph.directed,
                    attributes=infer_attributes(raw_attributes),
                )
            )

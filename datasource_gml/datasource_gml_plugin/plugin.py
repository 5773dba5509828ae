import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from api.network_api.datasource_common.base import BaseDatasourcePlugin
from api.network_api.errors import MalformedBlockError
from api.network_api.model import Graph

from .scanner import Block, Token, scan_blocks

LOGGER = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_]+")


@dataclass
class ParseReport:
    nodes: int = 0
    edges: int = 0
    skipped_nodes: int = 0
    skipped_edges: int = 0

    @property
    def skipped(self) -> int:
        return self.skipped_nodes + self.skipped_edges


def _identifier(block: Block, key: str) -> str:
    value = block.first(key)
    # Only a scalar alphanumeric token counts; quotes are already stripped
    if isinstance(value, Token) and IDENTIFIER_RE.fullmatch(value.value):
        return value.value
    raise MalformedBlockError(f"{block.kind} block has no usable '{key}'", kind=block.kind, key=key)


def _is_true(value: Optional[str]) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes"}


class GmlDatasourcePlugin(BaseDatasourcePlugin):
    # Adapter to read GML-style markup and map it to a Graph object
    # Malformed node/edge blocks are skipped; a parse never fails on content

    def __init__(self):
        self.last_report = ParseReport()

    @property
    def plugin_id(self) -> str:
        return "gml"

    @property
    def display_name(self) -> str:
        return "GML file"

    @property
    def file_extensions(self) -> tuple:
        return (".gml",)

    def parameters_schema(self) -> dict:
        return {
            "file_path": {
                "type": "str",
                "label": "Path to GML file",
                "required": False
            },
            "text": {
                "type": "str",
                "label": "Raw GML markup (used instead of the file when given)",
                "required": False
            },
        }

    def _parse_source(self, text: str, **options: Any) -> dict:
        report = ParseReport()
        nodes = []
        edges = []
        seen_ids = set()
        directed = False

        for block in scan_blocks(text):
            if block.kind == "graph":
                directed = directed or _is_true(block.scalars().get("directed"))
                continue

            try:
                if block.kind == "node":
                    node_id = _identifier(block, "id")
                    if node_id in seen_ids:
                        raise MalformedBlockError(f"duplicate node id '{node_id}'", kind="node", key="id")
                    seen_ids.add(node_id)
                    nodes.append({**block.scalars(), "id": node_id})
                else:
                    source = _identifier(block, "source")
                    target = _identifier(block, "target")
                    edges.append({**block.scalars(), "source": source, "target": target})
            except MalformedBlockError as exc:
                LOGGER.debug("Skipping malformed block: %s", exc)
                if block.kind == "node":
                    report.skipped_nodes += 1
                else:
                    report.skipped_edges += 1

        report.nodes = len(nodes)
        report.edges = len(edges)
        self.last_report = report

        LOGGER.info(
            "Parsed GML: %d nodes, %d edges, %d malformed blocks skipped.",
            report.nodes, report.edges, report.skipped,
        )
        return {"nodes": nodes, "edges": edges, "directed": directed}


def parse(text: Optional[str]) -> Graph:
    """Parse GML markup into a Graph; never raises on malformed content."""
    return GmlDatasourcePlugin().load_graph(None, text=text or "")

"""Contract for renderers of an analysed network."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.network_platform.context import PipelineContext


class VisualizerPlugin(ABC):
    """Turns a finished pipeline run into a standalone HTML page.

    Renderers get the whole context rather than the bare graph: node size and
    color come from the degree annotation, and the charts from the degree
    distribution.
    """

    @property
    @abstractmethod
    def plugin_id(self) -> str:
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        ...

    def render_options_schema(self) -> dict[str, Any] | None:
        return None

    @abstractmethod
    def render(self, context: "PipelineContext", **options: Any) -> str:
        """Return HTML for ``context``; the context is never mutated."""

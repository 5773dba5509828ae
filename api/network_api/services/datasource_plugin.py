"""Contract for readers that turn network markup into a Graph."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from api.network_api.model import Graph


class DataSourcePlugin(ABC):
    """A reader for one network file format.

    Readers never fail on malformed content: blocks they cannot use are
    skipped. Only an unreadable source raises (``RetrievalFailure``).
    """

    @property
    @abstractmethod
    def plugin_id(self) -> str:
        """Stable identifier, used as the entry-point name."""

    @property
    @abstractmethod
    def display_name(self) -> str:
        ...

    @property
    def file_extensions(self) -> tuple[str, ...]:
        # Lowercase suffixes with the leading dot, e.g. (".gml",)
        return ()

    def parameters_schema(self) -> dict[str, Any] | None:
        return None

    @abstractmethod
    def load_graph(self, source: Any, **options: Any) -> Graph:
        """Read ``source`` (a path, or raw markup via ``text=``) into a Graph."""

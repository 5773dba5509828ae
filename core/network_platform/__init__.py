"""Orchestration for the network explorer: plugins, pipeline, workspace."""

from .context import PipelineContext
from .engine import GraphEngine, run_pipeline
from .registry import PluginRegistry
from .workspace import Workspace

__all__ = ["PipelineContext", "GraphEngine", "run_pipeline", "PluginRegistry", "Workspace"]

"""Orchestration components for the applint pipeline."""

from .aggregator import aggregate
from .decider import decide
from .discovery import ChangeDiscovery, resolve_range
from .dispatcher import Dispatcher
from .pipeline import LintPipeline, PipelineResult

__all__ = [
    "ChangeDiscovery",
    "Dispatcher",
    "LintPipeline",
    "PipelineResult",
    "aggregate",
    "decide",
    "resolve_range",
]

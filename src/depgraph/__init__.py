"""Directed acyclic dependency graphs with transitive queries and topological ordering."""

__all__ = [
    "ConfigError",
    "CycleDetectedError",
    "DependencyGraph",
    "DependencyGraphError",
    "GraphConfig",
    "InternalConsistencyError",
    "NodeNotFoundError",
    "NodeOrdering",
    "SelfDependencyError",
    "VisitState",
    "depth_first_order",
    "find_pyproject_toml",
    "get_config",
    "load_config",
    "topological_layers",
]

from ._config import GraphConfig, find_pyproject_toml, get_config, load_config
from ._enums import NodeOrdering, VisitState
from ._errors import (
    ConfigError,
    CycleDetectedError,
    DependencyGraphError,
    InternalConsistencyError,
    NodeNotFoundError,
    SelfDependencyError,
)
from ._graph import DependencyGraph, depth_first_order, topological_layers

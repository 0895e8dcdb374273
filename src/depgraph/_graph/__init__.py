"""Graph module providing the dependency graph engine.

This module contains:
- DependencyGraph[T]: A mutable directed acyclic graph that rejects cycles on insertion
- depth_first_order: Post-order traversal with transient visit marks
- topological_layers: Layered ordering of a whole graph
"""

from ._algorithms import depth_first_order, topological_layers
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "depth_first_order", "topological_layers"]

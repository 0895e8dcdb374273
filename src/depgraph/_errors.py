"""Exceptions raised by dependency graph operations."""

from collections.abc import Hashable


class DependencyGraphError(Exception):
    """Base class for all depgraph errors."""


class NodeNotFoundError(DependencyGraphError, KeyError):
    """Raised when a query references a node that was never registered."""

    def __init__(self, node: Hashable) -> None:
        self.node = node
        super().__init__(f"Node {node!r} is not in the graph")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class CycleDetectedError(DependencyGraphError):
    """Raised when adding an edge would close a cycle.

    The graph is left exactly as it was before the rejected call.
    """

    def __init__(self, dependent: Hashable, dependency: Hashable, message: str | None = None) -> None:
        self.dependent = dependent
        self.dependency = dependency
        if message is None:
            message = (
                f"Adding dependency {dependent!r} -> {dependency!r} would create a cycle: "
                f"{dependency!r} already depends on {dependent!r}"
            )
        super().__init__(message)


class SelfDependencyError(CycleDetectedError):
    """Raised when a node is declared to depend on itself."""

    def __init__(self, node: Hashable) -> None:
        super().__init__(node, node, f"Node {node!r} cannot depend on itself")


class InternalConsistencyError(DependencyGraphError):
    """Raised when a traversal reaches a node that is still in progress.

    This can only happen if the graph's adjacency was modified without going
    through ``DependencyGraph.add_dependency``.
    """

    def __init__(self, node: Hashable) -> None:
        self.node = node
        super().__init__(f"Node {node!r} was reached while still in progress; the graph contains a cycle")


class ConfigError(DependencyGraphError):
    """Error in depgraph configuration."""

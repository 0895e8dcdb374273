"""Incrementally built, always-acyclic dependency graph."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Iterator, MutableMapping
from dataclasses import dataclass, field

from depgraph._config import GraphConfig
from depgraph._enums import NodeOrdering, VisitState
from depgraph._errors import (
    CycleDetectedError,
    InternalConsistencyError,
    NodeNotFoundError,
    SelfDependencyError,
)

from ._algorithms import depth_first_order, topological_layers

logger = logging.getLogger(__name__)

type _Adjacency[T] = dict[T, dict[T, None]]


@dataclass(slots=True)
class DependencyGraph[T: Hashable]:
    """A directed acyclic graph of "depends on" relationships.

    Nodes are opaque hashable identifiers, registered the first time they
    appear in an edge. The graph keeps two identifier-keyed mappings:

    - ``_dependencies[a]`` holds the nodes ``a`` directly depends on
    - ``_dependents[b]`` holds the nodes that directly depend on ``b``

    Every node is a key in both mappings and the two always describe the
    same edge set. Inner mappings are used as insertion-ordered sets so
    that traversals are deterministic.

    Acyclicity is enforced by ``add_dependency``: an edge that would close
    a cycle is rejected before anything is modified.

    The graph has no internal locking. Callers sharing one instance across
    threads must serialize every call themselves.

    Attributes:
        config: Traversal options (neighbour ordering).
        _dependencies: Mapping from node to its direct dependencies.
        _dependents: Mapping from node to its direct dependents.

    """

    config: GraphConfig = field(default_factory=GraphConfig)
    _dependencies: _Adjacency[T] = field(default_factory=dict, repr=False)
    _dependents: _Adjacency[T] = field(default_factory=dict, repr=False)

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[T, T]],
        config: GraphConfig | None = None,
    ) -> DependencyGraph[T]:
        """Build a graph from ``(dependent, dependency)`` pairs.

        Args:
            edges: Pairs meaning "dependent depends on dependency".
            config: Optional traversal options.

        Returns:
            A new DependencyGraph instance.

        Raises:
            CycleDetectedError: If any pair would close a cycle.

        Example:
            >>> graph = DependencyGraph.from_edges([("app", "lib"), ("lib", "core")])
            >>> graph.topological_sort_dependencies("app")
            ['core', 'lib', 'app']

        """
        graph = cls(config=config or GraphConfig())
        for dependent, dependency in edges:
            graph.add_dependency(dependent, dependency)
        return graph

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_dependency(self, dependent: T, dependency: T) -> None:
        """Declare that ``dependent`` directly depends on ``dependency``.

        Both nodes are registered if needed. Declaring an edge that already
        exists does nothing.

        Args:
            dependent: The node that needs ``dependency``.
            dependency: The node that must come first.

        Raises:
            SelfDependencyError: If both arguments are the same node.
            CycleDetectedError: If ``dependency`` already depends on
                ``dependent``, directly or transitively. The graph is left
                unchanged.

        """
        if dependent == dependency:
            logger.debug("Rejected self-dependency of %r", dependent)
            raise SelfDependencyError(dependent)

        if dependency in self._dependencies.get(dependent, {}):
            logger.debug("Dependency %r -> %r already present", dependent, dependency)
            return

        if self.depends_on(dependency, dependent):
            logger.debug("Rejected dependency %r -> %r: would create a cycle", dependent, dependency)
            raise CycleDetectedError(dependent, dependency)

        self._register(dependent)
        self._register(dependency)
        self._dependencies[dependent][dependency] = None
        self._dependents[dependency][dependent] = None
        logger.debug("Added dependency %r -> %r", dependent, dependency)

    def _register(self, node: T) -> None:
        self._dependencies.setdefault(node, {})
        self._dependents.setdefault(node, {})

    # ------------------------------------------------------------------
    # Direct queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> frozenset[T]:
        """All nodes in the graph."""
        return frozenset(self._dependencies)

    def edges(self) -> Iterator[tuple[T, T]]:
        """Iterate over ``(dependent, dependency)`` pairs in declaration order per node."""
        for dependent, dependencies in self._dependencies.items():
            for dependency in dependencies:
                yield dependent, dependency

    def direct_dependencies(self, node: T) -> frozenset[T]:
        """Get the nodes ``node`` directly depends on.

        Raises:
            NodeNotFoundError: If ``node`` is not in the graph.

        """
        self._require(node)
        return frozenset(self._dependencies[node])

    def direct_dependents(self, node: T) -> frozenset[T]:
        """Get the nodes that directly depend on ``node``.

        Raises:
            NodeNotFoundError: If ``node`` is not in the graph.

        """
        self._require(node)
        return frozenset(self._dependents[node])

    def roots(self) -> frozenset[T]:
        """Get nodes with no dependencies."""
        return frozenset(n for n, deps in self._dependencies.items() if not deps)

    def leaves(self) -> frozenset[T]:
        """Get nodes that nothing depends on."""
        return frozenset(n for n, deps in self._dependents.items() if not deps)

    # ------------------------------------------------------------------
    # Transitive queries
    # ------------------------------------------------------------------

    def depends_on(self, dependent: T, dependency: T) -> bool:
        """Check whether ``dependent`` transitively depends on ``dependency``.

        Unknown nodes depend on nothing, so this returns False for them.

        Args:
            dependent: The node whose dependencies are searched.
            dependency: The node to look for.

        Returns:
            True if ``dependency`` is reachable from ``dependent``.

        """
        if dependent not in self._dependencies or dependency not in self._dependents:
            return False

        visited: set[T] = {dependent}
        stack = [dependent]
        while stack:
            current = stack.pop()
            for nxt in self._dependencies[current]:
                if nxt == dependency:
                    return True
                if nxt not in visited:
                    visited.add(nxt)
                    stack.append(nxt)
        return False

    def dependencies_of(self, node: T) -> frozenset[T]:
        """Get all transitive dependencies of a node.

        Args:
            node: The node to query.

        Returns:
            Set of all nodes that this node transitively depends on, not
            including the node itself.

        Raises:
            NodeNotFoundError: If ``node`` is not in the graph.

        """
        self._require(node)
        return self._closure(node, self._dependencies)

    def dependents_of(self, node: T) -> frozenset[T]:
        """Get all transitive dependents of a node.

        Args:
            node: The node to query.

        Returns:
            Set of all nodes that transitively depend on this node, not
            including the node itself.

        Raises:
            NodeNotFoundError: If ``node`` is not in the graph.

        """
        self._require(node)
        return self._closure(node, self._dependents)

    @staticmethod
    def _closure(node: T, adjacency: _Adjacency[T]) -> frozenset[T]:
        visited: set[T] = set()
        stack = list(adjacency[node])
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(adjacency[current])
        return frozenset(visited)

    # ------------------------------------------------------------------
    # Ordering queries
    # ------------------------------------------------------------------

    def topological_sort_dependencies(
        self,
        node: T,
        *,
        marks: MutableMapping[T, VisitState] | None = None,
    ) -> list[T]:
        """Order ``node`` and all of its dependencies, dependencies first.

        Processing the result front to back guarantees every prerequisite of
        an item has already been processed. ``node`` is always last.

        Args:
            node: The node whose dependency subgraph is sorted.
            marks: Optional reusable scratch mapping for traversal state.
                It is cleared before use.

        Returns:
            A permutation of ``{node} | dependencies_of(node)``.

        Raises:
            NodeNotFoundError: If ``node`` is not in the graph.
            InternalConsistencyError: If the adjacency holds a cycle.

        """
        self._require(node)
        order = depth_first_order(node, self._iter_dependencies, marks)
        logger.debug("Sorted %d dependencies of %r", len(order) - 1, node)
        return order

    def topological_sort_dependents(
        self,
        node: T,
        *,
        marks: MutableMapping[T, VisitState] | None = None,
    ) -> list[T]:
        """Order ``node`` and everything depending on it, dependencies first.

        ``node`` is always first; every other item appears after all of its
        own dependencies that belong to the sorted set.

        Args:
            node: The node whose dependent subgraph is sorted.
            marks: Optional reusable scratch mapping for traversal state.
                It is cleared before use.

        Returns:
            A permutation of ``{node} | dependents_of(node)``.

        Raises:
            NodeNotFoundError: If ``node`` is not in the graph.
            InternalConsistencyError: If the adjacency holds a cycle.

        """
        self._require(node)
        # Post-order over dependents puts the furthest dependents first
        order = depth_first_order(node, self._iter_dependents, marks)
        order.reverse()
        logger.debug("Sorted %d dependents of %r", len(order) - 1, node)
        return order

    def dependency_layers(self) -> list[frozenset[T]]:
        """Split the whole graph into layers, dependencies first.

        Layer 0 holds the nodes with no dependencies; every node in a later
        layer depends only on nodes in earlier layers.

        Raises:
            InternalConsistencyError: If the adjacency holds a cycle.

        """
        layers = topological_layers(self._dependencies, self._dependents)
        return [frozenset(layer) for layer in layers]

    def dependent_layers(self) -> list[frozenset[T]]:
        """Split the whole graph into layers, dependents first.

        Layer 0 holds the nodes nothing depends on; every node in a later
        layer is depended on only by nodes in earlier layers.

        Raises:
            InternalConsistencyError: If the adjacency holds a cycle.

        """
        layers = topological_layers(self._dependents, self._dependencies)
        return [frozenset(layer) for layer in layers]

    def topological_order(self) -> list[T]:
        """Return every node in the graph, dependencies before dependents."""
        return [n for layer in topological_layers(self._dependencies, self._dependents) for n in layer]

    def _iter_dependencies(self, node: T) -> Iterable[T]:
        return self._ordered(self._dependencies[node])

    def _iter_dependents(self, node: T) -> Iterable[T]:
        return self._ordered(self._dependents[node])

    def _ordered(self, neighbours: dict[T, None]) -> Iterable[T]:
        if self.config.ordering is NodeOrdering.SORTED:
            return sorted(neighbours)  # type: ignore[type-var]
        return neighbours.keys()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate the internal structure and return a list of error messages.

        Checks for:
        - Nodes present in only one of the two mappings
        - Edges pointing to unregistered nodes
        - Edges recorded in one direction only
        - Cycles

        Returns:
            List of error messages. Empty list if the graph is consistent.

        """
        errors: list[str] = []

        only_forward = self._dependencies.keys() - self._dependents.keys()
        only_reverse = self._dependents.keys() - self._dependencies.keys()
        if only_forward:
            errors.append(f"Nodes missing from dependents mapping: {only_forward}")
        if only_reverse:
            errors.append(f"Nodes missing from dependencies mapping: {only_reverse}")

        for dependent, dependencies in self._dependencies.items():
            for dependency in dependencies:
                if dependency not in self._dependents:
                    errors.append(f"Node {dependent!r} has missing dependency {dependency!r}")
                elif dependent not in self._dependents[dependency]:
                    errors.append(f"Edge {dependent!r} -> {dependency!r} has no reverse entry")

        for dependency, dependents in self._dependents.items():
            for dependent in dependents:
                if dependent not in self._dependencies:
                    errors.append(f"Node {dependency!r} has missing dependent {dependent!r}")
                elif dependency not in self._dependencies[dependent]:
                    errors.append(f"Edge {dependent!r} -> {dependency!r} has no forward entry")

        if not errors:
            try:
                topological_layers(self._dependencies, self._dependents)
            except InternalConsistencyError:
                errors.append("Graph contains a cycle")

        return errors

    def _require(self, node: T) -> None:
        if node not in self._dependencies:
            raise NodeNotFoundError(node)

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._dependencies)

    def __contains__(self, node: object) -> bool:
        """Check if a node is in the graph."""
        return node in self._dependencies

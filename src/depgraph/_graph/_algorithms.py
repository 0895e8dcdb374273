"""Graph algorithms for dependency graph operations."""

import logging
from collections.abc import Callable, Collection, Hashable, Iterable, Iterator, Mapping, MutableMapping

from depgraph._enums import VisitState
from depgraph._errors import InternalConsistencyError

logger = logging.getLogger(__name__)


def depth_first_order[T: Hashable](
    start: T,
    neighbours: Callable[[T], Iterable[T]],
    marks: MutableMapping[T, VisitState] | None = None,
) -> list[T]:
    """Return every node reachable from ``start`` in depth-first post-order.

    A node is emitted only after all of its neighbours have been emitted, so
    when ``neighbours`` yields a node's dependencies the result lists
    dependencies before dependents, ending with ``start``.

    The traversal is iterative and keeps its state in ``marks``; the graph
    itself is never copied.

    Args:
        start: Node to start the traversal from.
        neighbours: Callable returning the nodes adjacent to a node, in the
            order they should be visited.
        marks: Optional scratch mapping for the visit states. It is cleared
            before use, so a caller can reuse one mapping across calls.

    Returns:
        List of nodes in post-order, ``start`` last.

    Raises:
        InternalConsistencyError: If a node still in progress is reached
            again, which means the adjacency contains a cycle.

    Example:
        >>> deps = {"a": ["b"], "b": ["c"], "c": []}
        >>> depth_first_order("a", deps.__getitem__)
        ['c', 'b', 'a']

    """
    if marks is None:
        marks = {}
    else:
        marks.clear()

    order: list[T] = []
    marks[start] = VisitState.IN_PROGRESS
    stack: list[tuple[T, Iterator[T]]] = [(start, iter(neighbours(start)))]

    while stack:
        node, pending = stack[-1]
        for neighbour in pending:
            state = marks.get(neighbour, VisitState.UNVISITED)
            if state == VisitState.FINISHED:
                continue
            if state == VisitState.IN_PROGRESS:
                raise InternalConsistencyError(neighbour)
            marks[neighbour] = VisitState.IN_PROGRESS
            stack.append((neighbour, iter(neighbours(neighbour))))
            break
        else:
            stack.pop()
            marks[node] = VisitState.FINISHED
            order.append(node)

    return order


def topological_layers[T: Hashable](
    predecessors: Mapping[T, Collection[T]],
    successors: Mapping[T, Collection[T]],
) -> list[list[T]]:
    """Group the nodes of a graph into topological layers.

    Layer 0 holds the nodes without predecessors; every node in layer ``k``
    has all of its predecessors in layers ``0..k-1``. The order within a
    layer follows the iteration order of the input mappings.

    Args:
        predecessors: Mapping from every node to the nodes that must come
            before it.
        successors: Mapping from node to the nodes that must come after it.

    Returns:
        List of layers, each a list of nodes.

    Raises:
        InternalConsistencyError: If some nodes can never be placed because
            they lie on a cycle.

    Example:
        >>> topological_layers({"a": [], "b": ["a"], "c": ["a"]}, {"a": ["b", "c"]})
        [['a'], ['b', 'c']]

    """
    remaining = {node: len(preds) for node, preds in predecessors.items()}
    layer = [node for node, count in remaining.items() if count == 0]
    layers: list[list[T]] = []
    placed = 0

    while layer:
        layers.append(layer)
        placed += len(layer)
        next_layer: list[T] = []
        for node in layer:
            for successor in successors.get(node, ()):
                remaining[successor] -= 1
                if remaining[successor] == 0:
                    next_layer.append(successor)
        layer = next_layer

    if placed != len(remaining):
        stuck = next(node for node, count in remaining.items() if count > 0)
        raise InternalConsistencyError(stuck)

    logger.debug("Split %d nodes into %d layers", placed, len(layers))
    return layers

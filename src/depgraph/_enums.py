"""String enums used by the graph engine, with per-member docstrings."""

from enum import StrEnum
from typing import Self


class _DocumentedStrEnum(StrEnum):
    """String enum whose members take an optional docstring as second value."""

    def __new__(cls, value: str, doc: str = "") -> Self:
        member = str.__new__(cls, value)
        member._value_ = value
        member.__doc__ = doc
        return member


class NodeOrdering(_DocumentedStrEnum):
    """Order in which a node's neighbours are visited during traversals."""

    INSERTION = "insertion", "Neighbours are visited in the order their edges were declared."
    SORTED = "sorted", "Neighbours are visited in ascending order of their identifiers."


class VisitState(_DocumentedStrEnum):
    """Transient mark given to a node during a depth-first topological sort."""

    UNVISITED = "unvisited", "The node has not been reached yet."
    IN_PROGRESS = "in_progress", "The node has been entered but not all of its neighbours are finished."
    FINISHED = "finished", "The node and everything reachable from it have been emitted."

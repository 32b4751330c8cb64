"""Sequence utilities: creation and validation of activity lists.

Concepts
--------
Sequence
    A list of task ids containing every task exactly once, in which each
    task appears after all of its predecessors (a topological order of the
    precedence graph). The decoder relies on this invariant; functions here
    help produce and verify such sequences.
"""

from __future__ import annotations

from typing import Sequence

from .exceptions import MalformedGraphError
from .graph import TaskGraph


def create_base_sequence(graph: TaskGraph) -> list[int]:
    """Create the canonical lowest-id-first topological sequence.

    Args:
        graph: Validated precedence graph.

    Returns:
        Deterministic feasible sequence, useful as a baseline and in tests.
    """
    return graph.topological_order()


def validate_sequence(graph: TaskGraph, sequence: Sequence[int]) -> bool:
    """Validate a sequence's completeness and precedence order.

    Returns:
        True if the sequence is valid (so the call can sit in assertions).

    Raises:
        ValueError: If the length is wrong, an id is out of range or
            repeated, or a task appears before one of its predecessors.
    """
    if len(sequence) != graph.size:
        raise ValueError(f"Incomplete sequence: {len(sequence)}/{graph.size} tasks")
    placed = [False] * graph.size
    for pos, j in enumerate(sequence):
        if not (0 <= j < graph.size):
            raise ValueError(f"Task index out of range: {j}")
        if placed[j]:
            raise ValueError(f"Task {j} appears twice (position {pos})")
        for p in graph.predecessors[j]:
            if not placed[p]:
                raise ValueError(f"Task {j} at position {pos} precedes its predecessor {p}")
        placed[j] = True
    if sequence[0] != graph.source or sequence[-1] != graph.sink:
        raise MalformedGraphError("sequence must start at the source and end at the sink")
    return True
